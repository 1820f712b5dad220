import logging

import pytest

from sqdpp import RunContext


def test_defaults():
    ctx = RunContext()
    assert ctx.run_id == ctx.date_str
    assert len(ctx.date_str) == 14 and ctx.date_str.isdigit()
    assert (ctx.n_recovery, ctx.samples_per_batch, ctx.num_shots) == (3, 1000, 10000)
    assert ctx.with_hf and not ctx.verbose
    assert (ctx.mpi_rank, ctx.mpi_size) == (0, 1)
    assert not ctx.distributed


def test_from_args_ignores_host_options():
    ctx = RunContext.from_args([
        "--recovery", "5",
        "--number_of_samples", "20",
        "--backend_name", "ibm_test",
        "--num_shots", "100",
        "-v",
        "--no-hf",
        "--run-id", "abc",
        "--host-flag", "x",
    ])
    assert ctx.n_recovery == 5
    assert ctx.samples_per_batch == 20
    assert ctx.backend_name == "ibm_test"
    assert ctx.num_shots == 100
    assert ctx.verbose
    assert not ctx.with_hf
    assert ctx.run_id == "abc"


def test_from_args_validates():
    with pytest.raises(ValueError):
        RunContext.from_args(["--recovery", "0"])


def test_read_only():
    ctx = RunContext(run_id="ro")
    with pytest.raises(AttributeError):
        ctx.run_id = "changed"


def test_with_comm_and_validate():
    class FakeComm:
        def Get_rank(self):
            return 2

        def Get_size(self):
            return 3

    ctx = RunContext(run_id="c").with_comm(FakeComm())
    assert (ctx.mpi_rank, ctx.mpi_size) == (2, 3)
    assert ctx.distributed
    assert ctx.run_id == "c"
    ctx.validate()

    with pytest.raises(ValueError):
        RunContext(mpi_rank=3, mpi_size=3).validate()


def test_summary_and_dict():
    ctx = RunContext(run_id="abc", backend_name="ibm_test")
    text = ctx.summary()
    assert "# run_id: abc" in text
    assert "# backend_name: ibm_test" in text
    assert "# n_recovery: 3" in text
    d = ctx.as_dict()
    assert d["run_id"] == "abc"
    assert "comm" not in d


def test_logger_prefix(caplog):
    ctx = RunContext(run_id="abc")
    with caplog.at_level(logging.INFO):
        ctx.get_logger("sqdpp.test").info("hello %d", 7)
    assert "[abc r0/1] hello 7" in caplog.text


def test_from_namespace_uses_host_parser():
    import argparse

    from sqdpp.context import build_arg_parser

    parser = argparse.ArgumentParser()
    build_arg_parser(parser)
    parser.add_argument("--input")
    args = parser.parse_args(["--input", "x.csv", "--recov", "2", "--run-id", "ns"])
    ctx = RunContext.from_namespace(args)
    assert ctx.n_recovery == 2
    assert ctx.run_id == "ns"
    assert ctx.with_hf
