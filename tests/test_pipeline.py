import numpy as np
import pytest

from sqdpp import RecoveryPipeline, RunContext, ShapeError, artifact_name


def _rows(pairs, norb):
    """Bit rows from (sector A, sector B) CI strings."""
    return np.array(
        [[(a >> i) & 1 for i in range(norb)] + [(b >> i) & 1 for i in range(norb)] for a, b in pairs],
        dtype=bool,
    )


def test_artifact_name():
    assert artifact_name("AlphaDets", "20260101120000", 2) == "AlphaDets_20260101120000_2.bin"
    assert artifact_name("AlphaDets", "run", 0, rank=3) == "AlphaDets_run_0_r3.bin"


def test_end_to_end_closed_shell(tmp_path):
    ctx = RunContext(run_id="e2e", with_hf=False)
    batch = [[1, 1, 1, 1], [1, 0, 0, 1]]
    res = RecoveryPipeline(ctx, out_dir=tmp_path).run_iteration(
        batch, norb=2, num_elec=1, max_configs=10, i_recovery=0
    )
    assert res.path == tmp_path / "AlphaDets_e2e_0.bin"
    assert res.path.read_bytes() == b"\x01\x02\x03"
    assert res.sector_a.tolist() == [1, 2, 3]
    assert res.sector_b.tolist() == [1, 2, 3]
    assert res.counts == {"rows": 2, "unique_a": 3, "kept_a": 3, "discarded_a": 0}


def test_hf_seeded_into_artifact(tmp_path):
    ctx = RunContext(run_id="hf", with_hf=True)
    batch = _rows([(1, 2), (4, 8)], norb=4)
    res = RecoveryPipeline(ctx, out_dir=tmp_path).run_iteration(batch, 4, 2, 10, 1)
    assert res.sector_a.tolist() == [1, 2, 3, 4, 8]
    assert res.path.name == "AlphaDets_hf_1.bin"
    assert res.path.read_bytes() == bytes([1, 2, 3, 4, 8])


def test_truncation_and_reserved_reference(tmp_path):
    ctx = RunContext(run_id="tr", with_hf=True)
    batch = _rows([(1, 2), (4, 8)], norb=4)

    res = RecoveryPipeline(ctx, out_dir=tmp_path).run_iteration(batch, 4, 2, 2, 0)
    assert res.sector_a.tolist() == [1, 2]
    assert res.counts["discarded_a"] == 3

    res = RecoveryPipeline(ctx, out_dir=tmp_path, reserve_reference=True).run_iteration(batch, 4, 2, 2, 0)
    assert res.sector_a.tolist() == [1, 3]
    assert res.path.read_bytes() == b"\x01\x03"


def test_open_shell_writes_both_sectors(tmp_path):
    ctx = RunContext(run_id="os", with_hf=False)
    batch = [[1, 1, 1, 1], [1, 0, 0, 1]]
    res = RecoveryPipeline(ctx, out_dir=tmp_path, open_shell=True).run_iteration(batch, 2, 1, 10, 0)
    assert res.paths["sector_a"].name == "AlphaDets_os_0.bin"
    assert res.paths["sector_b"].name == "BetaDets_os_0.bin"
    assert res.paths["sector_a"].read_bytes() == b"\x01\x03"
    assert res.paths["sector_b"].read_bytes() == b"\x02\x03"
    assert res.counts["kept_b"] == 2


def test_rank_in_name_for_multi_process_jobs(tmp_path):
    class FakeComm:
        def Get_rank(self):
            return 1

        def Get_size(self):
            return 4

    ctx = RunContext(run_id="mp", with_hf=False).with_comm(FakeComm())
    res = RecoveryPipeline(ctx, out_dir=tmp_path).run_iteration([[1, 0]], 1, 1, 10, 2)
    assert res.path.name == "AlphaDets_mp_2_r1.bin"


def test_norb_mismatch(tmp_path):
    ctx = RunContext(run_id="x", with_hf=False)
    with pytest.raises(ShapeError):
        RecoveryPipeline(ctx, out_dir=tmp_path).run_iteration([[1, 0, 1, 0]], 3, 1, 10, 0)


def test_io_error_aborts_iteration(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    ctx = RunContext(run_id="io", with_hf=False)
    with pytest.raises(OSError):
        RecoveryPipeline(ctx, out_dir=blocker).run_iteration([[1, 0]], 1, 1, 10, 0)


def test_recovery_loop(tmp_path):
    ctx = RunContext(run_id="loop", n_recovery=3, with_hf=False)
    calls = []

    def batch_source(i_recovery, previous):
        calls.append((i_recovery, None if previous is None else previous.i_recovery))
        return _rows([(i_recovery + 1, 0)], norb=3)

    results = RecoveryPipeline(ctx, out_dir=tmp_path).run(batch_source, norb=3, num_elec=1, max_configs=10)
    assert calls == [(0, None), (1, 0), (2, 1)]
    assert [r.path.name for r in results] == ["AlphaDets_loop_0.bin", "AlphaDets_loop_1.bin", "AlphaDets_loop_2.bin"]
    assert results[2].path.read_bytes() == b"\x00\x03"
