# --*-- conding:utf-8 --*--
# @time:10/19/26 09:20
# @File:context.py

from __future__ import annotations
import argparse
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _timestamp() -> str:
    return time.strftime("%Y%m%d%H%M%S")


def configure_logging(verbose: bool = False) -> None:
    """Install the root handler once; INFO when verbose, WARNING otherwise."""
    level = logging.INFO if verbose else logging.WARNING
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)


class _RunLogAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[{self.extra['run_id']} r{self.extra['rank']}/{self.extra['size']}] {msg}", kwargs


@dataclass(frozen=True)
class RunContext:
    """
    Run-scoped, read-only configuration shared by every pipeline stage.

    Attributes
    ----------
    date_str : str
        Compact timestamp (YYYYmmddHHMMSS) taken when the context is created.
    run_id : str
        Identifier used in artifact names. Defaults to ``date_str``.
    n_recovery : int
        Number of configuration recovery iterations.
    samples_per_batch : int
        Number of sampled bitstrings per batch.
    verbose : bool
        Emit INFO-level progress lines.
    with_hf : bool
        Seed the Hartree-Fock reference configuration into every unique set.
    backend_name : str
        Name of the backend that produced the samples (bookkeeping only).
    num_shots : int
        Shot count of the sampling job (bookkeeping only).
    comm : Any
        Communicator of the owning distributed job, if any.
    mpi_rank, mpi_size : int
        Rank of this process and number of processes in the job.
    """
    date_str: str = field(default_factory=_timestamp)
    run_id: str = ""
    n_recovery: int = 3
    samples_per_batch: int = 1000
    verbose: bool = False
    with_hf: bool = True
    backend_name: str = ""
    num_shots: int = 10000
    comm: Any = field(default=None, repr=False, compare=False)
    mpi_rank: int = 0
    mpi_size: int = 1

    def __post_init__(self):
        if not self.run_id:
            object.__setattr__(self, "run_id", self.date_str)

    @property
    def distributed(self) -> bool:
        return self.mpi_size > 1

    def validate(self) -> None:
        """Light validation of the configuration."""
        if self.n_recovery <= 0:
            raise ValueError("n_recovery must be > 0.")
        if self.samples_per_batch <= 0:
            raise ValueError("samples_per_batch must be > 0.")
        if self.num_shots <= 0:
            raise ValueError("num_shots must be > 0.")
        if self.mpi_size <= 0 or not (0 <= self.mpi_rank < self.mpi_size):
            raise ValueError(f"Invalid rank/size: {self.mpi_rank}/{self.mpi_size}.")

    def with_comm(self, comm: Any) -> "RunContext":
        """Bind an MPI-like communicator (``Get_rank``/``Get_size``)."""
        return replace(self, comm=comm, mpi_rank=int(comm.Get_rank()), mpi_size=int(comm.Get_size()))

    def summary(self) -> str:
        lines = [
            f"# date: {self.date_str}",
            f"# run_id: {self.run_id}",
            f"# n_recovery: {self.n_recovery}",
            f"# samples_per_batch: {self.samples_per_batch}",
            f"# backend_name: {self.backend_name}",
            f"# num_shots: {self.num_shots}",
        ]
        return "\n".join(lines) + "\n"

    def as_dict(self) -> Dict[str, Any]:
        """Return a serializable dictionary representation."""
        return {
            "date": self.date_str,
            "run_id": self.run_id,
            "n_recovery": int(self.n_recovery),
            "samples_per_batch": int(self.samples_per_batch),
            "verbose": bool(self.verbose),
            "with_hf": bool(self.with_hf),
            "backend_name": self.backend_name,
            "num_shots": int(self.num_shots),
            "mpi_rank": int(self.mpi_rank),
            "mpi_size": int(self.mpi_size),
        }

    def get_logger(self, name: str) -> logging.LoggerAdapter:
        return _RunLogAdapter(
            logging.getLogger(name),
            {"run_id": self.run_id, "rank": self.mpi_rank, "size": self.mpi_size},
        )

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None, **overrides) -> "RunContext":
        """
        Build a context from process arguments. Options not recognised here are
        left for the host program.
        """
        args, _ = build_arg_parser().parse_known_args(argv)
        return cls.from_namespace(args, **overrides)

    @classmethod
    def from_namespace(cls, args: argparse.Namespace, **overrides) -> "RunContext":
        """Build a context from a namespace parsed with the ``build_arg_parser`` options."""
        kwargs: Dict[str, Any] = dict(
            n_recovery=args.recovery,
            samples_per_batch=args.number_of_samples,
            verbose=args.verbose,
            with_hf=not args.no_hf,
            backend_name=args.backend_name,
            num_shots=args.num_shots,
        )
        if args.run_id:
            kwargs["run_id"] = args.run_id
        kwargs.update(overrides)
        ctx = cls(**kwargs)
        ctx.validate()
        return ctx


def build_arg_parser(parser: Optional[argparse.ArgumentParser] = None) -> argparse.ArgumentParser:
    p = parser or argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    p.add_argument("--recovery", type=int, default=3, help="Number of configuration recovery iterations")
    p.add_argument("--number_of_samples", type=int, default=1000, help="Samples per batch")
    p.add_argument("--backend_name", type=str, default="", help="Backend that produced the samples")
    p.add_argument("--num_shots", type=int, default=10000, help="Shot count of the sampling job")
    p.add_argument("-v", "--verbose", action="store_true", help="Print progress messages")
    p.add_argument("--no-hf", dest="no_hf", action="store_true", help="Do not seed the Hartree-Fock reference")
    p.add_argument("--run-id", dest="run_id", type=str, default=None, help="Override the timestamp run id")
    return p


