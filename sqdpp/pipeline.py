# --*-- conding:utf-8 --*--
# @time:10/19/26 11:20
# @File:pipeline.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from .codec import DeterminantCodec
from .context import RunContext
from .decoder import BitMatrixDecoder
from .errors import ShapeError
from .sink import BinarySink
from .truncation import TruncationPolicy
from .unifier import ConfigurationUnifier


def artifact_name(prefix: str, run_id: str, i_recovery: int, rank: Optional[int] = None) -> str:
    """``<prefix>_<run_id>_<iteration>.bin``; ``_r<rank>`` is added before the extension when given."""
    stem = f"{prefix}_{run_id}_{int(i_recovery)}"
    if rank is not None:
        stem += f"_r{int(rank)}"
    return stem + ".bin"


@dataclass
class IterationResult:
    """
    Outcome of one recovery iteration.

    ``sector_b`` / ``paths["sector_b"]`` are only distinct in open-shell mode;
    closed-shell runs write a single shared alphabet.
    """
    i_recovery: int
    norb: int
    sector_a: np.ndarray
    sector_b: np.ndarray
    paths: Dict[str, Path] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        return self.paths["sector_a"]


BatchSource = Callable[[int, Optional[IterationResult]], object]


class RecoveryPipeline:
    """
    Per-iteration flow:
      decode -> unify (+HF) -> truncate -> encode -> write

    Artifacts land in ``out_dir``. In a multi-process job the rank is part of
    every artifact name.
    """

    def __init__(
        self,
        ctx: RunContext,
        out_dir: str | Path = ".",
        open_shell: bool = False,
        reserve_reference: bool = False,
        alpha_prefix: str = "AlphaDets",
        beta_prefix: str = "BetaDets",
    ):
        self.ctx = ctx
        self.open_shell = bool(open_shell)
        self.reserve_reference = bool(reserve_reference)
        self.alpha_prefix = alpha_prefix
        self.beta_prefix = beta_prefix

        self.decoder = BitMatrixDecoder(ctx)
        self.unifier = ConfigurationUnifier(ctx, open_shell=self.open_shell)
        self.sink = BinarySink(ctx, out_dir)
        self._log = ctx.get_logger(__name__)

    def _name(self, prefix: str, i_recovery: int) -> str:
        rank = self.ctx.mpi_rank if self.ctx.distributed else None
        return artifact_name(prefix, self.ctx.run_id, i_recovery, rank=rank)

    def run_iteration(
        self,
        batch,
        norb: int,
        num_elec: int,
        max_configs: int,
        i_recovery: int,
    ) -> IterationResult:
        strings = self.decoder.decode(batch)
        if strings.norb != int(norb):
            raise ShapeError(f"Batch rows imply norb={strings.norb}, expected norb={norb}")
        norb = strings.norb

        unified = self.unifier.unify(strings, num_elec)
        reserve = unified.reference if self.reserve_reference else None
        policy = TruncationPolicy(self.ctx, max_configs, reserve=reserve)
        codec = DeterminantCodec(norb)

        trunc_a = policy.apply(unified.sector_a)
        paths = {"sector_a": self.sink.write(codec.encode_many(trunc_a.kept), self._name(self.alpha_prefix, i_recovery))}
        counts = {
            "rows": len(strings),
            "unique_a": len(unified.sector_a),
            "kept_a": len(trunc_a.kept),
            "discarded_a": trunc_a.discarded,
        }

        if self.open_shell:
            trunc_b = policy.apply(unified.sector_b)
            paths["sector_b"] = self.sink.write(
                codec.encode_many(trunc_b.kept), self._name(self.beta_prefix, i_recovery)
            )
            kept_b = trunc_b.kept
            counts.update(unique_b=len(unified.sector_b), kept_b=len(kept_b), discarded_b=trunc_b.discarded)
        else:
            kept_b = trunc_a.kept.copy()
            paths["sector_b"] = paths["sector_a"]

        return IterationResult(
            i_recovery=int(i_recovery),
            norb=norb,
            sector_a=trunc_a.kept,
            sector_b=kept_b,
            paths=paths,
            counts=counts,
        )

    def run(
        self,
        batch_source: BatchSource,
        norb: int,
        num_elec: int,
        max_configs: int,
    ) -> List[IterationResult]:
        """
        Run ``ctx.n_recovery`` iterations. ``batch_source(i, previous)`` supplies
        each batch; ``previous`` is ``None`` on the first call.
        """
        results: List[IterationResult] = []
        previous: Optional[IterationResult] = None
        for i_recovery in range(self.ctx.n_recovery):
            batch = batch_source(i_recovery, previous)
            previous = self.run_iteration(batch, norb, num_elec, max_configs, i_recovery)
            results.append(previous)
            self._log.info("recovery iteration %d/%d -> %s", i_recovery + 1, self.ctx.n_recovery, previous.path)
        return results
