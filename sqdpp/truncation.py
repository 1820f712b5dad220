# --*-- conding:utf-8 --*--
# @time:10/19/26 10:22
# @File:truncation.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .context import RunContext
from .errors import RangeViolation


@dataclass
class TruncationResult:
    kept: np.ndarray
    discarded: int


class TruncationPolicy:
    """
    Cap a sorted-ascending unique sequence at ``max_configs`` entries.

    The kept entries are the ``max_configs`` numerically smallest identifiers.
    With ``reserve`` set, that value survives the cut when it was present in
    the input: it takes the slot of the largest kept identifier.
    """

    def __init__(self, ctx: RunContext, max_configs: int, reserve: Optional[int] = None):
        if int(max_configs) < 0:
            raise RangeViolation(f"max_configs must be >= 0, got {max_configs}")
        self.ctx = ctx
        self.max_configs = int(max_configs)
        self.reserve = reserve
        self._log = ctx.get_logger(__name__)

    def apply(self, ci_strs: np.ndarray) -> TruncationResult:
        ci_strs = np.asarray(ci_strs, dtype=np.uint64)
        n = len(ci_strs)
        if n <= self.max_configs:
            self._log.info("number of unique ci_strs: %d", n)
            return TruncationResult(kept=ci_strs, discarded=0)

        kept = ci_strs[: self.max_configs].copy()
        if self.reserve is not None and self.max_configs > 0:
            ref = np.uint64(self.reserve)
            if ref in ci_strs and ref not in kept:
                # ref is larger than everything kept, so the last slot keeps order
                kept[-1] = ref

        discarded = n - self.max_configs
        self._log.info("number of unique ci_strs: %d, truncated: %d", len(kept), discarded)
        return TruncationResult(kept=kept, discarded=discarded)
