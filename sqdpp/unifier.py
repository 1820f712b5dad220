# --*-- conding:utf-8 --*--
# @time:10/19/26 10:05
# @File:unifier.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .context import RunContext
from .decoder import SectorStrings
from .errors import RangeViolation

MAX_NUM_ELEC = 64


def reference_ci_str(num_elec: int) -> int:
    """Hartree-Fock reference: the lowest ``num_elec`` orbitals occupied."""
    num_elec = int(num_elec)
    if num_elec < 0 or num_elec > MAX_NUM_ELEC:
        raise RangeViolation(f"num_elec={num_elec} outside [0, {MAX_NUM_ELEC}]")
    return (1 << num_elec) - 1


@dataclass
class UnifiedConfigurations:
    """
    Sorted, duplicate-free CI strings per sector.

    In closed-shell mode both arrays hold the same alphabet.
    """
    sector_a: np.ndarray
    sector_b: np.ndarray
    open_shell: bool
    reference: Optional[int] = None


def _unique(values: np.ndarray, reference: Optional[int]) -> np.ndarray:
    values = np.asarray(values, dtype=np.uint64)
    if reference is not None:
        values = np.append(values, np.uint64(reference))
    return np.unique(values)


class ConfigurationUnifier:
    """
    Deduplicate each sector, merge the alphabets for closed-shell systems and
    optionally seed the Hartree-Fock reference (``ctx.with_hf``).
    """

    def __init__(self, ctx: RunContext, open_shell: bool = False):
        self.ctx = ctx
        self.open_shell = bool(open_shell)
        self._log = ctx.get_logger(__name__)

    def unify(self, strings: SectorStrings, num_elec: int) -> UnifiedConfigurations:
        reference = reference_ci_str(num_elec) if self.ctx.with_hf else None

        self._log.info("number of items in sector A ci_strs: %d", len(strings.sector_a))
        self._log.info("number of items in sector B ci_strs: %d", len(strings.sector_b))

        if self.open_shell:
            sector_a = _unique(strings.sector_a, reference)
            sector_b = _unique(strings.sector_b, reference)
        else:
            merged = _unique(np.concatenate([strings.sector_a, strings.sector_b]), reference)
            sector_a, sector_b = merged, merged.copy()

        self._log.info(
            "unique ci_strs: sector A=%d, sector B=%d (open_shell=%s, hf=%s)",
            len(sector_a), len(sector_b), self.open_shell, reference,
        )
        return UnifiedConfigurations(
            sector_a=sector_a,
            sector_b=sector_b,
            open_shell=self.open_shell,
            reference=reference,
        )
