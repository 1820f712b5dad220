# --*-- conding:utf-8 --*--
# @time:10/19/26 09:41
# @File:decoder.py

"""
Bit matrix -> per-sector configuration identifiers (CI strings).

A row of width ``2*norb`` is split into sector A (columns ``[0, norb)``) and
sector B (columns ``[norb, 2*norb)``). Bit ``i`` of a sector sets bit ``i`` of
that sector's CI string. Values are accumulated with integer shifts so every
``norb`` up to 64 is exact.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from .context import RunContext
from .errors import RangeViolation, ShapeError

MAX_NORB = 64


@dataclass
class SectorStrings:
    """Per-row CI strings of both sectors (pre-deduplication)."""
    sector_a: np.ndarray
    sector_b: np.ndarray
    norb: int

    def __len__(self) -> int:
        return int(self.sector_a.shape[0])


def bitstrings_to_bit_matrix(bitstrings: Iterable[str]) -> np.ndarray:
    """
    Convert measurement strings like ["0110", "1001"] to a bool array (N, L).

    The rightmost character is bit 0 (qiskit counts convention), so column ``i``
    of the result holds bit ``i``.
    """
    bitstrings = [str(s).strip() for s in bitstrings]
    if not bitstrings:
        raise ShapeError("Empty bitstring list; cannot infer norb.")
    L = len(bitstrings[0])
    arr = np.zeros((len(bitstrings), L), dtype=bool)
    for i, s in enumerate(bitstrings):
        if len(s) != L:
            raise ShapeError(f"Mixed-length bitstrings detected ({len(s)} != {L}).")
        if s.strip("01"):
            raise ShapeError(f"Non-binary characters in bitstring {s!r}.")
        arr[i, :] = (np.frombuffer(s.encode("ascii"), dtype=np.uint8) - ord("0"))[::-1].astype(bool)
    return arr


def bit_array_to_bit_matrix(bit_array) -> np.ndarray:
    """Flatten a ``qiskit.primitives.BitArray`` into a bool array (shots, num_bits)."""
    from qiskit.primitives import BitArray

    if not isinstance(bit_array, BitArray):
        raise TypeError(f"Expected qiskit BitArray, got {type(bit_array).__name__}")
    arr = np.asarray(bit_array.to_bool_array(order="little"), dtype=bool)
    return arr.reshape(-1, bit_array.num_bits)


def _as_bool_matrix(bit_matrix) -> np.ndarray:
    if not isinstance(bit_matrix, np.ndarray):
        rows = list(bit_matrix)
        if not rows:
            raise ShapeError("Empty bit matrix; cannot infer norb.")
        if isinstance(rows[0], str):
            return bitstrings_to_bit_matrix(rows)
        widths = sorted({len(r) for r in rows})
        if len(widths) != 1:
            raise ShapeError(f"Rows have inconsistent lengths: {widths}")
        bit_matrix = np.asarray(rows)

    if bit_matrix.ndim != 2:
        raise ShapeError(f"Expected a 2-D bit matrix, got shape {bit_matrix.shape}")
    if bit_matrix.shape[0] == 0:
        raise ShapeError("Empty bit matrix; cannot infer norb.")
    width = int(bit_matrix.shape[1])
    if width == 0 or width % 2:
        raise ShapeError(f"Row width must be a positive even number (2*norb), got {width}")

    if bit_matrix.dtype == bool:
        return bit_matrix
    if not np.isin(bit_matrix, (0, 1)).all():
        raise ShapeError("Bit matrix contains values other than 0/1.")
    return bit_matrix.astype(bool)


def _sector_to_ci_strs(bits: np.ndarray) -> np.ndarray:
    norb = bits.shape[1]
    weights = np.left_shift(np.uint64(1), np.arange(norb, dtype=np.uint64))
    terms = np.where(bits, weights, np.uint64(0))
    return np.bitwise_or.reduce(terms, axis=1).astype(np.uint64)


class BitMatrixDecoder:
    """
    Decode a bit matrix into two parallel ``uint64`` arrays, one per sector.

    The row count is preserved; deduplication belongs to the unifier.
    """

    def __init__(self, ctx: Optional[RunContext] = None):
        self.ctx = ctx or RunContext()
        self._log = self.ctx.get_logger(__name__)

    def decode(self, bit_matrix: np.ndarray | Sequence) -> SectorStrings:
        bits = _as_bool_matrix(bit_matrix)
        norb = bits.shape[1] // 2
        if norb > MAX_NORB:
            raise RangeViolation(f"norb={norb} exceeds the {MAX_NORB}-bit CI string capacity")

        out = SectorStrings(
            sector_a=_sector_to_ci_strs(bits[:, :norb]),
            sector_b=_sector_to_ci_strs(bits[:, norb:]),
            norb=norb,
        )
        self._log.info("number of items in a batch: %d (norb=%d)", len(out), norb)
        return out
