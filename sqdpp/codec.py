# --*-- conding:utf-8 --*--
# @time:10/19/26 10:38
# @File:codec.py

"""
Fixed-width big-endian records for CI strings.

A record is ``ceil(norb / 8)`` bytes, most significant byte first. Readers
need ``norb`` out-of-band to know the record width.
"""

from __future__ import annotations
import operator
from typing import Iterable, List

import numpy as np

from .decoder import MAX_NORB
from .errors import RangeViolation


def record_width(norb: int) -> int:
    return (int(norb) + 7) // 8


class DeterminantCodec:
    def __init__(self, norb: int):
        norb = int(norb)
        if norb < 1 or norb > MAX_NORB:
            raise RangeViolation(f"norb={norb} outside [1, {MAX_NORB}]")
        self.norb = norb
        self.width = record_width(norb)

    def encode(self, ci_str: int) -> bytes:
        """Encode one CI string; non-integers and values wider than the record raise RangeViolation."""
        try:
            value = operator.index(ci_str)
        except TypeError as e:
            raise RangeViolation(f"CI string must be an integer, got {ci_str!r}") from e
        try:
            return value.to_bytes(self.width, byteorder="big", signed=False)
        except OverflowError as e:
            raise RangeViolation(
                f"CI string {value} does not fit in {self.width} byte(s) (norb={self.norb})"
            ) from e

    def encode_many(self, ci_strs: Iterable[int]) -> List[bytes]:
        """
        Encode a sequence of CI strings. Integer arrays take a vectorised path;
        lists and object arrays go through ``encode`` value by value.
        """
        if not isinstance(ci_strs, np.ndarray):
            return [self.encode(v) for v in ci_strs]
        arr = ci_strs.reshape(-1)
        if arr.size == 0:
            return []
        if arr.dtype.kind == "O":
            return [self.encode(v) for v in arr]
        if arr.dtype.kind not in "iu":
            raise RangeViolation(f"CI strings must be integers, got dtype {arr.dtype}")
        if arr.dtype.kind == "i" and (arr < 0).any():
            raise RangeViolation("Negative CI string cannot be encoded.")
        arr = arr.astype(np.uint64)
        if self.width < 8:
            too_wide = np.right_shift(arr, np.uint64(8 * self.width)) != 0
            if too_wide.any():
                bad = int(arr[np.argmax(too_wide)])
                raise RangeViolation(
                    f"CI string {bad} does not fit in {self.width} byte(s) (norb={self.norb})"
                )
        raw = arr.astype(">u8").view(np.uint8).reshape(-1, 8)[:, 8 - self.width:]
        return [row.tobytes() for row in raw]

    def decode(self, record: bytes) -> int:
        if len(record) != self.width:
            raise RangeViolation(f"Record of {len(record)} byte(s); expected {self.width}")
        return int.from_bytes(record, byteorder="big", signed=False)

    def decode_many(self, buffer: bytes) -> np.ndarray:
        """Split a flat record buffer into ``uint64`` CI strings."""
        if len(buffer) % self.width:
            raise RangeViolation(
                f"Buffer of {len(buffer)} byte(s) is not a multiple of record width {self.width}"
            )
        rec = np.frombuffer(buffer, dtype=np.uint8).reshape(-1, self.width)
        padded = np.zeros((rec.shape[0], 8), dtype=np.uint8)
        padded[:, 8 - self.width:] = rec
        return padded.view(">u8").reshape(-1).astype(np.uint64)
