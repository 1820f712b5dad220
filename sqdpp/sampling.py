# --*-- conding:utf-8 --*--
# @time:10/19/26 13:02
# @File:sampling.py

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

import numpy as np

from .decoder import bitstrings_to_bit_matrix


def normalize_counts(counts: Dict[str, int]) -> Tuple[List[str], np.ndarray]:
    """Bitstrings sorted by descending count, with their probabilities."""
    total = sum(counts.values())
    if total <= 0:
        return [], np.zeros(0, dtype=float)
    items = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    bitstrings = [b for b, _ in items]
    probs = np.array([c / total for _, c in items], dtype=float)
    return bitstrings, probs


def counts_to_bit_matrix(counts: Dict[str, int]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert a counts table to ``(bit_matrix, probs)`` with one row per distinct
    bitstring; rows are ordered by descending probability.
    """
    bitstrings, probs = normalize_counts(counts)
    return bitstrings_to_bit_matrix(bitstrings), probs


def subsample(
    bit_matrix: np.ndarray,
    probs: Optional[np.ndarray],
    samples_per_batch: int,
    num_batches: int = 1,
    rng: Optional[np.random.Generator | int] = None,
) -> List[np.ndarray]:
    """
    Draw ``num_batches`` batches of distinct rows, weighted by ``probs``.

    A batch holds ``samples_per_batch`` rows, or every row with non-zero
    weight when fewer are available.
    """
    if samples_per_batch <= 0:
        raise ValueError("samples_per_batch must be > 0.")
    if num_batches <= 0:
        raise ValueError("num_batches must be > 0.")
    rng = np.random.default_rng(rng)
    n = bit_matrix.shape[0]

    if probs is None:
        probs = np.full(n, 1.0 / n) if n else np.zeros(0)
    probs = np.asarray(probs, dtype=float)
    if probs.shape[0] != n:
        raise ValueError(f"probs has {probs.shape[0]} entries for {n} rows.")

    support = np.flatnonzero(probs > 0)
    if support.size <= samples_per_batch:
        return [bit_matrix[support] for _ in range(num_batches)]

    p = probs[support] / probs[support].sum()
    batches = []
    for _ in range(num_batches):
        idx = rng.choice(support, size=samples_per_batch, replace=False, p=p)
        batches.append(bit_matrix[np.sort(idx)])
    return batches
