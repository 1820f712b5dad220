# --*-- conding:utf-8 --*--
# @time:10/19/26 13:25
# @File:io.py

"""
Readers for sampling-stage output.

Accepted shapes:
- CSV with a bitstring column and a count column (duplicates are summed).
- JSON sample report with a top-level ``counts`` mapping.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict

import pandas as pd


def read_counts_csv(
    path: str | Path,
    bitstring_col: str = "bitstring",
    count_col: str = "count",
) -> Dict[str, int]:
    # Force bitstring to be read as string to preserve leading zeros
    df = pd.read_csv(path, dtype={bitstring_col: "string"})
    missing = [c for c in (bitstring_col, count_col) if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns {missing} in input CSV: {path}")

    df[bitstring_col] = df[bitstring_col].str.strip()
    df[count_col] = pd.to_numeric(df[count_col], errors="coerce")
    if df[bitstring_col].isna().any() or df[count_col].isna().any():
        raise ValueError(f"NA bitstring or count in input CSV: {path}")

    agg = df.groupby(bitstring_col, sort=True)[count_col].sum()
    return {str(b): int(c) for b, c in agg.items()}


def read_counts_json(path: str | Path) -> Dict[str, int]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    counts = payload.get("counts") if isinstance(payload, dict) else None
    if not isinstance(counts, dict):
        raise ValueError(f"No 'counts' mapping in {path}")
    return {str(b): int(c) for b, c in counts.items()}


def read_counts(path: str | Path) -> Dict[str, int]:
    """Dispatch on the file suffix (``.json`` or CSV)."""
    if Path(path).suffix.lower() == ".json":
        return read_counts_json(path)
    return read_counts_csv(path)
