# --*-- conding:utf-8 --*--
# @time:10/19/26 10:57
# @File:sink.py

from __future__ import annotations
from pathlib import Path
from typing import Sequence

import numpy as np

from .codec import DeterminantCodec
from .context import RunContext
from .errors import ShapeError


class BinarySink:
    """
    Write encoded determinants as a flat concatenation of fixed-width records
    (no header, no delimiters, no count).
    """

    def __init__(self, ctx: RunContext, out_dir: str | Path = "."):
        self.ctx = ctx
        self.out_dir = Path(out_dir)
        self._log = ctx.get_logger(__name__)

    def write(self, records: Sequence[bytes], filename: str | Path) -> Path:
        widths = sorted({len(r) for r in records})
        if len(widths) > 1:
            raise ShapeError(f"Records have mixed widths: {widths}")

        path = self.out_dir / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                for rec in records:
                    f.write(rec)
        except OSError:
            self._log.error("Could not write %s", path)
            raise

        self._log.info("wrote %d record(s) of %d byte(s) -> %s", len(records), widths[0] if widths else 0, path)
        return path

    @staticmethod
    def read(path: str | Path, codec: DeterminantCodec) -> np.ndarray:
        with open(path, "rb") as f:
            return codec.decode_many(f.read())
