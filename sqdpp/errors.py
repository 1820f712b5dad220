# --*-- conding:utf-8 --*--
# @time:10/19/26 09:12
# @File:errors.py

"""
Exception types raised by the SQD post-processing pipeline.

I/O failures are not wrapped: the sink re-raises ``OSError`` unchanged.
"""


class SQDError(Exception):
    """Base class for pipeline errors."""


class ShapeError(SQDError, ValueError):
    """Empty or inconsistently shaped bit-matrix / record input."""


class RangeViolation(SQDError, ValueError):
    """A value does not fit the 64-bit / byte-width encoding it is destined for."""
