# --*-- conding:utf-8 --*--
# @time:10/19/26 09:05
# @File:__init__.py

"""
SQD configuration post-processing:
1) BitMatrixDecoder     - sampled bit rows -> per-sector CI strings
2) ConfigurationUnifier - dedupe, closed-shell union, Hartree-Fock seeding
3) TruncationPolicy     - keep the smallest max_configs identifiers
4) DeterminantCodec     - CI string <-> fixed-width big-endian record
5) BinarySink           - flat .bin artifact per recovery iteration
6) RecoveryPipeline     - the above, once per recovery iteration
"""

from .context import RunContext, configure_logging
from .errors import SQDError, ShapeError, RangeViolation
from .decoder import BitMatrixDecoder, SectorStrings, bitstrings_to_bit_matrix, bit_array_to_bit_matrix
from .unifier import ConfigurationUnifier, UnifiedConfigurations, reference_ci_str
from .truncation import TruncationPolicy, TruncationResult
from .codec import DeterminantCodec, record_width
from .sink import BinarySink
from .pipeline import RecoveryPipeline, IterationResult, artifact_name

__all__ = [
    "RunContext",
    "configure_logging",
    "SQDError",
    "ShapeError",
    "RangeViolation",
    "BitMatrixDecoder",
    "SectorStrings",
    "bitstrings_to_bit_matrix",
    "bit_array_to_bit_matrix",
    "ConfigurationUnifier",
    "UnifiedConfigurations",
    "reference_ci_str",
    "TruncationPolicy",
    "TruncationResult",
    "DeterminantCodec",
    "record_width",
    "BinarySink",
    "RecoveryPipeline",
    "IterationResult",
    "artifact_name",
]
