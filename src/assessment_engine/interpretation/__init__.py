"""Result interpretation: band tables, categories and recommendations."""

from assessment_engine.interpretation.interpreter import ResultInterpreter
from assessment_engine.interpretation.norms import (
    DEFAULT_NORMS,
    AgeBandedTable,
    Band,
    BandTable,
    ReferenceNorms,
    load_norms,
)

__all__ = [
    "AgeBandedTable",
    "Band",
    "BandTable",
    "DEFAULT_NORMS",
    "ReferenceNorms",
    "ResultInterpreter",
    "load_norms",
]
