"""Built-in protocol definitions."""

from assessment_engine.protocols.catalog import (
    BODY_FAT_ID,
    COOPER_TEST_ID,
    ONE_REP_MAX_ID,
    STANDARD_PROTOCOLS,
    build_default_registry,
)

__all__ = [
    "BODY_FAT_ID",
    "COOPER_TEST_ID",
    "ONE_REP_MAX_ID",
    "STANDARD_PROTOCOLS",
    "build_default_registry",
]
