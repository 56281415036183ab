"""Physical-performance assessment engine with progress tracking."""

from assessment_engine.engine import AssessmentEngine
from assessment_engine.protocols.catalog import build_default_registry
from assessment_engine.registry import ProtocolRegistry

__all__ = ["AssessmentEngine", "ProtocolRegistry", "build_default_registry"]
