"""Input validation for assessment protocols."""

from assessment_engine.validation.validator import InputValidator

__all__ = ["InputValidator"]
