"""Structural validation, coherence validation and quality metrics."""

from .expression_validator import ExpressionValidator
from .coherence_validator import CoherenceValidator
from .metrics_calculator import MetricsCalculator

__all__ = ['ExpressionValidator', 'CoherenceValidator', 'MetricsCalculator']
