"""Logging and metrics utilities."""

from .structured_logger import StructuredFormatter, configure_structured_logging
from .metrics import EmotionSynthesisMetrics

__all__ = ['StructuredFormatter', 'configure_structured_logging', 'EmotionSynthesisMetrics']
