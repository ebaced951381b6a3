"""Social context and formality adjustment."""

from .contextual_adjuster import ContextualAdjuster

__all__ = ['ContextualAdjuster']
