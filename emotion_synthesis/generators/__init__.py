"""Expression assembly."""

from .expression_generator import ExpressionGenerator

__all__ = ['ExpressionGenerator']
