"""
Custom exceptions for emotional expression synthesis.

This module defines specific exception types for the failure scenarios of
the synthesis pipeline and the syntax/emotion integration pass. They are
raised inside the pipeline and converted into tagged results by the engine.
"""


class EmotionSynthesisError(Exception):
    """Base exception for emotion synthesis module."""

    error_type = 'internal'


class InvalidEmotionInputError(EmotionSynthesisError, ValueError):
    """
    Raised when an emotion request is malformed.
    
    This can occur due to:
    - Intensity, formality or nuance values outside [0, 1]
    - Missing emotion type
    - Non-numeric values where numbers are required
    """

    error_type = 'input'


class NestedBlendError(InvalidEmotionInputError):
    """
    Raised when a secondary emotion carries its own nuances.
    
    Blending is limited to a single level: a secondary emotion must not
    itself declare a secondary emotion.
    """

    error_type = 'recursion'


class ExpressionValidationError(EmotionSynthesisError):
    """
    Raised when an assembled expression fails structural validation.
    
    Carries the partial expression and the issues found so that the
    engine can surface them to the caller.
    """

    error_type = 'validation'

    def __init__(self, message: str, expression=None, issues=None):
        super().__init__(message)
        self.expression = expression
        self.issues = list(issues or [])


class EthicsRejectionError(EmotionSynthesisError):
    """
    Raised when the ethics collaborator refuses an expression.
    
    This can occur due to:
    - An explicit rejection decision
    - The collaborator failing while evaluating the request
    """

    error_type = 'ethics'

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class IntegrationError(EmotionSynthesisError):
    """Raised when syntax/emotion integration cannot be completed."""

    error_type = 'internal'
