"""
Data models for emotion synthesis.

This module provides dataclasses for representing emotion requests,
channel components, expressions and results throughout the pipeline.
"""

from .emotion_label import EmotionLabel, SocialSetting
from .emotion_input import EmotionInput, SocialContext, Nuances, SecondaryEmotion
from .components import (
    BODY_CHANNELS,
    FACIAL_CHANNELS,
    BodyComponents,
    ChannelTiming,
    EmotionComponent,
    FacialComponents,
)
from .timing import EmotionTiming
from .analyzed_emotion import AnalyzedEmotion, ExpressionMetrics
from .expression import (
    BodyExpression,
    Coordinates,
    ExpressionTiming,
    Handshape,
    LSFExpression,
    SignLocation,
)
from .syntactic_context import SyntacticContext, SyntacticStructure
from .results import (
    CoherenceResult,
    ControlledExpression,
    ControlMetadata,
    EthicsDecision,
    EthicsRequest,
    IntegrationResult,
    SynthesisResult,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    'EmotionLabel',
    'SocialSetting',
    'EmotionInput',
    'SocialContext',
    'Nuances',
    'SecondaryEmotion',
    'BODY_CHANNELS',
    'FACIAL_CHANNELS',
    'BodyComponents',
    'ChannelTiming',
    'EmotionComponent',
    'FacialComponents',
    'EmotionTiming',
    'AnalyzedEmotion',
    'ExpressionMetrics',
    'BodyExpression',
    'Coordinates',
    'ExpressionTiming',
    'Handshape',
    'LSFExpression',
    'SignLocation',
    'SyntacticContext',
    'SyntacticStructure',
    'CoherenceResult',
    'ControlledExpression',
    'ControlMetadata',
    'EthicsDecision',
    'EthicsRequest',
    'IntegrationResult',
    'SynthesisResult',
    'ValidationIssue',
    'ValidationResult',
]
