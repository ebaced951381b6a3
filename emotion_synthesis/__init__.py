"""
Emotional Expression Synthesis Module.

This module converts symbolic emotion requests into fully parameterized,
internally consistent facial, body, hand and timing descriptions for an
LSF signing avatar, and reconciles them with grammatical constraints.
"""

from .engine import EmotionSynthesisEngine
from .generators.expression_generator import ExpressionGenerator
from .controllers.syntax_emotion_controller import SyntaxEmotionController
from .validation.coherence_validator import CoherenceValidator
from .validation.metrics_calculator import MetricsCalculator
from .models.emotion_input import EmotionInput, SocialContext, Nuances, SecondaryEmotion
from .models.emotion_label import EmotionLabel
from .models.syntactic_context import SyntacticContext

__version__ = "1.0.0"

__all__ = [
    'EmotionSynthesisEngine',
    'ExpressionGenerator',
    'SyntaxEmotionController',
    'CoherenceValidator',
    'MetricsCalculator',
    'EmotionInput',
    'SocialContext',
    'Nuances',
    'SecondaryEmotion',
    'EmotionLabel',
    'SyntacticContext',
]
