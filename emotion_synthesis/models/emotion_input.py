"""
Emotion request data model.

Represents an immutable request for an emotional expression: the emotion
type, its raw intensity, an optional social context and optional nuances.
A secondary emotion has no nuances of its own, which limits blending to a
single level.
"""

import math
from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional

from emotion_synthesis.exceptions import InvalidEmotionInputError, NestedBlendError
from .emotion_label import EmotionLabel, SocialSetting, normalize_label


# Accepted wire keys of the nested request mappings
CONTEXT_KEYS = frozenset({'social', 'formalityLevel', 'formality_level'})
NUANCE_KEYS = frozenset({
    'subtlety', 'facialVsBodyEmphasis', 'facial_vs_body_emphasis',
    'secondaryEmotion', 'secondary_emotion',
})
SECONDARY_KEYS = frozenset({'type', 'blendRatio', 'blend_ratio'})


def _check_unit(name: str, value: Any) -> None:
    """Raise InvalidEmotionInputError unless value is a number in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidEmotionInputError(f"{name} must be numeric, got {type(value).__name__}")
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise InvalidEmotionInputError(f"{name} must be between 0.0 and 1.0, got {value}")


def _check_label(name: str, value: Any) -> None:
    """Raise InvalidEmotionInputError unless value is a non-empty label."""
    if isinstance(value, EmotionLabel):
        return
    if not isinstance(value, str) or not value.strip():
        raise InvalidEmotionInputError(f"{name} must be a non-empty string, got {value!r}")


@dataclass(frozen=True)
class SocialContext:
    """
    Social context of an expression.
    
    Attributes:
        social: Social setting label (formal, educational, intimate, public, default)
        formality_level: Formality in [0, 1]
    """
    
    social: str = 'default'
    formality_level: float = 0.0
    
    def __post_init__(self):
        """Validate social context data."""
        if not isinstance(self.social, str):
            raise InvalidEmotionInputError(f"social must be a string, got {self.social!r}")
        _check_unit('formality_level', self.formality_level)
    
    @property
    def setting(self) -> SocialSetting:
        """Parsed social setting."""
        return SocialSetting.parse(self.social)


@dataclass(frozen=True)
class SecondaryEmotion:
    """
    Secondary emotion blended into the primary expression.
    
    Attributes:
        type: Raw emotion label
        blend_ratio: 0 keeps the primary expression, 1 yields the secondary
    """
    
    type: str
    blend_ratio: float
    
    def __post_init__(self):
        """Validate secondary emotion data."""
        _check_label('secondary emotion type', self.type)
        _check_unit('blend_ratio', self.blend_ratio)
    
    @property
    def label(self) -> EmotionLabel:
        return EmotionLabel.parse(self.type)


@dataclass(frozen=True)
class Nuances:
    """
    Optional modifiers applied after base synthesis.
    
    Attributes:
        subtlety: Overall damping in [0, 1]
        facial_vs_body_emphasis: 0 favours the body, 1 favours the face
        secondary_emotion: Optional single-level blend
    """
    
    subtlety: Optional[float] = None
    facial_vs_body_emphasis: Optional[float] = None
    secondary_emotion: Optional[SecondaryEmotion] = None
    
    def __post_init__(self):
        """Validate nuance values."""
        if self.subtlety is not None:
            _check_unit('subtlety', self.subtlety)
        if self.facial_vs_body_emphasis is not None:
            _check_unit('facial_vs_body_emphasis', self.facial_vs_body_emphasis)
        if self.secondary_emotion is not None and not isinstance(
            self.secondary_emotion, SecondaryEmotion
        ):
            raise NestedBlendError(
                "secondary_emotion must be a SecondaryEmotion without nuances"
            )


@dataclass(frozen=True)
class EmotionInput:
    """
    Request for a single emotional expression.
    
    Attributes:
        type: Raw emotion label; unrecognised labels are synthesized as neutral
        intensity: Raw intensity in [0, 1]
        context: Optional social context
        nuances: Optional nuances
        seed: Optional seed for the bounded random micro-variation
    """
    
    type: str
    intensity: float
    context: Optional[SocialContext] = None
    nuances: Optional[Nuances] = None
    seed: Optional[int] = None
    
    # Keys accepted by from_dict
    ALLOWED_KEYS = frozenset({'type', 'intensity', 'context', 'nuances', 'seed'})
    
    def __post_init__(self):
        """Validate emotion request data."""
        _check_label('type', self.type)
        _check_unit('intensity', self.intensity)
        if self.context is not None and not isinstance(self.context, SocialContext):
            raise InvalidEmotionInputError(f"context must be SocialContext, got {type(self.context)}")
        if self.nuances is not None and not isinstance(self.nuances, Nuances):
            raise InvalidEmotionInputError(f"nuances must be Nuances, got {type(self.nuances)}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidEmotionInputError(f"seed must be an integer, got {self.seed!r}")
    
    @property
    def label(self) -> EmotionLabel:
        """Parsed emotion label."""
        return EmotionLabel.parse(self.type)
    
    @property
    def normalized_type(self) -> str:
        """Lower-cased emotion label as declared on produced expressions."""
        return normalize_label(self.type)
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EmotionInput':
        """
        Build a request from a wire-style mapping.
        
        Accepts camelCase keys (formalityLevel, facialVsBodyEmphasis,
        secondaryEmotion, blendRatio) as well as snake_case.
        
        Args:
            data: Request mapping
            
        Returns:
            Validated EmotionInput
            
        Raises:
            InvalidEmotionInputError: When fields are missing, unknown or out of range
            NestedBlendError: When a secondary emotion carries its own nuances
        """
        if not isinstance(data, Mapping):
            raise InvalidEmotionInputError(f"request must be a mapping, got {type(data).__name__}")
        
        unknown = set(data) - cls.ALLOWED_KEYS
        if unknown:
            raise InvalidEmotionInputError(f"Unknown request fields: {sorted(unknown)}")
        
        for required in ('type', 'intensity'):
            if required not in data:
                raise InvalidEmotionInputError(f"Missing required field: {required}")
        
        context = None
        raw_context = data.get('context')
        if raw_context is not None:
            if not isinstance(raw_context, Mapping):
                raise InvalidEmotionInputError("context must be a mapping")
            _reject_unknown(raw_context, CONTEXT_KEYS, 'context')
            context = SocialContext(
                social=raw_context.get('social', 'default'),
                formality_level=_pick(raw_context, 'formalityLevel', 'formality_level', 0.0),
            )
        
        nuances = None
        raw_nuances = data.get('nuances')
        if raw_nuances is not None:
            nuances = _parse_nuances(raw_nuances)
        
        return cls(
            type=data['type'],
            intensity=data['intensity'],
            context=context,
            nuances=nuances,
            seed=data.get('seed'),
        )


def _reject_unknown(data: Mapping[str, Any], allowed: FrozenSet[str], name: str) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise InvalidEmotionInputError(f"Unknown {name} fields: {sorted(unknown)}")


def _pick(data: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _parse_nuances(raw: Any) -> Nuances:
    if not isinstance(raw, Mapping):
        raise InvalidEmotionInputError("nuances must be a mapping")
    _reject_unknown(raw, NUANCE_KEYS, 'nuances')
    
    secondary = None
    raw_secondary = _pick(raw, 'secondaryEmotion', 'secondary_emotion')
    if raw_secondary is not None:
        if not isinstance(raw_secondary, Mapping):
            raise InvalidEmotionInputError("secondaryEmotion must be a mapping")
        nested = {'nuances', 'secondaryEmotion', 'secondary_emotion'} & set(raw_secondary)
        if nested:
            raise NestedBlendError(
                f"Secondary emotion must not carry nested blending fields: {sorted(nested)}"
            )
        if 'type' not in raw_secondary:
            raise InvalidEmotionInputError("secondaryEmotion is missing its type")
        _reject_unknown(raw_secondary, SECONDARY_KEYS, 'secondaryEmotion')
        secondary = SecondaryEmotion(
            type=raw_secondary['type'],
            blend_ratio=_pick(raw_secondary, 'blendRatio', 'blend_ratio', 0.5),
        )
    
    return Nuances(
        subtlety=raw.get('subtlety'),
        facial_vs_body_emphasis=_pick(raw, 'facialVsBodyEmphasis', 'facial_vs_body_emphasis'),
        secondary_emotion=secondary,
    )
