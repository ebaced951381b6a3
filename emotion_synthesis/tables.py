"""
Per-emotion lookup tables.

All tables are keyed by EmotionLabel and frozen into read-only mappings at
import time. They are process-wide constants shared by concurrent requests.
The UNKNOWN label has no entries of its own: callers resolve it to NEUTRAL
through ``table_label``.
"""

from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional, Tuple

from emotion_synthesis.models.emotion_label import EmotionLabel, SocialSetting


def _freeze(value: Any) -> Any:
    """Recursively convert dicts into read-only mappings."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def table_label(label: EmotionLabel) -> EmotionLabel:
    """Label whose tables are used for synthesis (neutral for unknown emotions)."""
    return label if label.is_known else EmotionLabel.NEUTRAL


E = EmotionLabel


# Per-emotion calibration multipliers
INTENSITY_MULTIPLIERS: Mapping[EmotionLabel, float] = _freeze({
    E.JOY: 1.1,
    E.SURPRISE: 1.3,
    E.ANGER: 1.2,
    E.FEAR: 1.15,
    E.SADNESS: 0.9,
    E.DISGUST: 1.0,
    E.NEUTRAL: 1.0,
})


# Channel intensity = calibrated intensity x channel salience
CHANNEL_SALIENCE: Mapping[str, float] = _freeze({
    'eyebrows': 1.0,
    'eyes': 0.95,
    'mouth': 1.0,
    'head': 0.8,
    'shoulders': 0.85,
    'arms': 0.9,
    'posture': 0.95,
    'movement': 1.0,
})


FACIAL_PARAMETERS: Mapping[EmotionLabel, Mapping[str, Mapping[str, float]]] = _freeze({
    E.JOY: {
        'eyebrows': {'raised': 0.6, 'inner': 0.2},
        'eyes': {'openness': 0.7, 'squint': 0.3},
        'mouth': {'smiling': 0.9, 'open': 0.3, 'corners': 0.8},
        'head': {'tilt': 0.2, 'nod': 0.3},
    },
    E.SADNESS: {
        'eyebrows': {'raised': 0.1, 'inner': 0.8, 'furrowed': 0.2},
        'eyes': {'openness': 0.4, 'gaze_down': 0.7},
        'mouth': {'smiling': 0.0, 'open': 0.1, 'corners': -0.7},
        'head': {'tilt': 0.3, 'lowered': 0.6},
    },
    E.ANGER: {
        'eyebrows': {'furrowed': 0.9, 'lowered': 0.8, 'inner': 0.2},
        'eyes': {'openness': 0.7, 'squint': 0.6, 'glare': 0.8},
        'mouth': {'tightened': 0.7, 'open': 0.2, 'corners': -0.3},
        'head': {'forward': 0.5},
    },
    E.FEAR: {
        'eyebrows': {'raised': 0.7, 'inner': 0.7},
        'eyes': {'openness': 0.9, 'widen': 0.8},
        'mouth': {'open': 0.4, 'tightened': 0.5, 'stretched': 0.6},
        'head': {'retracted': 0.6},
    },
    E.SURPRISE: {
        'eyebrows': {'raised': 0.9, 'inner': 0.5},
        'eyes': {'openness': 0.9, 'widen': 0.9},
        'mouth': {'open': 0.8, 'round': 0.7},
        'head': {'retracted': 0.4, 'tilt': 0.1},
    },
    E.DISGUST: {
        'eyebrows': {'furrowed': 0.6, 'lowered': 0.4},
        'eyes': {'openness': 0.4, 'squint': 0.6},
        'mouth': {'upper_lip_raise': 0.8, 'corners': -0.4, 'open': 0.1},
        'head': {'turned_away': 0.5, 'tilt': 0.2},
    },
    E.NEUTRAL: {
        'eyebrows': {'raised': 0.1, 'inner': 0.1},
        'eyes': {'openness': 0.5},
        'mouth': {'smiling': 0.1, 'open': 0.1},
        'head': {'tilt': 0.1},
    },
})


BODY_PARAMETERS: Mapping[EmotionLabel, Mapping[str, Mapping[str, float]]] = _freeze({
    E.JOY: {
        'shoulders': {'raised': 0.3, 'relaxed': 0.7},
        'arms': {'openness': 0.8, 'expansion': 0.7},
        'posture': {'upright': 0.8, 'openness': 0.7, 'tension': 0.3},
        'movement': {'speed': 1.2, 'amplitude': 1.2, 'fluidity': 0.8},
    },
    E.SADNESS: {
        'shoulders': {'raised': 0.1, 'slumped': 0.7},
        'arms': {'openness': 0.3, 'expansion': 0.2},
        'posture': {'upright': 0.2, 'downward': 0.8, 'openness': 0.3, 'tension': 0.2},
        'movement': {'speed': 0.7, 'amplitude': 0.8, 'fluidity': 0.6},
    },
    E.ANGER: {
        'shoulders': {'raised': 0.6, 'squared': 0.8},
        'arms': {'openness': 0.4, 'tension': 0.8},
        'posture': {'upright': 0.7, 'openness': 0.4, 'tension': 0.9},
        'movement': {'speed': 1.3, 'amplitude': 1.3, 'tension': 0.8, 'fluidity': 0.5},
    },
    E.FEAR: {
        'shoulders': {'raised': 0.7, 'hunched': 0.5},
        'arms': {'openness': 0.2, 'protective': 0.7},
        'posture': {'upright': 0.5, 'withdrawn': 0.7, 'tension': 0.7, 'openness': 0.2},
        'movement': {'speed': 1.1, 'amplitude': 0.9, 'trembling': 0.6},
    },
    E.SURPRISE: {
        'shoulders': {'raised': 0.5},
        'arms': {'openness': 0.6, 'expansion': 0.5},
        'posture': {'upright': 0.7, 'openness': 0.6, 'tension': 0.5},
        'movement': {'speed': 1.2, 'amplitude': 1.1, 'suddenness': 0.8},
    },
    E.DISGUST: {
        'shoulders': {'raised': 0.3},
        'arms': {'openness': 0.3, 'protective': 0.4},
        'posture': {'upright': 0.5, 'withdrawn': 0.6, 'tension': 0.5},
        'movement': {'speed': 0.9, 'amplitude': 0.8, 'fluidity': 0.5},
    },
    E.NEUTRAL: {
        'shoulders': {'relaxed': 0.5},
        'arms': {'openness': 0.5},
        'posture': {'upright': 0.6, 'openness': 0.5, 'tension': 0.4},
        'movement': {'speed': 1.0, 'amplitude': 1.0, 'fluidity': 0.6},
    },
})


# Channel sub-timings as (onset, hold, release) in milliseconds
FACIAL_TIMINGS: Mapping[EmotionLabel, Tuple[float, float, float]] = _freeze({
    E.JOY: (150, 500, 250),
    E.SADNESS: (350, 900, 500),
    E.ANGER: (100, 550, 200),
    E.FEAR: (80, 450, 250),
    E.SURPRISE: (50, 300, 200),
    E.DISGUST: (200, 600, 300),
    E.NEUTRAL: (200, 500, 300),
})

BODY_TIMINGS: Mapping[EmotionLabel, Tuple[float, float, float]] = _freeze({
    E.JOY: (250, 450, 300),
    E.SADNESS: (500, 800, 600),
    E.ANGER: (150, 500, 250),
    E.FEAR: (120, 400, 300),
    E.SURPRISE: (100, 250, 250),
    E.DISGUST: (300, 500, 350),
    E.NEUTRAL: (300, 450, 350),
})


# Hand parameters, scaled by calibrated intensity
HAND_PARAMETERS: Mapping[EmotionLabel, Mapping[str, Mapping[str, float]]] = _freeze({
    E.JOY: {
        'configuration': {'tension': 0.3},
        'movement': {'speed': 1.2, 'amplitude': 1.2, 'fluidity': 0.8},
    },
    E.SADNESS: {
        'configuration': {'tension': 0.2},
        'movement': {'speed': 0.8, 'amplitude': 0.8, 'fluidity': 0.6},
    },
    E.ANGER: {
        'configuration': {'tension': 0.8},
        'movement': {'speed': 1.3, 'amplitude': 1.3, 'fluidity': 0.5},
    },
    E.FEAR: {
        'configuration': {'tension': 0.7},
        'movement': {'speed': 1.1, 'amplitude': 0.9, 'fluidity': 0.4, 'trembling': 0.6},
    },
    E.SURPRISE: {
        'configuration': {'tension': 0.5},
        'movement': {'speed': 1.2, 'amplitude': 1.1, 'fluidity': 0.7, 'suddenness': 0.8},
    },
    E.DISGUST: {
        'configuration': {'tension': 0.6},
        'movement': {'speed': 0.9, 'amplitude': 0.8, 'fluidity': 0.5},
    },
    E.NEUTRAL: {
        'configuration': {'tension': 0.5},
        'movement': {'speed': 1.0, 'amplitude': 1.0, 'fluidity': 0.5},
    },
})


# Global envelope base values as (onset, total_duration) in milliseconds
BASE_TIMINGS: Mapping[EmotionLabel, Tuple[float, float]] = _freeze({
    E.JOY: (200, 1000),
    E.SADNESS: (400, 1800),
    E.ANGER: (150, 900),
    E.FEAR: (100, 800),
    E.SURPRISE: (80, 600),
    E.DISGUST: (250, 1100),
    E.NEUTRAL: (250, 1000),
})


class ContextProfile(NamedTuple):
    """Multipliers applied for a social setting."""
    
    global_intensity: float
    facial_emphasis: float
    body_emphasis: float
    duration: Optional[float] = None


CONTEXT_PROFILES: Mapping[SocialSetting, ContextProfile] = _freeze({
    SocialSetting.FORMAL: ContextProfile(0.8, 0.9, 0.7, 1.2),
    SocialSetting.EDUCATIONAL: ContextProfile(0.9, 1.1, 0.9, 1.1),
    SocialSetting.INTIMATE: ContextProfile(1.1, 1.1, 0.8),
    SocialSetting.PUBLIC: ContextProfile(1.0, 0.9, 1.1),
    SocialSetting.DEFAULT: ContextProfile(1.0, 1.0, 1.0),
})


class SanityRule(NamedTuple):
    """
    Coherence rule on one channel parameter.
    
    The parameter's channel profile is compared against threshold x expected
    intensity, as a lower bound ('>=') or an upper bound ('<=').
    """
    
    channel: str
    parameter: str
    threshold: float
    comparison: str = '>='


FACIAL_RULES: Mapping[EmotionLabel, Tuple[SanityRule, ...]] = _freeze({
    E.JOY: (
        SanityRule('mouth', 'smiling', 0.5),
        SanityRule('eyebrows', 'raised', 0.3),
    ),
    E.ANGER: (
        SanityRule('eyebrows', 'furrowed', 0.5),
    ),
    E.SADNESS: (
        SanityRule('eyebrows', 'inner', 0.5),
        SanityRule('mouth', 'corners', -0.3, '<='),
    ),
    E.FEAR: (
        SanityRule('eyes', 'openness', 0.5),
    ),
    E.SURPRISE: (
        SanityRule('eyebrows', 'raised', 0.6),
        SanityRule('mouth', 'open', 0.4),
    ),
    E.DISGUST: (
        SanityRule('mouth', 'upper_lip_raise', 0.5),
    ),
})

BODY_RULES: Mapping[EmotionLabel, Tuple[SanityRule, ...]] = _freeze({
    E.ANGER: (SanityRule('posture', 'tension', 0.6),),
    E.SADNESS: (SanityRule('posture', 'downward', 0.5),),
    E.FEAR: (SanityRule('posture', 'tension', 0.5),),
    E.SURPRISE: (SanityRule('movement', 'suddenness', 0.4),),
    E.DISGUST: (SanityRule('posture', 'withdrawn', 0.4),),
})


# Related channel parameters as (channel, parameter, channel, parameter, weight)
FACIAL_COHERENCE_PAIRS: Tuple[Tuple[str, str, str, str, float], ...] = (
    ('eyebrows', 'raised', 'eyes', 'openness', 0.5),
    ('eyebrows', 'furrowed', 'eyes', 'squint', 0.5),
)

BODY_COHERENCE_PAIRS: Tuple[Tuple[str, str, str, str, float], ...] = (
    ('shoulders', 'raised', 'posture', 'upright', 0.4),
    ('posture', 'openness', 'arms', 'openness', 0.4),
)


# Parameters whose presence signals the declared emotion, as (channel, parameter)
ALIGNMENT_FLAGS: Mapping[EmotionLabel, Tuple[Tuple[str, str], ...]] = _freeze({
    E.JOY: (('mouth', 'smiling'), ('posture', 'upright')),
    E.SADNESS: (('eyebrows', 'inner'), ('posture', 'downward')),
    E.ANGER: (('eyebrows', 'furrowed'), ('posture', 'tension')),
    E.FEAR: (('eyes', 'widen'), ('posture', 'withdrawn')),
    E.SURPRISE: (('eyebrows', 'raised'), ('mouth', 'open')),
    E.DISGUST: (('mouth', 'upper_lip_raise'), ('posture', 'withdrawn')),
})


# LSF reference norms keyed by "channel.parameter"
CULTURAL_NORMS: Mapping[EmotionLabel, Mapping[str, Mapping[str, float]]] = _freeze({
    E.JOY: {
        'facial': {'eyebrows.raised': 0.7, 'eyes.openness': 0.6, 'mouth.smiling': 0.9},
        'body': {'posture.upright': 0.8, 'shoulders.raised': 0.3, 'arms.openness': 0.7},
    },
    E.SADNESS: {
        'facial': {'eyebrows.raised': 0.2, 'eyebrows.inner': 0.7, 'mouth.corners': -0.6},
        'body': {'posture.downward': 0.8, 'shoulders.slumped': 0.7},
    },
    E.ANGER: {
        'facial': {'eyebrows.furrowed': 0.9, 'eyes.squint': 0.6, 'mouth.tightened': 0.7},
        'body': {'posture.tension': 0.9, 'shoulders.squared': 0.8, 'arms.tension': 0.7},
    },
    E.FEAR: {
        'facial': {'eyebrows.raised': 0.7, 'eyes.widen': 0.8, 'mouth.stretched': 0.5},
        'body': {'posture.withdrawn': 0.7, 'arms.protective': 0.7},
    },
    E.SURPRISE: {
        'facial': {'eyebrows.raised': 0.9, 'eyes.openness': 0.9, 'mouth.open': 0.7},
        'body': {'posture.upright': 0.7, 'movement.suddenness': 0.8},
    },
    E.DISGUST: {
        'facial': {'mouth.upper_lip_raise': 0.8, 'eyes.squint': 0.5},
        'body': {'posture.withdrawn': 0.6, 'arms.protective': 0.4},
    },
    E.NEUTRAL: {
        'facial': {'eyes.openness': 0.5},
        'body': {'posture.upright': 0.6},
    },
})


# Syntax/emotion integration: multiplicative bands as (min, max) on the
# pre-control hand movement values
SYNTACTIC_BANDS: Mapping[EmotionLabel, Mapping[str, Tuple[float, float]]] = _freeze({
    E.JOY: {'amplitude': (1.0, 1.3), 'speed': (1.0, 1.2)},
    E.ANGER: {'amplitude': (1.2, 1.4), 'speed': (1.1, 1.3)},
    E.SADNESS: {'amplitude': (0.8, 1.0), 'speed': (0.7, 0.9)},
})


class ExpansionLimit(NamedTuple):
    """Signing-space expansion factor and recovery mode for an emotion."""
    
    max: float
    recovery: str


EXPANSION_LIMITS: Mapping[EmotionLabel, ExpansionLimit] = _freeze({
    E.JOY: ExpansionLimit(1.3, 'required'),
    E.ANGER: ExpansionLimit(1.4, 'strict'),
    E.SADNESS: ExpansionLimit(0.9, 'gradual'),
})


class QualityWeights(NamedTuple):
    """Weights of the syntactic, temporal and spatial control measures."""
    
    syntactic: float
    temporal: float
    spatial: float


DEFAULT_QUALITY_WEIGHTS = QualityWeights(0.3, 0.3, 0.4)
COMPLEX_QUALITY_WEIGHTS = QualityWeights(0.4, 0.25, 0.35)

EMOTION_QUALITY_WEIGHTS: Mapping[EmotionLabel, QualityWeights] = _freeze({
    E.JOY: QualityWeights(0.25, 0.3, 0.45),
    E.ANGER: QualityWeights(0.25, 0.3, 0.45),
    E.SADNESS: QualityWeights(0.25, 0.45, 0.3),
})
