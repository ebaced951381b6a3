"""
Emotion and social-setting labels.

Labels are string enums so they compare equal to their wire values. Parsing
never fails: unrecognised emotions map to ``EmotionLabel.UNKNOWN`` and
unrecognised social settings map to ``SocialSetting.DEFAULT``.
"""

from enum import Enum
from typing import Union


class EmotionLabel(str, Enum):
    """Emotion categories with an explicit fallback member."""
    
    JOY = 'joy'
    SADNESS = 'sadness'
    ANGER = 'anger'
    FEAR = 'fear'
    SURPRISE = 'surprise'
    DISGUST = 'disgust'
    NEUTRAL = 'neutral'
    UNKNOWN = 'unknown'
    
    @classmethod
    def parse(cls, raw: Union[str, 'EmotionLabel', None]) -> 'EmotionLabel':
        """
        Map a raw label to a known emotion or the fallback member.
        
        Args:
            raw: Raw emotion label (case and surrounding whitespace ignored)
            
        Returns:
            Matching EmotionLabel, or EmotionLabel.UNKNOWN
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return cls.UNKNOWN
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.UNKNOWN
    
    @property
    def is_known(self) -> bool:
        """True for every member except the fallback."""
        return self is not EmotionLabel.UNKNOWN


class SocialSetting(str, Enum):
    """Social context categories driving contextual adjustment."""
    
    FORMAL = 'formal'
    EDUCATIONAL = 'educational'
    INTIMATE = 'intimate'
    PUBLIC = 'public'
    DEFAULT = 'default'
    
    @classmethod
    def parse(cls, raw: Union[str, 'SocialSetting', None]) -> 'SocialSetting':
        """Map a raw social label to a setting, defaulting when unrecognised."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return cls.DEFAULT
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.DEFAULT


def normalize_label(raw: Union[str, EmotionLabel]) -> str:
    """Return the lower-cased, stripped form of a raw emotion label."""
    if isinstance(raw, EmotionLabel):
        return raw.value
    return raw.strip().lower()
