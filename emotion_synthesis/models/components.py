"""
Channel component data models.

An EmotionComponent is the smallest addressable unit of an expression: a
channel intensity, a parameter map and a channel-local onset/hold/release
sub-timing. Components are immutable; rescaling returns a new component.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple


FACIAL_CHANNELS: Tuple[str, ...] = ('eyebrows', 'eyes', 'mouth', 'head')
BODY_CHANNELS: Tuple[str, ...] = ('shoulders', 'arms', 'posture', 'movement')


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class ChannelTiming:
    """
    Channel-local timing in milliseconds.
    
    Attributes:
        onset: Time to reach full activation
        hold: Time at full activation
        release: Time to return to rest
    """
    
    onset: float
    hold: float
    release: float
    
    def __post_init__(self):
        """Validate channel timing."""
        for name in ('onset', 'hold', 'release'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                raise ValueError(f"{name} must be non-negative number, got {value}")
    
    @property
    def total(self) -> float:
        return self.onset + self.hold + self.release
    
    def to_dict(self) -> Dict[str, float]:
        return {'onset': self.onset, 'hold': self.hold, 'release': self.release}


@dataclass(frozen=True)
class EmotionComponent:
    """
    Parameters of one facial or body channel.
    
    Attributes:
        intensity: Channel intensity in [0, 1] (clamped on construction)
        parameters: Named channel parameters
        timing: Channel-local sub-timing
    """
    
    intensity: float
    parameters: Mapping[str, float]
    timing: ChannelTiming
    
    def __post_init__(self):
        """Clamp intensity and take a private copy of the parameters."""
        object.__setattr__(self, 'intensity', clamp_unit(self.intensity))
        object.__setattr__(self, 'parameters', dict(self.parameters))
    
    def scaled(self, factor: float) -> 'EmotionComponent':
        """
        Rescale intensity and every parameter by the same factor.
        
        Args:
            factor: Multiplicative factor
            
        Returns:
            New EmotionComponent
        """
        return EmotionComponent(
            intensity=self.intensity * factor,
            parameters={k: v * factor for k, v in self.parameters.items()},
            timing=self.timing
        )
    
    def with_intensity(self, intensity: float) -> 'EmotionComponent':
        """Return a copy with a new intensity and unchanged parameters."""
        return EmotionComponent(
            intensity=intensity,
            parameters=self.parameters,
            timing=self.timing
        )
    
    def with_parameters(self, parameters: Mapping[str, float]) -> 'EmotionComponent':
        """Return a copy with new parameters and unchanged intensity."""
        return EmotionComponent(
            intensity=self.intensity,
            parameters=parameters,
            timing=self.timing
        )


ComponentMap = Callable[[str, EmotionComponent], EmotionComponent]


class _ChannelSet:
    """Shared behaviour of facial and body channel sets."""
    
    CHANNELS = ()
    
    def channels(self) -> Dict[str, EmotionComponent]:
        """Present channels in canonical order."""
        result = {}
        for name in self.CHANNELS:
            component = getattr(self, name)
            if component is not None:
                result[name] = component
        return result
    
    def map(self, fn: ComponentMap):
        """Return a new set with fn applied to every present channel."""
        updates = {name: fn(name, component) for name, component in self.channels().items()}
        return type(self)(**{name: updates.get(name) for name in self.CHANNELS})
    
    @property
    def average_intensity(self) -> float:
        channels = self.channels()
        if not channels:
            return 0.0
        return sum(c.intensity for c in channels.values()) / len(channels)


@dataclass(frozen=True)
class FacialComponents(_ChannelSet):
    """Facial channels of an analysed emotion."""
    
    eyebrows: Optional[EmotionComponent] = None
    eyes: Optional[EmotionComponent] = None
    mouth: Optional[EmotionComponent] = None
    head: Optional[EmotionComponent] = None
    
    CHANNELS = FACIAL_CHANNELS


@dataclass(frozen=True)
class BodyComponents(_ChannelSet):
    """Body channels of an analysed emotion."""
    
    shoulders: Optional[EmotionComponent] = None
    arms: Optional[EmotionComponent] = None
    posture: Optional[EmotionComponent] = None
    movement: Optional[EmotionComponent] = None
    
    CHANNELS = BODY_CHANNELS
