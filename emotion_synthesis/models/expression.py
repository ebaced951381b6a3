"""
LSF expression data model.

The externally visible artifact handed to the avatar renderer. Expressions
are mutable while a single stage builds them; stages exchange them by value
through copy() so a later stage never alters a snapshot held by an earlier one.
"""

import copy as _copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .components import BODY_CHANNELS, FACIAL_CHANNELS


ParameterMap = Dict[str, float]


@dataclass
class Coordinates:
    """Position in signing space."""
    
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class SignLocation:
    """
    Placement of the expression in signing space.
    
    Attributes:
        coordinates: Current position
        zone: Named region of signing space
        reference: Reference anchor label
        reference_points: Stored reference positions keyed by name
        recovery: Recovery mode after emotional expansion
    """
    
    coordinates: Optional[Coordinates] = None
    zone: Optional[str] = None
    reference: Optional[str] = None
    reference_points: Dict[str, Coordinates] = field(default_factory=dict)
    recovery: Optional[str] = None


@dataclass
class Handshape:
    """Hand configuration and movement parameters."""
    
    configuration: ParameterMap = field(default_factory=dict)
    movement: ParameterMap = field(default_factory=dict)


@dataclass
class BodyExpression:
    """Body channels of an expression."""
    
    posture: Optional[ParameterMap] = None
    movement: Optional[ParameterMap] = None
    shoulders: Optional[ParameterMap] = None
    arms: Optional[ParameterMap] = None


@dataclass
class ExpressionTiming:
    """
    Timing of an expression in milliseconds.
    
    onset + hold + release equals duration. The optional fields are set by
    the syntax/emotion integration pass.
    """
    
    duration: float
    onset: float
    hold: float
    release: float
    interval: Optional[float] = None
    repetition: Optional[int] = None
    onset_strategy: Optional[str] = None
    transition_method: Optional[str] = None


@dataclass
class LSFExpression:
    """
    Fully parameterized expression for a signing avatar.
    
    Attributes:
        eyebrows: Eyebrow parameters
        eyes: Eye parameters
        mouth: Mouth parameters
        body: Body channel parameters
        timing: Expression timing
        intensity: Global intensity in [0, 1]
        emotion_type: Declared emotion label
        head: Head parameters
        handshape: Hand configuration and movement
        location: Signing-space placement
        channel_intensities: Per-channel intensity after all adjustments
        metadata: Synthesis metadata (metrics, context, nuances, blend)
    """
    
    eyebrows: ParameterMap
    eyes: ParameterMap
    mouth: ParameterMap
    body: BodyExpression
    timing: ExpressionTiming
    intensity: float
    emotion_type: str
    head: Optional[ParameterMap] = None
    handshape: Optional[Handshape] = None
    location: Optional[SignLocation] = None
    channel_intensities: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    def copy(self) -> 'LSFExpression':
        """Deep copy sharing no mutable state with this expression."""
        return _copy.deepcopy(self)
    
    def get_channel(self, name: str) -> Optional[ParameterMap]:
        """Return the parameter map of a facial or body channel."""
        if name in FACIAL_CHANNELS:
            return getattr(self, name)
        if name in BODY_CHANNELS:
            return getattr(self.body, name)
        raise KeyError(f"Unknown channel: {name}")
    
    def set_channel(self, name: str, parameters: Optional[ParameterMap]) -> None:
        """Replace the parameter map of a facial or body channel."""
        if name in FACIAL_CHANNELS:
            setattr(self, name, parameters)
        elif name in BODY_CHANNELS:
            setattr(self.body, name, parameters)
        else:
            raise KeyError(f"Unknown channel: {name}")
    
    def facial_channels(self) -> Dict[str, ParameterMap]:
        """Present facial channels in canonical order."""
        return {n: getattr(self, n) for n in FACIAL_CHANNELS if getattr(self, n) is not None}
    
    def body_channels(self) -> Dict[str, ParameterMap]:
        """Present body channels in canonical order."""
        return {
            n: getattr(self.body, n) for n in BODY_CHANNELS
            if getattr(self.body, n) is not None
        }
    
    def facial_intensity(self) -> float:
        """Mean intensity of the present facial channels."""
        return self._mean_intensity(self.facial_channels())
    
    def body_intensity(self) -> float:
        """Mean intensity of the present body channels."""
        return self._mean_intensity(self.body_channels())
    
    def _mean_intensity(self, channels: Dict[str, ParameterMap]) -> float:
        values = [self.channel_intensities.get(name, 0.0) for name in channels]
        if not values:
            return 0.0
        return sum(values) / len(values)
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Render the expression as plain data for the avatar renderer.
        
        Returns:
            Dictionary with camelCase top-level keys
        """
        data = asdict(self)
        return {
            'eyebrows': data['eyebrows'],
            'eyes': data['eyes'],
            'mouth': data['mouth'],
            'head': data['head'],
            'body': {k: v for k, v in data['body'].items() if v is not None},
            'handshape': data['handshape'],
            'location': data['location'],
            'timing': {k: v for k, v in data['timing'].items() if v is not None},
            'intensity': data['intensity'],
            'emotionType': data['emotion_type'],
            'channelIntensities': data['channel_intensities'],
            'metadata': data['metadata'],
        }
