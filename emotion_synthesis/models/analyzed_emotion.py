"""
Analysed emotion data model.

The intermediate value built once per request: calibrated intensity,
channel components, hand parameters, timing envelope and quality metrics.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from .components import BodyComponents, FacialComponents
from .emotion_label import EmotionLabel
from .timing import EmotionTiming


@dataclass(frozen=True)
class ExpressionMetrics:
    """
    Quality scores of a synthesized expression, each in [0, 1].
    
    Attributes:
        authenticity: Channel consistency and emotion-type alignment
        cultural_accuracy: Closeness to LSF reference norms
        expressiveness: Parameter magnitude and temporal shape
        coherence: 1.0 when coherent, lowered when coherence rules fail
    """
    
    authenticity: float
    cultural_accuracy: float
    expressiveness: float
    coherence: float = 1.0
    
    def __post_init__(self):
        """Validate score ranges."""
        for name in ('authenticity', 'cultural_accuracy', 'expressiveness', 'coherence'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
    
    def to_dict(self) -> Dict[str, float]:
        return {
            'authenticity': self.authenticity,
            'cultural_accuracy': self.cultural_accuracy,
            'expressiveness': self.expressiveness,
            'coherence': self.coherence,
        }


@dataclass(frozen=True)
class AnalyzedEmotion:
    """
    Fully analysed emotion ready for assembly.
    
    Attributes:
        base_type: Normalized raw emotion label
        label: Parsed emotion label (UNKNOWN for unrecognised labels)
        requested_intensity: Raw requested intensity
        calibrated_intensity: Intensity after calibration and context
        facial: Facial channel components
        body: Body channel components
        hand: Hand configuration and movement parameters
        timing: Global timing envelope
        metrics: Quality metrics, attached once after analysis
        context_notes: Adjustments applied by the contextual adjuster
    """
    
    base_type: str
    label: EmotionLabel
    requested_intensity: float
    calibrated_intensity: float
    facial: FacialComponents
    body: BodyComponents
    hand: Mapping[str, Mapping[str, float]]
    timing: EmotionTiming
    metrics: Optional[ExpressionMetrics] = None
    context_notes: Mapping[str, object] = field(default_factory=dict)
    
    @property
    def is_fallback(self) -> bool:
        """True when the neutral fallback tables were used."""
        return not self.label.is_known
    
    def with_metrics(self, metrics: ExpressionMetrics) -> 'AnalyzedEmotion':
        """Return a copy carrying the given metrics."""
        if self.metrics is not None:
            raise ValueError("metrics are already attached")
        return replace(self, metrics=metrics)
