"""
Quality metrics for analysed emotions.

Scores authenticity, cultural accuracy against LSF reference norms, and
expressiveness including the temporal shape of the envelope.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from emotion_synthesis.models.analyzed_emotion import AnalyzedEmotion, ExpressionMetrics
from emotion_synthesis.models.components import EmotionComponent, clamp_unit
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.tables import (
    ALIGNMENT_FLAGS,
    BODY_COHERENCE_PAIRS,
    CULTURAL_NORMS,
    FACIAL_COHERENCE_PAIRS,
    table_label,
)
from emotion_synthesis.timing.timing_manager import TimingManager


logger = logging.getLogger(__name__)


Channels = Mapping[str, EmotionComponent]


class MetricsCalculator:
    """
    Computes authenticity, cultural accuracy and expressiveness.
    
    - Authenticity = 0.4 x facial coherence + 0.3 x body coherence
      + 0.3 x emotion-type alignment
    - Cultural accuracy = 0.6 x facial norm accuracy + 0.4 x body norm accuracy
    - Expressiveness = 0.4 x facial + 0.4 x body + 0.2 x temporal
    """
    
    # Sub-score defaults when nothing can be measured
    DEFAULT_FACIAL_COHERENCE = 0.9
    DEFAULT_BODY_COHERENCE = 0.85
    DEFAULT_NORM_ACCURACY = 0.85
    DEFAULT_EXPRESSIVENESS = 0.65
    EMPTY_CHANNEL_EXPRESSIVENESS = 0.5
    
    # Emotion-type alignment scoring
    BASE_ALIGNMENT = 0.7
    ALIGNMENT_INCREMENT = 0.1
    
    def __init__(self, timing_manager: Optional[TimingManager] = None):
        """
        Initialize metrics calculator.
        
        Args:
            timing_manager: Source of the temporal expressiveness score (creates new if None)
        """
        self.timing_manager = timing_manager or TimingManager()
    
    def calculate(self, analyzed: AnalyzedEmotion) -> ExpressionMetrics:
        """
        Calculate all quality metrics.
        
        Args:
            analyzed: Analysed emotion
            
        Returns:
            ExpressionMetrics with every score in [0, 1]
        """
        facial = analyzed.facial.channels()
        body = analyzed.body.channels()
        
        metrics = ExpressionMetrics(
            authenticity=self.authenticity(analyzed.label, facial, body),
            cultural_accuracy=self.cultural_accuracy(analyzed.label, facial, body),
            expressiveness=self.expressiveness(analyzed, facial, body)
        )
        logger.debug(
            f"Calculated metrics: authenticity={metrics.authenticity:.3f}, "
            f"cultural_accuracy={metrics.cultural_accuracy:.3f}, "
            f"expressiveness={metrics.expressiveness:.3f}"
        )
        return metrics
    
    def authenticity(self, label: EmotionLabel, facial: Channels, body: Channels) -> float:
        facial_coherence = self._pair_coherence(
            facial, FACIAL_COHERENCE_PAIRS, self.DEFAULT_FACIAL_COHERENCE
        )
        body_coherence = self._pair_coherence(
            body, BODY_COHERENCE_PAIRS, self.DEFAULT_BODY_COHERENCE
        )
        alignment = self.emotion_alignment(label, {**facial, **body})
        return clamp_unit(0.4 * facial_coherence + 0.3 * body_coherence + 0.3 * alignment)
    
    def emotion_alignment(self, label: EmotionLabel, channels: Channels) -> float:
        """Base alignment plus a fixed increment for each emotion-typical parameter present."""
        score = self.BASE_ALIGNMENT
        for channel, parameter in ALIGNMENT_FLAGS.get(label, ()):
            component = channels.get(channel)
            if component is not None and component.parameters.get(parameter):
                score += self.ALIGNMENT_INCREMENT
        return min(1.0, score)
    
    def cultural_accuracy(self, label: EmotionLabel, facial: Channels, body: Channels) -> float:
        norms = CULTURAL_NORMS[table_label(label)]
        facial_accuracy = self._norm_accuracy(facial, norms['facial'])
        body_accuracy = self._norm_accuracy(body, norms['body'])
        return clamp_unit(0.6 * facial_accuracy + 0.4 * body_accuracy)
    
    def expressiveness(self, analyzed: AnalyzedEmotion, facial: Channels, body: Channels) -> float:
        temporal = self.timing_manager.temporal_expressiveness(analyzed.timing)
        return clamp_unit(
            0.4 * self._channel_expressiveness(facial)
            + 0.4 * self._channel_expressiveness(body)
            + 0.2 * temporal
        )
    
    def _pair_coherence(
        self,
        channels: Channels,
        pairs: Tuple[Tuple[str, str, str, str, float], ...],
        default: float
    ) -> float:
        scores = []
        for channel_a, param_a, channel_b, param_b, weight in pairs:
            a = channels.get(channel_a)
            b = channels.get(channel_b)
            if a is None or b is None:
                continue
            if param_a not in a.parameters or param_b not in b.parameters:
                continue
            scores.append(1 - abs(a.parameters[param_a] - b.parameters[param_b]) * weight)
        if not scores:
            return default
        return clamp_unit(float(np.mean(scores)))
    
    def _norm_accuracy(self, channels: Channels, norms: Mapping[str, float]) -> float:
        scores = []
        for key, norm in norms.items():
            channel, parameter = key.split('.', 1)
            component = channels.get(channel)
            if component is None or parameter not in component.parameters:
                continue
            actual = component.parameters[parameter]
            scores.append(1 - min(0.5, abs(actual - norm)))
        if not scores:
            return self.DEFAULT_NORM_ACCURACY
        return float(np.mean(scores))
    
    def _channel_expressiveness(self, channels: Channels) -> float:
        if not channels:
            return self.DEFAULT_EXPRESSIVENESS
        scores: Dict[str, float] = {}
        for name, component in channels.items():
            values = list(component.parameters.values())
            if not values:
                scores[name] = self.EMPTY_CHANNEL_EXPRESSIVENESS
            else:
                scores[name] = clamp_unit(float(np.mean(np.abs(values))))
        return clamp_unit(float(np.mean(list(scores.values()))))
