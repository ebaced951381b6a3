"""
Timing envelope computation.

Computes the onset/apex/offset/total envelope of an emotion, adjusts it for
intensity and formality, and scores its temporal expressiveness.
"""

import logging
from typing import Union

from emotion_synthesis.models.components import clamp_unit
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.models.timing import EmotionTiming
from emotion_synthesis.tables import BASE_TIMINGS, table_label


logger = logging.getLogger(__name__)


class TimingManager:
    """
    Computes and adjusts timing envelopes.
    
    High intensities (> 0.7) shorten onset and total duration by 15%, low
    intensities (< 0.3) lengthen them by 15%. The apex is always recomputed
    at 40% of the post-onset span.
    """
    
    HIGH_INTENSITY_THRESHOLD = 0.7
    LOW_INTENSITY_THRESHOLD = 0.3
    HIGH_INTENSITY_FACTOR = 0.85
    LOW_INTENSITY_FACTOR = 1.15
    
    # Formality stretches timing by up to 30%
    FORMALITY_TIMING_WEIGHT = 0.3
    
    # Temporal expressiveness targets and slopes
    TARGET_APEX_RATIO = 0.35
    TARGET_ONSET_RATIO = 0.2
    APEX_RATIO_SLOPE = 2.0
    ONSET_RATIO_SLOPE = 3.0
    
    def compute(self, emotion: Union[str, EmotionLabel], intensity: float) -> EmotionTiming:
        """
        Compute the envelope for an emotion at a calibrated intensity.
        
        Args:
            emotion: Emotion label (unknown labels use neutral timing)
            intensity: Calibrated intensity
            
        Returns:
            EmotionTiming
        """
        label = table_label(EmotionLabel.parse(emotion))
        onset, total = BASE_TIMINGS[label]
        
        if intensity > self.HIGH_INTENSITY_THRESHOLD:
            onset *= self.HIGH_INTENSITY_FACTOR
            total *= self.HIGH_INTENSITY_FACTOR
        elif intensity < self.LOW_INTENSITY_THRESHOLD:
            onset *= self.LOW_INTENSITY_FACTOR
            total *= self.LOW_INTENSITY_FACTOR
        
        timing = EmotionTiming.from_onset_and_total(onset, total)
        logger.debug(
            f"Computed timing: emotion={label.value}, onset={timing.onset:.1f}, "
            f"apex={timing.apex:.1f}, total={timing.total_duration:.1f}"
        )
        return timing
    
    def adjust_for_formality(self, timing: EmotionTiming, formality_level: float) -> EmotionTiming:
        """
        Stretch every timing field by 1 + formality_level x 0.3.
        
        Args:
            timing: Envelope to adjust
            formality_level: Formality in [0, 1]
            
        Returns:
            Adjusted EmotionTiming
        """
        return timing.scaled(1 + formality_level * self.FORMALITY_TIMING_WEIGHT)
    
    def temporal_expressiveness(self, timing: EmotionTiming) -> float:
        """
        Score how close the envelope shape is to the expressive target.
        
        The apex ratio is (apex - onset) / total and the onset ratio is
        onset / total. Each is scored 1 - |target - actual| x slope,
        clamped, then combined 60/40.
        
        Args:
            timing: Envelope to score
            
        Returns:
            Score in [0, 1]
        """
        if timing.total_duration <= 0:
            return 0.0
        
        apex_ratio = (timing.apex - timing.onset) / timing.total_duration
        onset_ratio = timing.onset / timing.total_duration
        
        apex_score = clamp_unit(
            1 - abs(self.TARGET_APEX_RATIO - apex_ratio) * self.APEX_RATIO_SLOPE
        )
        onset_score = clamp_unit(
            1 - abs(self.TARGET_ONSET_RATIO - onset_ratio) * self.ONSET_RATIO_SLOPE
        )
        return clamp_unit(apex_score * 0.6 + onset_score * 0.4)
