"""
Intensity calibration.

Applies per-emotion amplification or damping to a raw intensity before any
channel synthesis.
"""

import logging
from typing import Union

from emotion_synthesis.models.components import clamp_unit
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.tables import INTENSITY_MULTIPLIERS


logger = logging.getLogger(__name__)


class IntensityCalibrator:
    """
    Calibrates raw intensities per emotion.
    
    Known emotions are multiplied by a fixed factor (e.g. surprise x1.3,
    sadness x0.9) and clamped to [0, 1]. Unknown labels pass through
    unchanged apart from clamping.
    """
    
    def calibrate(self, emotion: Union[str, EmotionLabel], intensity: float) -> float:
        """
        Calibrate a raw intensity.
        
        Args:
            emotion: Emotion label
            intensity: Raw intensity
            
        Returns:
            Calibrated intensity in [0, 1]
        """
        label = EmotionLabel.parse(emotion)
        multiplier = INTENSITY_MULTIPLIERS.get(label, 1.0)
        calibrated = clamp_unit(intensity * multiplier)
        
        logger.debug(
            f"Calibrated intensity: emotion={label.value}, raw={intensity:.3f}, "
            f"calibrated={calibrated:.3f}"
        )
        return calibrated
