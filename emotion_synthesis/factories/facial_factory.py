"""
Facial component factory.

Builds eyebrow, eye, mouth and head components from the per-emotion facial
table. Unknown emotions fall back to the neutral table; the caller passes
an already-reduced intensity for them.
"""

from typing import Union

from emotion_synthesis.models.components import (
    FACIAL_CHANNELS,
    ChannelTiming,
    EmotionComponent,
    FacialComponents,
)
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.tables import (
    CHANNEL_SALIENCE,
    FACIAL_PARAMETERS,
    FACIAL_TIMINGS,
    table_label,
)


class FacialComponentFactory:
    """Creates facial channel components for an emotion."""
    
    def create(self, emotion: Union[str, EmotionLabel], intensity: float) -> FacialComponents:
        """
        Create facial components.
        
        Each channel's parameters are the table values scaled by intensity;
        its intensity is the given intensity scaled by the channel salience.
        
        Args:
            emotion: Emotion label
            intensity: Calibrated intensity
            
        Returns:
            FacialComponents with every facial channel populated
        """
        label = table_label(EmotionLabel.parse(emotion))
        table = FACIAL_PARAMETERS[label]
        timing = ChannelTiming(*FACIAL_TIMINGS[label])
        
        channels = {}
        for name in FACIAL_CHANNELS:
            channels[name] = EmotionComponent(
                intensity=intensity * CHANNEL_SALIENCE[name],
                parameters={k: v * intensity for k, v in table[name].items()},
                timing=timing
            )
        return FacialComponents(**channels)
