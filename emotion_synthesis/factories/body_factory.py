"""
Body component factory.

Builds shoulder, arm, posture and movement components from the per-emotion
body table.
"""

from typing import Dict, Union

from emotion_synthesis.models.components import (
    BODY_CHANNELS,
    BodyComponents,
    ChannelTiming,
    EmotionComponent,
)
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.tables import (
    BODY_PARAMETERS,
    BODY_TIMINGS,
    CHANNEL_SALIENCE,
    HAND_PARAMETERS,
    table_label,
)


class BodyComponentFactory:
    """Creates body channel components and hand parameters for an emotion."""
    
    def create(self, emotion: Union[str, EmotionLabel], intensity: float) -> BodyComponents:
        """
        Create body components.
        
        Args:
            emotion: Emotion label
            intensity: Calibrated intensity
            
        Returns:
            BodyComponents with every body channel populated
        """
        label = table_label(EmotionLabel.parse(emotion))
        table = BODY_PARAMETERS[label]
        timing = ChannelTiming(*BODY_TIMINGS[label])
        
        channels = {}
        for name in BODY_CHANNELS:
            channels[name] = EmotionComponent(
                intensity=intensity * CHANNEL_SALIENCE[name],
                parameters={k: v * intensity for k, v in table[name].items()},
                timing=timing
            )
        return BodyComponents(**channels)
    
    def create_hand(
        self,
        emotion: Union[str, EmotionLabel],
        intensity: float
    ) -> Dict[str, Dict[str, float]]:
        """
        Create hand configuration and movement parameters.
        
        Args:
            emotion: Emotion label
            intensity: Calibrated intensity
            
        Returns:
            Dict with 'configuration' and 'movement' parameter maps
        """
        label = table_label(EmotionLabel.parse(emotion))
        return {
            group: {k: v * intensity for k, v in params.items()}
            for group, params in HAND_PARAMETERS[label].items()
        }
