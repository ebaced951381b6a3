"""
Contextual and formality adjustment of analysed emotions.

Maps the social setting to a bundle of multipliers and applies the
formality reduction across timing and every facial and body channel.
"""

import logging
from dataclasses import replace
from typing import Optional

from emotion_synthesis.models.analyzed_emotion import AnalyzedEmotion
from emotion_synthesis.models.components import clamp_unit
from emotion_synthesis.models.emotion_input import SocialContext
from emotion_synthesis.tables import CONTEXT_PROFILES, ContextProfile
from emotion_synthesis.timing.timing_manager import TimingManager


logger = logging.getLogger(__name__)


class ContextualAdjuster:
    """
    Applies social-context multipliers to an analysed emotion.
    
    Order of operations:
    1. Global multiplier on the calibrated intensity
    2. Facial and body emphasis weights on channel intensities only
    3. Optional duration multiplier, then the formality timing stretch
    4. Formality reduction (1 - formality x 0.3) on every channel's
       intensity and parameters
    """
    
    # Formality damps channels by up to 30%
    FORMALITY_REDUCTION_WEIGHT = 0.3
    
    def __init__(self, timing_manager: Optional[TimingManager] = None):
        """
        Initialize contextual adjuster.
        
        Args:
            timing_manager: Timing manager for the formality stretch (creates new if None)
        """
        self.timing_manager = timing_manager or TimingManager()
    
    def profile_for(self, context: SocialContext) -> ContextProfile:
        """Multiplier bundle for a context; unknown settings use the default bundle."""
        return CONTEXT_PROFILES[context.setting]
    
    def adjust(self, analyzed: AnalyzedEmotion, context: SocialContext) -> AnalyzedEmotion:
        """
        Apply context and formality adjustments.
        
        Args:
            analyzed: Analysed emotion without metrics
            context: Social context
            
        Returns:
            New AnalyzedEmotion
        """
        profile = self.profile_for(context)
        formality = context.formality_level
        
        calibrated = clamp_unit(analyzed.calibrated_intensity * profile.global_intensity)
        
        facial = analyzed.facial.map(
            lambda _, c: c.with_intensity(c.intensity * profile.facial_emphasis)
        )
        body = analyzed.body.map(
            lambda _, c: c.with_intensity(c.intensity * profile.body_emphasis)
        )
        
        timing = analyzed.timing
        if profile.duration is not None:
            timing = timing.scaled(profile.duration)
        timing = self.timing_manager.adjust_for_formality(timing, formality)
        
        reduction = 1 - formality * self.FORMALITY_REDUCTION_WEIGHT
        facial = facial.map(lambda _, c: c.scaled(reduction))
        body = body.map(lambda _, c: c.scaled(reduction))
        
        logger.debug(
            f"Applied context: social={context.setting.value}, formality={formality:.2f}, "
            f"calibrated={calibrated:.3f}, reduction={reduction:.3f}"
        )
        
        return replace(
            analyzed,
            calibrated_intensity=calibrated,
            facial=facial,
            body=body,
            timing=timing,
            context_notes={
                'social': context.setting.value,
                'formality_level': formality,
                'global_intensity': profile.global_intensity,
                'facial_emphasis': profile.facial_emphasis,
                'body_emphasis': profile.body_emphasis,
                'duration_multiplier': profile.duration,
                'formality_reduction': reduction,
            }
        )
