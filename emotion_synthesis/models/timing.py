"""
Expression timing envelope data model.
"""

from dataclasses import dataclass


# Apex position between onset and total duration
APEX_RATIO = 0.4

# Float tolerance for envelope comparisons
_EPSILON = 1e-6


@dataclass(frozen=True)
class EmotionTiming:
    """
    Global onset/apex/offset envelope of an expression, in milliseconds.
    
    The envelope is monotonic and closed:
    onset <= apex <= offset == total_duration.
    
    Attributes:
        onset: End of the onset phase
        apex: Peak activation time
        offset: End of the expression
        total_duration: Total duration
    """
    
    onset: float
    apex: float
    offset: float
    total_duration: float
    
    def __post_init__(self):
        """Validate envelope shape."""
        if self.onset < 0:
            raise ValueError(f"onset must be non-negative, got {self.onset}")
        if self.apex < self.onset - _EPSILON:
            raise ValueError(f"apex ({self.apex}) must not precede onset ({self.onset})")
        if self.offset < self.apex - _EPSILON:
            raise ValueError(f"offset ({self.offset}) must not precede apex ({self.apex})")
        if abs(self.offset - self.total_duration) > _EPSILON:
            raise ValueError(
                f"offset ({self.offset}) must equal total_duration ({self.total_duration})"
            )
    
    @classmethod
    def from_onset_and_total(cls, onset: float, total_duration: float) -> 'EmotionTiming':
        """
        Build an envelope with apex placed at 40% of the post-onset span.
        
        Args:
            onset: Onset in milliseconds
            total_duration: Total duration in milliseconds
            
        Returns:
            EmotionTiming
        """
        total_duration = max(total_duration, onset)
        apex = onset + (total_duration - onset) * APEX_RATIO
        return cls(onset=onset, apex=apex, offset=total_duration, total_duration=total_duration)
    
    def scaled(self, factor: float) -> 'EmotionTiming':
        """Multiply every field by factor."""
        return EmotionTiming(
            onset=self.onset * factor,
            apex=self.apex * factor,
            offset=self.offset * factor,
            total_duration=self.total_duration * factor
        )
    
    @property
    def hold(self) -> float:
        """Time from end of onset to apex."""
        return self.apex - self.onset
    
    @property
    def release(self) -> float:
        """Time from apex to end of expression."""
        return self.total_duration - self.apex
