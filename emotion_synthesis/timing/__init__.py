"""Expression timing."""

from .timing_manager import TimingManager

__all__ = ['TimingManager']
