"""
Ethics gate for controlled expressions.

The integration controller consults an ethics validator before applying any
control. The validator's policy is opaque to the controller; this module
defines the interface and a rule-based default implementation.
"""

import logging
from typing import Iterable, Optional, Protocol

from emotion_synthesis.config.settings import get_settings
from emotion_synthesis.models.emotion_label import normalize_label
from emotion_synthesis.models.results import EthicsDecision, EthicsRequest


logger = logging.getLogger(__name__)


class EthicsValidator(Protocol):
    """
    Protocol defining the interface for the ethics collaborator.
    
    This protocol allows the integration controller to work with any
    ethics implementation that provides an async validate_action method.
    """
    
    async def validate_action(self, request: EthicsRequest) -> EthicsDecision:
        """
        Decide whether an action may proceed.
        
        Args:
            request: Action type, details and context
            
        Returns:
            EthicsDecision with approval flag and optional reason
        """
        ...


class RuleBasedEthicsValidator:
    """
    Local ethics policy for expression control.
    
    Rejects a request when:
    - The expression metadata flags prohibited content
    - The emotion is in the blocked set
    - The expression intensity exceeds the configured ceiling
    """
    
    PROHIBITED_FLAGS = ('prohibited_content', 'harassment', 'mockery')
    
    def __init__(
        self,
        max_intensity: Optional[float] = None,
        blocked_emotions: Optional[Iterable[str]] = None
    ):
        """
        Initialize rule-based ethics validator.
        
        Args:
            max_intensity: Intensity ceiling (settings if None)
            blocked_emotions: Emotion labels that are never approved
        """
        if max_intensity is None:
            max_intensity = get_settings().max_ethical_intensity
        self.max_intensity = max_intensity
        self.blocked_emotions = frozenset(
            normalize_label(label) for label in (blocked_emotions or ())
        )
    
    async def validate_action(self, request: EthicsRequest) -> EthicsDecision:
        """
        Apply the local policy to a request.
        
        Args:
            request: Ethics request describing the expression
            
        Returns:
            EthicsDecision
        """
        details = request.action_details
        metadata = details.get('metadata') or {}
        
        flagged = [flag for flag in self.PROHIBITED_FLAGS if metadata.get(flag)]
        if flagged:
            return self._reject(request, f"Expression flagged for prohibited content: {flagged}")
        
        emotion = normalize_label(str(details.get('emotion', '')))
        if emotion in self.blocked_emotions:
            return self._reject(request, f"Emotion '{emotion}' is not permitted")
        
        intensity = details.get('intensity', 0.0)
        if intensity > self.max_intensity:
            return self._reject(
                request,
                f"Intensity {intensity:.2f} exceeds ethical limit {self.max_intensity:.2f}"
            )
        
        return EthicsDecision(approved=True)
    
    def _reject(self, request: EthicsRequest, reason: str) -> EthicsDecision:
        logger.warning(
            f"Ethics validation rejected {request.action_type}: {reason}",
            extra={'correlation_id': request.context.get('correlation_id')}
        )
        return EthicsDecision(approved=False, reason=reason)
