"""
Structural validation of assembled expressions.

Checks that an expression is renderable: required channels present with
non-empty numeric parameters, a well-formed timing envelope, and
intensities inside [0, 1].
"""

import logging
import math
from typing import List

from emotion_synthesis.models.expression import LSFExpression
from emotion_synthesis.models.results import ValidationIssue, ValidationResult


logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


class ExpressionValidator:
    """Validates the structure of an LSFExpression."""
    
    REQUIRED_CHANNELS = ('eyebrows', 'eyes', 'mouth', 'posture', 'movement')
    
    # Tolerance for the onset + hold + release == duration check
    TIMING_TOLERANCE_MS = 1e-6
    
    # Score lost per structural error
    ERROR_PENALTY = 0.2
    
    def validate(self, expression: LSFExpression) -> ValidationResult:
        """
        Validate an expression.
        
        Args:
            expression: Expression to check
            
        Returns:
            ValidationResult; invalid when any error is found
        """
        issues: List[ValidationIssue] = []
        issues.extend(self._check_channels(expression))
        issues.extend(self._check_timing(expression))
        issues.extend(self._check_intensities(expression))
        
        if issues:
            logger.warning(
                f"Expression failed structural validation with {len(issues)} issue(s): "
                f"{'; '.join(i.message for i in issues)}"
            )
            score = max(0.0, 1.0 - self.ERROR_PENALTY * len(issues))
            return ValidationResult.failure_result(issues, score=score)
        
        return ValidationResult.success_result()
    
    def _check_channels(self, expression: LSFExpression) -> List[ValidationIssue]:
        issues = []
        channels = {**expression.facial_channels(), **expression.body_channels()}
        
        for name in self.REQUIRED_CHANNELS:
            if name not in channels:
                issues.append(ValidationIssue(
                    type='missing_channel',
                    severity='error',
                    message=f"Required channel '{name}' is missing",
                    component=name
                ))
        
        for name, parameters in channels.items():
            if not parameters:
                issues.append(ValidationIssue(
                    type='empty_parameters',
                    severity='error',
                    message=f"Channel '{name}' has no parameters",
                    component=name
                ))
                continue
            bad = [key for key, value in parameters.items() if not _is_number(value)]
            if bad:
                issues.append(ValidationIssue(
                    type='invalid_parameter',
                    severity='error',
                    message=f"Channel '{name}' has non-numeric parameters: {bad}",
                    component=name
                ))
        return issues
    
    def _check_timing(self, expression: LSFExpression) -> List[ValidationIssue]:
        timing = expression.timing
        phases = {
            'duration': timing.duration,
            'onset': timing.onset,
            'hold': timing.hold,
            'release': timing.release,
        }
        
        invalid = [name for name, value in phases.items() if not _is_number(value) or value < 0]
        if invalid:
            return [ValidationIssue(
                type='timing_envelope',
                severity='error',
                message=f"Timing fields must be non-negative numbers: {invalid}",
                component='timing'
            )]
        
        total = timing.onset + timing.hold + timing.release
        if abs(total - timing.duration) > self.TIMING_TOLERANCE_MS:
            return [ValidationIssue(
                type='timing_envelope',
                severity='error',
                message=(
                    f"Timing phases sum to {total:.1f}ms but duration is "
                    f"{timing.duration:.1f}ms"
                ),
                component='timing'
            )]
        return []
    
    def _check_intensities(self, expression: LSFExpression) -> List[ValidationIssue]:
        issues = []
        if not _is_number(expression.intensity) or not 0.0 <= expression.intensity <= 1.0:
            issues.append(ValidationIssue(
                type='intensity_range',
                severity='error',
                message=f"Intensity must be in [0, 1], got {expression.intensity!r}",
                component='intensity'
            ))
        
        for name, value in expression.channel_intensities.items():
            if not _is_number(value) or not 0.0 <= value <= 1.0:
                issues.append(ValidationIssue(
                    type='intensity_range',
                    severity='error',
                    message=f"Channel '{name}' intensity must be in [0, 1], got {value!r}",
                    component=name
                ))
        return issues
