"""
Coherence validation of synthesized expressions.

Checks that an expression is internally consistent: declared type, overall
intensity, per-emotion facial and body rules, and facial/body alignment.
All checks run; issues accumulate in check order.
"""

import logging
from typing import List, Optional, Tuple

from emotion_synthesis.calibration.intensity_calibrator import IntensityCalibrator
from emotion_synthesis.config.settings import get_settings
from emotion_synthesis.models.emotion_label import EmotionLabel, normalize_label
from emotion_synthesis.models.expression import LSFExpression
from emotion_synthesis.models.results import CoherenceResult
from emotion_synthesis.tables import BODY_RULES, FACIAL_RULES, SanityRule


logger = logging.getLogger(__name__)


class CoherenceValidator:
    """
    Validates expression coherence.
    
    Rule thresholds scale with the expected intensity of the request and are
    checked against each channel's profile: the parameter divided by the
    channel intensity, which removes the per-channel salience applied at
    assembly. Failing expressions are degraded, not rejected.
    """
    
    FACIAL_WEIGHT = 0.7
    BODY_WEIGHT = 0.3
    
    # Channel intensities below this are treated as inactive
    _EPSILON = 1e-9
    
    def __init__(
        self,
        calibrator: Optional[IntensityCalibrator] = None,
        unknown_intensity_factor: Optional[float] = None,
        intensity_tolerance: Optional[float] = None,
        max_channel_divergence: Optional[float] = None,
        degraded_score: Optional[float] = None
    ):
        """
        Initialize coherence validator.
        
        Args:
            calibrator: Intensity calibrator for the expected intensity (creates new if None)
            unknown_intensity_factor: Intensity factor for unknown labels (settings if None)
            intensity_tolerance: Allowed overall intensity error (settings if None)
            max_channel_divergence: Allowed facial/body gap (settings if None)
            degraded_score: Score of an incoherent expression (settings if None)
        """
        settings = get_settings()
        self.calibrator = calibrator or IntensityCalibrator()
        self.unknown_intensity_factor = (
            settings.unknown_emotion_intensity_factor
            if unknown_intensity_factor is None else unknown_intensity_factor
        )
        self.intensity_tolerance = (
            settings.intensity_tolerance if intensity_tolerance is None else intensity_tolerance
        )
        self.max_channel_divergence = (
            settings.max_channel_divergence
            if max_channel_divergence is None else max_channel_divergence
        )
        self.degraded_score = (
            settings.degraded_coherence_score if degraded_score is None else degraded_score
        )
    
    def validate(
        self,
        expression: LSFExpression,
        emotion_type: str,
        requested_intensity: float,
        dominant_type: Optional[str] = None
    ) -> CoherenceResult:
        """
        Validate coherence of an expression against its request.

        Args:
            expression: Expression to check
            emotion_type: Requested emotion label
            requested_intensity: Requested raw intensity
            dominant_type: Label whose expected intensity and channel rules
                apply, when the channels express another emotion than the
                declared one (emotion_type if None)

        Returns:
            CoherenceResult with accumulated issues
        """
        issues: List[str] = []
        label = EmotionLabel.parse(dominant_type or emotion_type)
        expected = self.calibrator.calibrate(label, requested_intensity)
        if not label.is_known:
            expected *= self.unknown_intensity_factor
        facial_intensity = expression.facial_intensity()
        body_intensity = expression.body_intensity()
        
        # 1. Declared type
        if normalize_label(expression.emotion_type) != normalize_label(emotion_type):
            issues.append(
                f"Declared emotion '{expression.emotion_type}' does not match "
                f"requested '{emotion_type}'"
            )
        
        # 2. Overall intensity
        overall = self.FACIAL_WEIGHT * facial_intensity + self.BODY_WEIGHT * body_intensity
        if abs(overall - expected) > self.intensity_tolerance:
            issues.append(
                f"Overall intensity {overall:.2f} deviates from expected "
                f"{expected:.2f} by more than {self.intensity_tolerance}"
            )
        
        # 3. and 4. Per-emotion channel rules
        for rule in FACIAL_RULES.get(label, ()):
            issue = self._check_rule(expression, rule, expected, 'Facial')
            if issue:
                issues.append(issue)
        for rule in BODY_RULES.get(label, ()):
            issue = self._check_rule(expression, rule, expected, 'Body')
            if issue:
                issues.append(issue)
        
        # 5. Cross-channel alignment
        gap = abs(facial_intensity - body_intensity)
        if gap > self.max_channel_divergence + self._EPSILON:
            issues.append(
                f"Facial intensity {facial_intensity:.2f} and body intensity "
                f"{body_intensity:.2f} diverge by more than {self.max_channel_divergence}"
            )
        
        if issues:
            logger.info(f"Expression coherence degraded: {len(issues)} issue(s)")
            return CoherenceResult(is_coherent=False, issues=issues, score=self.degraded_score)
        return CoherenceResult(is_coherent=True, issues=[], score=1.0)
    
    def _check_rule(
        self,
        expression: LSFExpression,
        rule: SanityRule,
        expected: float,
        kind: str
    ) -> Optional[str]:
        parameters = expression.get_channel(rule.channel)
        if parameters is None or rule.parameter not in parameters:
            return (
                f"{kind} rule failed: {rule.channel}.{rule.parameter} is missing"
            )
        
        profile, bound = self._profile(expression, rule, parameters[rule.parameter], expected)
        if rule.comparison == '<=':
            passed = profile <= bound + self._EPSILON
        else:
            passed = profile >= bound - self._EPSILON
        
        if passed:
            return None
        return (
            f"{kind} rule failed: {rule.channel}.{rule.parameter} = {profile:.2f} "
            f"should be {rule.comparison} {bound:.2f}"
        )
    
    def _profile(
        self,
        expression: LSFExpression,
        rule: SanityRule,
        value: float,
        expected: float
    ) -> Tuple[float, float]:
        channel_intensity = expression.channel_intensities.get(rule.channel, 0.0)
        if channel_intensity < self._EPSILON:
            return 0.0, rule.threshold * expected
        return value / channel_intensity, rule.threshold * expected
