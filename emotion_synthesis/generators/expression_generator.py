"""
Expression assembly and nuance application.

This module turns an AnalyzedEmotion into an LSFExpression, applies the
requested nuances (subtlety, facial/body emphasis, secondary-emotion
blend), enforces facial/body alignment and validates the result.
"""

import logging
from dataclasses import replace
from typing import Optional

from emotion_synthesis.analysis.emotion_analyzer import EmotionAnalyzer
from emotion_synthesis.config.settings import get_settings
from emotion_synthesis.exceptions import EmotionSynthesisError, ExpressionValidationError
from emotion_synthesis.models.analyzed_emotion import AnalyzedEmotion
from emotion_synthesis.models.components import BODY_CHANNELS, FACIAL_CHANNELS, clamp_unit
from emotion_synthesis.models.emotion_input import EmotionInput, SecondaryEmotion
from emotion_synthesis.models.expression import (
    BodyExpression,
    ExpressionTiming,
    Handshape,
    LSFExpression,
    ParameterMap,
)
from emotion_synthesis.models.results import SynthesisResult
from emotion_synthesis.validation.coherence_validator import CoherenceValidator
from emotion_synthesis.validation.expression_validator import ExpressionValidator


logger = logging.getLogger(__name__)


def _blend_parameters(primary: ParameterMap, secondary: ParameterMap, ratio: float) -> ParameterMap:
    """
    Blend two parameter maps.
    
    Shared keys are interpolated. Keys only in the primary fade out with the
    ratio and are dropped at ratio 1; keys only in the secondary fade in and
    are absent at ratio 0.
    """
    result = {}
    for key, value in primary.items():
        if key in secondary:
            result[key] = value * (1 - ratio) + secondary[key] * ratio
        elif ratio < 1:
            result[key] = value * (1 - ratio)
    for key, value in secondary.items():
        if key not in primary and ratio > 0:
            result[key] = value * ratio
    return result


def _lerp(a: float, b: float, ratio: float) -> float:
    return a * (1 - ratio) + b * ratio


class ExpressionGenerator:
    """
    Assembles and refines LSF expressions.
    
    Base assembly multiplies every analysed channel parameter by that
    channel's own intensity. Analysed parameters already carry the
    calibrated intensity, so channel parameters are scaled twice; channel
    intensity encodes per-channel salience on top of the global intensity.
    """
    
    # Subtlety damping weights
    SUBTLETY_INTENSITY_WEIGHT = 0.5
    SUBTLETY_CHANNEL_WEIGHT = 0.6
    
    # Float slack on the alignment gap
    _EPSILON = 1e-9
    
    def __init__(
        self,
        analyzer: Optional[EmotionAnalyzer] = None,
        expression_validator: Optional[ExpressionValidator] = None,
        coherence_validator: Optional[CoherenceValidator] = None,
        max_channel_divergence: Optional[float] = None
    ):
        """
        Initialize expression generator.
        
        Args:
            analyzer: Emotion analyzer (creates new if None)
            expression_validator: Structural validator (creates new if None)
            coherence_validator: Coherence validator (creates new if None)
            max_channel_divergence: Maximum facial/body intensity gap (settings if None)
        """
        self.analyzer = analyzer or EmotionAnalyzer()
        self.expression_validator = expression_validator or ExpressionValidator()
        self.coherence_validator = coherence_validator or CoherenceValidator(
            calibrator=self.analyzer.calibrator,
            unknown_intensity_factor=self.analyzer.unknown_intensity_factor
        )
        if max_channel_divergence is None:
            max_channel_divergence = get_settings().max_channel_divergence
        self.max_channel_divergence = max_channel_divergence
    
    def generate(self, emotion_input: EmotionInput) -> SynthesisResult:
        """
        Synthesize, refine and validate an expression.
        
        Structural failures are returned as a failed SynthesisResult carrying
        the partial expression and its issues. Coherence failures produce a
        successful but degraded result.
        
        Args:
            emotion_input: Validated request
            
        Returns:
            SynthesisResult
        """
        analyzed = self.analyzer.analyze(emotion_input)
        expression = self.assemble(analyzed)
        
        nuances = emotion_input.nuances
        if nuances is not None:
            if nuances.subtlety is not None:
                expression = self.apply_subtlety(expression, nuances.subtlety)
            if nuances.facial_vs_body_emphasis is not None:
                expression = self.apply_emphasis(expression, nuances.facial_vs_body_emphasis)
            if nuances.secondary_emotion is not None:
                expression = self._blend_secondary(expression, emotion_input, nuances.secondary_emotion)
        
        expression = self.enforce_alignment(expression)
        
        try:
            self.check_structure(expression)
        except ExpressionValidationError as e:
            return SynthesisResult.failure(
                e.error_type, str(e), expression=e.expression, issues=e.issues
            )
        
        coherence = self.coherence_validator.validate(
            expression, emotion_input.type, emotion_input.intensity,
            dominant_type=self._dominant_type(expression, emotion_input)
        )
        metrics = replace(analyzed.metrics, coherence=coherence.score)
        expression.metadata['metrics'] = metrics.to_dict()
        expression.metadata['coherence_issues'] = list(coherence.issues)
        
        return SynthesisResult(
            success=True,
            expression=expression,
            metrics=metrics,
            issues=list(coherence.issues)
        )
    
    def check_structure(self, expression: LSFExpression) -> None:
        """
        Run structural validation on an expression.

        Args:
            expression: Expression to check

        Raises:
            ExpressionValidationError: When the expression is not renderable
        """
        validation = self.expression_validator.validate(expression)
        if not validation:
            raise ExpressionValidationError(
                'Synthesized expression failed structural validation',
                expression=expression,
                issues=[str(issue) for issue in validation.issues]
            )

    def assemble(self, analyzed: AnalyzedEmotion) -> LSFExpression:
        """
        Build the base expression from an analysed emotion.
        
        Args:
            analyzed: Analysed emotion
            
        Returns:
            New LSFExpression
        """
        facial = analyzed.facial.channels()
        body = analyzed.body.channels()
        
        def channel_parameters(name: str, channels) -> Optional[ParameterMap]:
            component = channels.get(name)
            if component is None:
                return None
            return {k: v * component.intensity for k, v in component.parameters.items()}
        
        channel_intensities = {
            name: component.intensity for name, component in {**facial, **body}.items()
        }
        channel_timing = {
            name: component.timing.to_dict() for name, component in {**facial, **body}.items()
        }
        
        timing = analyzed.timing
        expression = LSFExpression(
            eyebrows=channel_parameters('eyebrows', facial),
            eyes=channel_parameters('eyes', facial),
            mouth=channel_parameters('mouth', facial),
            head=channel_parameters('head', facial),
            body=BodyExpression(
                posture=channel_parameters('posture', body),
                movement=channel_parameters('movement', body),
                shoulders=channel_parameters('shoulders', body),
                arms=channel_parameters('arms', body)
            ),
            handshape=Handshape(
                configuration=dict(analyzed.hand.get('configuration', {})),
                movement=dict(analyzed.hand.get('movement', {}))
            ),
            timing=ExpressionTiming(
                duration=timing.total_duration,
                onset=timing.onset,
                hold=timing.hold,
                release=timing.release
            ),
            intensity=clamp_unit(analyzed.calibrated_intensity),
            emotion_type=analyzed.base_type,
            channel_intensities=channel_intensities,
            metadata={
                'requested_intensity': analyzed.requested_intensity,
                'calibrated_intensity': analyzed.calibrated_intensity,
                'fallback': analyzed.is_fallback,
                'context': dict(analyzed.context_notes),
                'channel_timing': channel_timing,
                'metrics': analyzed.metrics.to_dict() if analyzed.metrics else None,
                'nuances': [],
            }
        )
        logger.debug(
            f"Assembled expression: emotion={expression.emotion_type}, "
            f"intensity={expression.intensity:.3f}"
        )
        return expression
    
    def apply_subtlety(self, expression: LSFExpression, subtlety: float) -> LSFExpression:
        """
        Damp an expression.
        
        The global intensity is multiplied by 1 - subtlety x 0.5, every
        facial and body channel by 1 - subtlety x 0.6.
        
        Args:
            expression: Expression to damp (not modified)
            subtlety: Subtlety in [0, 1]
            
        Returns:
            New LSFExpression
        """
        result = expression.copy()
        result.intensity = clamp_unit(
            result.intensity * (1 - subtlety * self.SUBTLETY_INTENSITY_WEIGHT)
        )
        factor = 1 - subtlety * self.SUBTLETY_CHANNEL_WEIGHT
        for name in FACIAL_CHANNELS + BODY_CHANNELS:
            self._scale_channel(result, name, factor)
        result.metadata.setdefault('nuances', []).append({'subtlety': subtlety})
        return result
    
    def apply_emphasis(self, expression: LSFExpression, emphasis: float) -> LSFExpression:
        """
        Shift weight between face and body.
        
        Facial channels are scaled by 0.5 + emphasis x 0.5 and body channels
        by 1.5 - emphasis x 0.5; emphasis 0 favours the body, 1 the face.
        
        Args:
            expression: Expression to rebalance (not modified)
            emphasis: Facial-vs-body emphasis in [0, 1]
            
        Returns:
            New LSFExpression
        """
        result = expression.copy()
        facial_factor = 0.5 + emphasis * 0.5
        body_factor = 1.5 - emphasis * 0.5
        for name in FACIAL_CHANNELS:
            self._scale_channel(result, name, facial_factor)
        for name in BODY_CHANNELS:
            self._scale_channel(result, name, body_factor)
        result.metadata.setdefault('nuances', []).append({'facial_vs_body_emphasis': emphasis})
        return result
    
    def blend(self, primary: LSFExpression, secondary: LSFExpression, ratio: float) -> LSFExpression:
        """
        Linearly interpolate two expressions.
        
        Args:
            primary: Primary expression (not modified)
            secondary: Secondary expression (not modified)
            ratio: 0 keeps the primary, 1 yields the secondary
            
        Returns:
            New LSFExpression declaring the primary emotion type
        """
        result = primary.copy()
        
        for name in FACIAL_CHANNELS + BODY_CHANNELS:
            p = primary.get_channel(name)
            s = secondary.get_channel(name)
            if p is None and s is None:
                continue
            result.set_channel(name, _blend_parameters(p or {}, s or {}, ratio))
        
        names = set(primary.channel_intensities) | set(secondary.channel_intensities)
        result.channel_intensities = {
            name: clamp_unit(_lerp(
                primary.channel_intensities.get(name, 0.0),
                secondary.channel_intensities.get(name, 0.0),
                ratio
            ))
            for name in FACIAL_CHANNELS + BODY_CHANNELS if name in names
        }
        
        if primary.handshape is not None and secondary.handshape is not None:
            result.handshape = Handshape(
                configuration=_blend_parameters(
                    primary.handshape.configuration, secondary.handshape.configuration, ratio
                ),
                movement=_blend_parameters(
                    primary.handshape.movement, secondary.handshape.movement, ratio
                )
            )
        
        result.intensity = clamp_unit(_lerp(primary.intensity, secondary.intensity, ratio))
        result.timing = ExpressionTiming(
            duration=_lerp(primary.timing.duration, secondary.timing.duration, ratio),
            onset=_lerp(primary.timing.onset, secondary.timing.onset, ratio),
            hold=_lerp(primary.timing.hold, secondary.timing.hold, ratio),
            release=_lerp(primary.timing.release, secondary.timing.release, ratio)
        )
        result.metadata['blend'] = {'secondary': secondary.emotion_type, 'ratio': ratio}
        return result
    
    def enforce_alignment(self, expression: LSFExpression) -> LSFExpression:
        """
        Bring facial and body intensities within the allowed divergence.
        
        The louder channel group is scaled down until the gap equals the
        maximum divergence.
        
        Args:
            expression: Expression to align (not modified)
            
        Returns:
            New LSFExpression
        """
        result = expression.copy()
        facial = result.facial_intensity()
        body = result.body_intensity()
        gap = abs(facial - body)
        if gap <= self.max_channel_divergence + self._EPSILON:
            return result
        
        if facial > body:
            factor = (body + self.max_channel_divergence) / facial
            channels = FACIAL_CHANNELS
        else:
            factor = (facial + self.max_channel_divergence) / body
            channels = BODY_CHANNELS
        
        for name in channels:
            self._scale_channel(result, name, factor)
        
        result.metadata['alignment'] = {
            'facial_intensity': facial,
            'body_intensity': body,
            'scaled_group': 'facial' if channels is FACIAL_CHANNELS else 'body',
            'factor': factor,
        }
        logger.debug(f"Aligned channel groups: gap={gap:.3f}, factor={factor:.3f}")
        return result
    
    def _blend_secondary(
        self,
        expression: LSFExpression,
        emotion_input: EmotionInput,
        secondary: SecondaryEmotion
    ) -> LSFExpression:
        try:
            secondary_expression = self._synthesize_secondary(emotion_input, secondary)
        except EmotionSynthesisError as e:
            logger.warning(
                f"Secondary emotion '{secondary.type}' could not be synthesized, "
                f"skipping blend: {e}"
            )
            return expression
        return self.blend(expression, secondary_expression, secondary.blend_ratio)
    
    def _synthesize_secondary(
        self,
        emotion_input: EmotionInput,
        secondary: SecondaryEmotion
    ) -> LSFExpression:
        secondary_input = EmotionInput(
            type=secondary.type,
            intensity=emotion_input.intensity,
            context=emotion_input.context,
            seed=emotion_input.seed
        )
        analyzed = self.analyzer.analyze(secondary_input)
        return self.enforce_alignment(self.assemble(analyzed))
    
    @staticmethod
    def _dominant_type(expression: LSFExpression, emotion_input: EmotionInput) -> str:
        # A full blend carries only the secondary's channels
        blend = expression.metadata.get('blend')
        if blend is not None and blend['ratio'] >= 1:
            return emotion_input.nuances.secondary_emotion.type
        return emotion_input.type

    def _scale_channel(self, expression: LSFExpression, name: str, factor: float) -> None:
        parameters = expression.get_channel(name)
        if parameters is not None:
            expression.set_channel(name, {k: v * factor for k, v in parameters.items()})
        if name in expression.channel_intensities:
            expression.channel_intensities[name] = clamp_unit(
                expression.channel_intensities[name] * factor
            )
