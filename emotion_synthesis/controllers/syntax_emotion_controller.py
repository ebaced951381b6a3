"""
Syntax/emotion integration controller.

Reconciles emotional modulation with grammatical constraints. After an
ethics gate, the controller applies syntactic control (hand movement
modulation within per-emotion bands), temporal control (onset strategy and
transitions) and spatial control (signing-space expansion with reference
point preservation), then validates and scores each stage.
"""

import logging
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from emotion_synthesis.config.settings import get_settings
from emotion_synthesis.ethics.ethics_validator import EthicsValidator, RuleBasedEthicsValidator
from emotion_synthesis.exceptions import EthicsRejectionError, IntegrationError
from emotion_synthesis.models.components import clamp_unit
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.models.expression import Coordinates, Handshape, LSFExpression, SignLocation
from emotion_synthesis.models.results import (
    ControlledExpression,
    ControlMetadata,
    EthicsDecision,
    EthicsRequest,
    IntegrationResult,
    ValidationIssue,
    ValidationResult,
)
from emotion_synthesis.models.syntactic_context import SyntacticContext
from emotion_synthesis.tables import (
    COMPLEX_QUALITY_WEIGHTS,
    DEFAULT_QUALITY_WEIGHTS,
    EMOTION_QUALITY_WEIGHTS,
    EXPANSION_LIMITS,
    HAND_PARAMETERS,
    SYNTACTIC_BANDS,
    ExpansionLimit,
    QualityWeights,
)


logger = logging.getLogger(__name__)


class SyntaxEmotionController:
    """
    Applies detailed syntax/emotion control to an expression.
    
    Onset strategies:
    - emotion_first (joy, surprise): onset moves earlier by a lead time
    - syntax_first (sadness): onset moves later by an establishment time
    - simultaneous (anger and others): onset unchanged
    
    Signing-space expansion uses a per-emotion factor (joy and anger expand,
    sadness contracts). For referential structures the expansion is taken
    relative to the stored primary reference point and never exceeds
    MAX_REFERENTIAL_EXPANSION, whatever the configured limits.
    """
    
    ACTION_TYPE = 'lsf_emotion_control'
    
    # Temporal control (milliseconds)
    EMOTION_FIRST_LEAD_MS = 50
    SYNTAX_FIRST_ESTABLISHMENT_MS = 30
    SEQUENCE_INTERVAL_MS = 150
    FADE_INTERVAL_MS = 100
    
    # Temporal validation thresholds (milliseconds)
    MAX_JOY_DURATION_MS = 1000
    MIN_SADNESS_DURATION_MS = 500
    
    # Complexity thresholds
    HIGH_COMPLEXITY = 0.7
    VERY_HIGH_COMPLEXITY = 0.8
    
    # Stage validation scores when issues are found
    SYNTACTIC_ISSUE_SCORE = 0.7
    TEMPORAL_ISSUE_SCORE = 0.8
    SPATIAL_ISSUE_SCORE = 0.85
    
    PRIMARY_REFERENCE = 'primary'
    MAX_REFERENTIAL_EXPANSION = 1.5

    # Facial adaptation
    ADAPTED_CHANNELS = ('eyebrows', 'mouth', 'eyes')
    MIN_ADAPTATION = 0.5
    MAX_ADAPTATION = 1.5

    def __init__(
        self,
        ethics_validator: Optional[EthicsValidator] = None,
        expansion_limits: Optional[Mapping[EmotionLabel, ExpansionLimit]] = None,
        max_spatial_expansion: Optional[float] = None
    ):
        """
        Initialize syntax/emotion controller.
        
        Args:
            ethics_validator: Ethics collaborator (rule-based default if None)
            expansion_limits: Per-emotion expansion limits (built-in table if None)
            max_spatial_expansion: Expansion cap for referential structures (settings if None)
        """
        self.ethics_validator = ethics_validator or RuleBasedEthicsValidator()
        self.expansion_limits = dict(EXPANSION_LIMITS if expansion_limits is None else expansion_limits)
        if max_spatial_expansion is None:
            max_spatial_expansion = get_settings().max_spatial_expansion
        self.max_spatial_expansion = max_spatial_expansion
    
    async def apply_control(
        self,
        expression: LSFExpression,
        emotion: Union[str, EmotionLabel],
        context: SyntacticContext,
        correlation_id: Optional[str] = None
    ) -> IntegrationResult:
        """
        Run the ethics gate and the three control stages.
        
        Args:
            expression: Expression to control (not modified)
            emotion: Emotion to integrate
            context: Syntactic context
            correlation_id: Optional correlation ID for tracking
            
        Returns:
            Successful IntegrationResult with controlled expression and validation
            
        Raises:
            EthicsRejectionError: When the ethics collaborator rejects or fails
            IntegrationError: When a control stage cannot process the expression
        """
        label = EmotionLabel.parse(emotion)
        decision = await self._check_ethics(expression, label, context, correlation_id)
        
        try:
            controlled = self.apply_syntactic_control(expression, label, context)
            controlled = self.apply_temporal_control(controlled, label, context)
            controlled = self.apply_spatial_control(controlled, label, context)
        except (TypeError, ValueError, KeyError) as e:
            raise IntegrationError(f"Syntax/emotion control failed: {e}") from e

        validation = self.validate_control(controlled, label, context)
        metadata = ControlMetadata(
            syntactic_control=self.measure_syntactic_control(controlled),
            temporal_control=self.measure_temporal_control(controlled),
            spatial_control=self.measure_spatial_control(controlled),
            global_quality=self.evaluate_quality(controlled, label, context),
            ethics_validation=decision
        )
        
        logger.info(
            f"Applied syntax/emotion control: emotion={label.value}, "
            f"structure={context.structure}, quality={metadata.global_quality:.3f}",
            extra={'correlation_id': correlation_id}
        )
        return IntegrationResult(
            success=True,
            controlled=ControlledExpression(expression=controlled, metadata=metadata),
            validation=validation,
            correlation_id=correlation_id
        )
    
    async def _check_ethics(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext,
        correlation_id: Optional[str]
    ) -> EthicsDecision:
        request = EthicsRequest(
            action_type=self.ACTION_TYPE,
            action_details={
                'emotion': label.value,
                'emotion_type': expression.emotion_type,
                'intensity': expression.intensity,
                'metadata': dict(expression.metadata),
            },
            context={
                'structure': context.structure,
                'complexity': context.complexity,
                'correlation_id': correlation_id,
            }
        )
        try:
            decision = await self.ethics_validator.validate_action(request)
        except Exception as e:
            logger.error(
                f"Ethics validation failed: {e}",
                extra={'correlation_id': correlation_id},
                exc_info=True
            )
            raise EthicsRejectionError(f"Ethics validation error: {e}") from e
        
        if not decision.approved:
            raise EthicsRejectionError(decision.reason or 'Rejected by ethics validation')
        return decision
    
    # Syntactic control
    
    def apply_syntactic_control(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext
    ) -> LSFExpression:
        """
        Modulate hand configuration and movement for the emotion.
        
        Per-emotion branches set tension, speed, amplitude and fluidity;
        amplitude and speed are then clamped into the emotion's
        multiplicative band around their pre-control values. An expression
        without a handshape is given the neutral one first.

        Args:
            expression: Expression (not modified)
            label: Emotion label
            context: Syntactic context

        Returns:
            New LSFExpression
        """
        controlled = expression.copy()
        if controlled.handshape is None:
            logger.warning("Expression has no handshape, using the neutral handshape")
            neutral = HAND_PARAMETERS[EmotionLabel.NEUTRAL]
            controlled.handshape = Handshape(
                configuration=dict(neutral['configuration']),
                movement=dict(neutral['movement'])
            )
            controlled.metadata['default_handshape'] = True
        handshape = controlled.handshape

        base = {
            key: handshape.movement[key] for key in ('amplitude', 'speed')
            if key in handshape.movement
        }
        configuration = handshape.configuration
        movement = handshape.movement
        
        if label is EmotionLabel.JOY:
            movement['fluidity'] = 0.9
            movement['amplitude'] = 1.1 if context.complexity > self.HIGH_COMPLEXITY else 1.2
        elif label is EmotionLabel.ANGER:
            configuration['tension'] = 0.7 if context.structure == 'question' else 0.8
            movement['speed'] = (
                1.2 if context.structure != 'question'
                and context.complexity > self.VERY_HIGH_COMPLEXITY else 1.3
            )
        elif label is EmotionLabel.SADNESS:
            configuration['tension'] = 0.4
            movement['speed'] = 0.8
            movement['fluidity'] = 0.8 if context.structure == 'narrative' else 0.7
        else:
            configuration['tension'] = 0.5
            movement['speed'] = 1.0
            if context.complexity > self.HIGH_COMPLEXITY:
                movement['fluidity'] = 0.5
            elif context.structure == 'descriptive':
                movement['fluidity'] = 0.7
            else:
                movement['fluidity'] = 0.6
        
        for key, (low, high) in SYNTACTIC_BANDS.get(label, {}).items():
            if key in base and key in movement:
                movement[key] = float(np.clip(movement[key], base[key] * low, base[key] * high))
        
        controlled.metadata['syntactic_control'] = {
            'emotion': label.value,
            'structure': context.structure,
            'base_movement': base,
        }
        return controlled
    
    # Temporal control
    
    def apply_temporal_control(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext
    ) -> LSFExpression:
        """
        Select the onset strategy and transition parameters.
        
        Args:
            expression: Expression (not modified)
            label: Emotion label
            context: Syntactic context
            
        Returns:
            New LSFExpression
        """
        controlled = expression.copy()
        timing = controlled.timing
        
        if label in (EmotionLabel.JOY, EmotionLabel.SURPRISE):
            timing.onset_strategy = 'emotion_first'
            timing.onset = max(0.0, timing.onset - self.EMOTION_FIRST_LEAD_MS)
        elif label is EmotionLabel.SADNESS:
            timing.onset_strategy = 'syntax_first'
            timing.onset = timing.onset + self.SYNTAX_FIRST_ESTABLISHMENT_MS
        else:
            timing.onset_strategy = 'simultaneous'
        timing.duration = timing.onset + timing.hold + timing.release
        
        if context.structure == 'sequence':
            timing.interval = self.SEQUENCE_INTERVAL_MS
            timing.repetition = 0
            timing.transition_method = 'layered'
        else:
            timing.interval = self.FADE_INTERVAL_MS
            timing.transition_method = 'fade_emotion'
        
        return controlled
    
    # Spatial control
    
    def apply_spatial_control(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext
    ) -> LSFExpression:
        """
        Assign the signing-space zone and apply emotional expansion once.
        
        Args:
            expression: Expression (not modified)
            label: Emotion label
            context: Syntactic context
            
        Returns:
            New LSFExpression
        """
        controlled = expression.copy()
        if controlled.location is None:
            controlled.location = SignLocation()
        location = controlled.location
        if location.coordinates is None:
            location.coordinates = Coordinates()
        
        if context.structure == 'descriptive':
            location.zone = 'descriptive_space'
        elif context.structure == 'reference_point':
            location.zone = 'referential_space'
            location.reference = 'center_point'
        elif context.structure == 'spatial_agreement':
            location.zone = 'agreement_space'
        
        limit = self.expansion_limits.get(label)
        if limit is None:
            return controlled
        
        coordinates = location.coordinates
        if context.is_referential:
            factor = min(limit.max, self.max_spatial_expansion, self.MAX_REFERENTIAL_EXPANSION)
            origin = location.reference_points.get(self.PRIMARY_REFERENCE, Coordinates())
            location.coordinates = Coordinates(
                x=origin.x + (coordinates.x - origin.x) * factor,
                y=origin.y + (coordinates.y - origin.y) * factor,
                z=origin.z + (coordinates.z - origin.z) * factor
            )
        else:
            factor = limit.max
            location.coordinates = Coordinates(
                x=coordinates.x * factor,
                y=coordinates.y * factor,
                z=coordinates.z * factor
            )
        location.recovery = limit.recovery
        controlled.metadata['spatial_expansion'] = factor
        return controlled

    # Facial adaptation

    def adapt_expression(
        self,
        expression: LSFExpression,
        intensity: float = 1.0,
        cultural_context: Sequence[str] = ()
    ) -> LSFExpression:
        """
        Rescale the eyebrows, mouth and eyes of an expression.

        Every parameter of the three channels is multiplied by the intensity
        clamped to [MIN_ADAPTATION, MAX_ADAPTATION]. A non-empty cultural
        context is recorded in the metadata.

        Args:
            expression: Expression to adapt (not modified)
            intensity: Emotional intensity factor
            cultural_context: Cultural context tags, e.g. ('france',)

        Returns:
            New LSFExpression
        """
        adapted = expression.copy()
        factor = float(np.clip(intensity, self.MIN_ADAPTATION, self.MAX_ADAPTATION))

        for name in self.ADAPTED_CHANNELS:
            parameters = adapted.get_channel(name)
            if parameters is not None:
                adapted.set_channel(name, {k: v * factor for k, v in parameters.items()})

        adapted.metadata['adaptation_factor'] = factor
        if cultural_context:
            adapted.metadata['cultural_context'] = list(cultural_context)

        logger.debug(f"Adapted facial channels: intensity={intensity}, factor={factor:.3f}")
        return adapted

    # Validation and scoring
    
    def validate_control(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext
    ) -> ValidationResult:
        """
        Validate the three control stages independently and combine them.
        
        Args:
            expression: Controlled expression
            label: Emotion label
            context: Syntactic context
            
        Returns:
            ValidationResult; valid when no stage reports an error, scored
            as the mean of the stage scores
        """
        stages = [
            self._validate_syntactic(expression, context),
            self._validate_temporal(expression, label),
            self._validate_spatial(expression, context),
        ]
        issues = [issue for stage_issues, _ in stages for issue in stage_issues]
        score = float(np.mean([score for _, score in stages]))
        
        if any(issue.severity == 'error' for issue in issues):
            return ValidationResult.failure_result(issues, score=score)
        return ValidationResult.success_result(issues, score=score)
    
    def _validate_syntactic(
        self,
        expression: LSFExpression,
        context: SyntacticContext
    ) -> Tuple[List[ValidationIssue], float]:
        issues = []
        if expression.handshape is None:
            issues.append(ValidationIssue(
                type='syntactic', severity='error',
                message='Missing handshape', component='handshape'
            ))
        elif (context.complexity > self.VERY_HIGH_COMPLEXITY
              and 'finger_curvature' not in expression.handshape.configuration):
            issues.append(ValidationIssue(
                type='syntactic', severity='warning',
                message='Complex structure without finger curvature', component='handshape'
            ))
        return issues, (self.SYNTACTIC_ISSUE_SCORE if issues else 1.0)
    
    def _validate_temporal(
        self,
        expression: LSFExpression,
        label: EmotionLabel
    ) -> Tuple[List[ValidationIssue], float]:
        issues = []
        duration = expression.timing.duration
        if label is EmotionLabel.JOY and duration > self.MAX_JOY_DURATION_MS:
            issues.append(ValidationIssue(
                type='temporal', severity='warning',
                message=f"Joy expression lasts {duration:.0f}ms", component='timing'
            ))
        elif label is EmotionLabel.SADNESS and duration < self.MIN_SADNESS_DURATION_MS:
            issues.append(ValidationIssue(
                type='temporal', severity='warning',
                message=f"Sadness expression lasts only {duration:.0f}ms", component='timing'
            ))
        return issues, (self.TEMPORAL_ISSUE_SCORE if issues else 1.0)
    
    def _validate_spatial(
        self,
        expression: LSFExpression,
        context: SyntacticContext
    ) -> Tuple[List[ValidationIssue], float]:
        issues = []
        location = expression.location
        if location is None or location.coordinates is None:
            issues.append(ValidationIssue(
                type='spatial', severity='warning',
                message='Missing spatial coordinates', component='location'
            ))
        if context.structure == 'reference_point' and (location is None or not location.reference):
            issues.append(ValidationIssue(
                type='spatial', severity='error',
                message='Reference structure without spatial reference', component='location'
            ))
        return issues, (self.SPATIAL_ISSUE_SCORE if issues else 1.0)
    
    def measure_syntactic_control(self, expression: LSFExpression) -> float:
        score = 0.9
        handshape = expression.handshape
        score += 0.05 if handshape is not None and handshape.configuration else -0.1
        score += 0.05 if handshape is not None and handshape.movement else -0.1
        return clamp_unit(score)
    
    def measure_temporal_control(self, expression: LSFExpression) -> float:
        score = 0.85
        timing = expression.timing
        score += 0.05 if timing.duration > 0 else -0.1
        if timing.onset is not None:
            score += 0.05
        if timing.hold is not None:
            score += 0.05
        return clamp_unit(score)
    
    def measure_spatial_control(self, expression: LSFExpression) -> float:
        score = 0.9
        location = expression.location
        score += 0.05 if location is not None and location.coordinates is not None else -0.15
        if location is not None and location.zone:
            score += 0.05
        return clamp_unit(score)
    
    def quality_weights(self, label: EmotionLabel, context: SyntacticContext) -> QualityWeights:
        """
        Weights of the three control measures.
        
        High complexity shifts weight to syntax; an emotion-specific weighting
        (expansive emotions favour space, sadness favours timing) takes
        precedence over both.
        """
        if label in EMOTION_QUALITY_WEIGHTS:
            return EMOTION_QUALITY_WEIGHTS[label]
        if context.complexity > self.HIGH_COMPLEXITY:
            return COMPLEX_QUALITY_WEIGHTS
        return DEFAULT_QUALITY_WEIGHTS
    
    def evaluate_quality(
        self,
        expression: LSFExpression,
        label: EmotionLabel,
        context: SyntacticContext
    ) -> float:
        weights = self.quality_weights(label, context)
        return clamp_unit(
            weights.syntactic * self.measure_syntactic_control(expression)
            + weights.temporal * self.measure_temporal_control(expression)
            + weights.spatial * self.measure_spatial_control(expression)
        )
