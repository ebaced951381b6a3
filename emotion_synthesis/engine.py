"""
Emotion synthesis engine.

This module exposes the asynchronous inbound interface of the package:
``synthesize`` turns an emotion request into a validated LSF expression and
``integrate`` reconciles an expression with a syntactic context. Both
return tagged results and never raise; failures are logged, counted and
surfaced with an error type.
"""

import logging
import time
import uuid
from typing import Any, Mapping, Optional, Union

from emotion_synthesis.controllers.syntax_emotion_controller import SyntaxEmotionController
from emotion_synthesis.exceptions import EmotionSynthesisError, EthicsRejectionError
from emotion_synthesis.generators.expression_generator import ExpressionGenerator
from emotion_synthesis.models.emotion_input import EmotionInput
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.models.expression import LSFExpression
from emotion_synthesis.models.results import IntegrationResult, SynthesisResult
from emotion_synthesis.models.syntactic_context import SyntacticContext
from emotion_synthesis.utils.metrics import EmotionSynthesisMetrics
from emotion_synthesis.utils.structured_logger import (
    log_coherence,
    log_error,
    log_integration,
    log_synthesis,
)


logger = logging.getLogger(__name__)


class EmotionSynthesisEngine:
    """
    Entry point for expression synthesis and syntax/emotion integration.
    
    This class coordinates:
    - Request parsing and input validation
    - Expression synthesis, nuance application and validation
    - Syntax/emotion integration behind the ethics gate
    - Structured logging with correlation IDs
    - CloudWatch metrics for latency, errors, fallbacks and quality
    
    Requests share no mutable state: concurrent calls may run freely.
    """
    
    def __init__(
        self,
        generator: Optional[ExpressionGenerator] = None,
        controller: Optional[SyntaxEmotionController] = None,
        metrics: Optional[EmotionSynthesisMetrics] = None
    ):
        """
        Initialize emotion synthesis engine.
        
        Args:
            generator: Expression generator (creates new if None)
            controller: Syntax/emotion controller (creates new if None)
            metrics: Metrics emitter (creates new if None)
        """
        self.generator = generator or ExpressionGenerator()
        self.controller = controller or SyntaxEmotionController()
        self.metrics = metrics or EmotionSynthesisMetrics()
        
        logger.info("Initialized EmotionSynthesisEngine")
    
    async def synthesize(
        self,
        request: Union[EmotionInput, Mapping[str, Any]],
        correlation_id: Optional[str] = None
    ) -> SynthesisResult:
        """
        Synthesize an expression for an emotion request.
        
        Args:
            request: EmotionInput or wire-style mapping
            correlation_id: Correlation ID for tracking (generates UUID if None)
            
        Returns:
            SynthesisResult; on failure error_type is 'input', 'recursion',
            'validation' or 'internal'
        """
        if correlation_id is None:
            correlation_id = str(uuid.uuid4())
        start_time = time.time()
        
        try:
            emotion_input = (
                request if isinstance(request, EmotionInput)
                else EmotionInput.from_dict(request)
            )
            result = self.generator.generate(emotion_input)
        except EmotionSynthesisError as e:
            return self._synthesis_failure(e.error_type, str(e), correlation_id, exc_info=False)
        except Exception as e:
            return self._synthesis_failure('internal', str(e), correlation_id, exc_info=True)
        
        result.correlation_id = correlation_id
        latency_ms = int((time.time() - start_time) * 1000)
        
        if not result.success:
            log_error(
                logger, correlation_id, 'ExpressionValidator', result.error_type,
                f"{result.error_message}: {'; '.join(result.issues)}", exc_info=False
            )
            self.metrics.emit_error_count(result.error_type, 'ExpressionValidator', correlation_id)
            self.metrics.flush_metrics()
            return result
        
        expression = result.expression
        if expression.metadata.get('fallback'):
            self.metrics.emit_fallback_used('NeutralFallback', correlation_id)
        if result.issues:
            log_coherence(logger, correlation_id, expression.emotion_type, result.issues)
            self.metrics.emit_coherence_degraded(
                expression.emotion_type, len(result.issues), correlation_id
            )
        
        self.metrics.emit_synthesis_latency(latency_ms, expression.emotion_type, correlation_id)
        self.metrics.emit_quality_score(
            'Authenticity', result.metrics.authenticity, expression.emotion_type, correlation_id
        )
        self.metrics.emit_quality_score(
            'CulturalAccuracy', result.metrics.cultural_accuracy, expression.emotion_type,
            correlation_id
        )
        self.metrics.flush_metrics()
        
        log_synthesis(
            logger, correlation_id, expression.emotion_type, expression.intensity,
            result.metrics.coherence, bool(expression.metadata.get('fallback')), latency_ms
        )
        return result
    
    async def integrate(
        self,
        expression: LSFExpression,
        emotion: Union[str, EmotionLabel],
        context: Union[SyntacticContext, Mapping[str, Any]],
        correlation_id: Optional[str] = None
    ) -> IntegrationResult:
        """
        Integrate an emotion into an expression under a syntactic context.
        
        The ethics collaborator is consulted exactly once, before any control
        is applied; a rejection yields a failed result with no expression.
        
        Args:
            expression: Expression to control (not modified)
            emotion: Emotion to integrate
            context: SyntacticContext or mapping with 'structure' and 'complexity'
            correlation_id: Correlation ID for tracking (generates UUID if None)
            
        Returns:
            IntegrationResult; on failure error_type is 'input', 'ethics' or 'internal'
        """
        if correlation_id is None:
            correlation_id = str(uuid.uuid4())
        start_time = time.time()
        
        try:
            if not isinstance(expression, LSFExpression):
                raise ValueError(f"expression must be LSFExpression, got {type(expression).__name__}")
            if not isinstance(context, SyntacticContext):
                context = SyntacticContext(
                    structure=context.get('structure'),
                    complexity=context.get('complexity', 0.5)
                )
        except (ValueError, AttributeError) as e:
            return self._integration_failure('input', str(e), correlation_id, exc_info=False)
        
        try:
            result = await self.controller.apply_control(expression, emotion, context, correlation_id)
        except EthicsRejectionError as e:
            return self._integration_failure('ethics', e.reason, correlation_id, exc_info=False)
        except EmotionSynthesisError as e:
            return self._integration_failure(e.error_type, str(e), correlation_id, exc_info=True)
        except Exception as e:
            return self._integration_failure('internal', str(e), correlation_id, exc_info=True)
        
        latency_ms = int((time.time() - start_time) * 1000)
        emotion_label = EmotionLabel.parse(emotion).value
        quality = result.controlled.metadata.global_quality
        
        self.metrics.emit_integration_latency(latency_ms, emotion_label, correlation_id)
        self.metrics.emit_quality_score('GlobalQuality', quality, emotion_label, correlation_id)
        self.metrics.flush_metrics()
        
        log_integration(logger, correlation_id, emotion_label, context.structure, quality, latency_ms)
        return result
    
    def _synthesis_failure(
        self,
        error_type: str,
        message: str,
        correlation_id: str,
        exc_info: bool
    ) -> SynthesisResult:
        log_error(logger, correlation_id, 'ExpressionGenerator', error_type, message, exc_info=exc_info)
        self.metrics.emit_error_count(error_type, 'ExpressionGenerator', correlation_id)
        self.metrics.flush_metrics()
        result = SynthesisResult.failure(error_type, message)
        result.correlation_id = correlation_id
        return result
    
    def _integration_failure(
        self,
        error_type: str,
        reason: str,
        correlation_id: str,
        exc_info: bool
    ) -> IntegrationResult:
        log_error(logger, correlation_id, 'SyntaxEmotionController', error_type, reason, exc_info=exc_info)
        self.metrics.emit_error_count(error_type, 'SyntaxEmotionController', correlation_id)
        self.metrics.flush_metrics()
        result = IntegrationResult.failure(error_type, reason)
        result.correlation_id = correlation_id
        return result
