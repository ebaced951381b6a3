"""
CloudWatch metrics utilities for emotion synthesis.

This module provides utilities for emitting custom CloudWatch metrics
to track synthesis and integration latency, errors, fallback usage and
expression quality.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from emotion_synthesis.config.settings import get_settings


logger = logging.getLogger(__name__)


class EmotionSynthesisMetrics:
    """
    Emits CloudWatch metrics for emotion synthesis.
    
    Every metric is logged in structured form and buffered. Flushing sends
    the buffer through the boto3 CloudWatch client when CloudWatch is
    enabled; the buffer is flushed automatically once a full batch is queued.
    """
    
    # CloudWatch accepts at most 20 metrics per PutMetricData call
    MAX_BATCH_SIZE = 20
    
    def __init__(
        self,
        namespace: Optional[str] = None,
        use_cloudwatch: Optional[bool] = None,
        enabled: Optional[bool] = None,
        cloudwatch_client: Optional[Any] = None
    ):
        """
        Initialize metrics emitter.
        
        Args:
            namespace: CloudWatch namespace for metrics (settings if None)
            use_cloudwatch: Whether to send metrics to CloudWatch (settings if None)
            enabled: Whether to record metrics at all (settings if None)
            cloudwatch_client: Pre-built CloudWatch client (creates one if None)
        """
        settings = get_settings()
        self.namespace = namespace or settings.metrics_namespace
        self.enabled = settings.enable_metrics if enabled is None else enabled
        self.use_cloudwatch = settings.use_cloudwatch if use_cloudwatch is None else use_cloudwatch
        self.metrics_buffer: List[Dict[str, Any]] = []
        self.cloudwatch = None
        
        if self.enabled and self.use_cloudwatch:
            if cloudwatch_client is not None:
                self.cloudwatch = cloudwatch_client
            else:
                try:
                    self.cloudwatch = boto3.client('cloudwatch')
                    logger.info(f"Initialized CloudWatch metrics client for namespace: {self.namespace}")
                except (BotoCoreError, ClientError) as e:
                    logger.warning(f"Failed to initialize CloudWatch client: {e}, falling back to logging")
                    self.use_cloudwatch = False
        else:
            logger.info("CloudWatch metrics disabled, using log-based metrics")
    
    def emit_synthesis_latency(
        self,
        latency_ms: float,
        emotion_type: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit metric for synthesis latency.
        
        Args:
            latency_ms: Synthesis latency in milliseconds
            emotion_type: Synthesized emotion
            correlation_id: Optional correlation ID for tracking
        """
        self._emit('SynthesisLatency', latency_ms, 'Milliseconds',
                   {'EmotionType': emotion_type}, correlation_id)
    
    def emit_integration_latency(
        self,
        latency_ms: float,
        emotion_type: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit metric for integration latency.
        
        Args:
            latency_ms: Integration latency in milliseconds
            emotion_type: Integrated emotion
            correlation_id: Optional correlation ID for tracking
        """
        self._emit('IntegrationLatency', latency_ms, 'Milliseconds',
                   {'EmotionType': emotion_type}, correlation_id)
    
    def emit_error_count(
        self,
        error_type: str,
        component: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit metric for error count by type and component.
        
        Args:
            error_type: Error category (input, validation, recursion, ethics, internal)
            component: Component where error occurred (e.g. 'ExpressionGenerator')
            correlation_id: Optional correlation ID for tracking
        """
        self._emit('ErrorCount', 1, 'Count',
                   {'ErrorType': error_type, 'Component': component}, correlation_id)
    
    def emit_fallback_used(
        self,
        fallback_type: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit metric for fallback usage.
        
        Args:
            fallback_type: Type of fallback (e.g. 'NeutralFallback', 'SkippedBlend')
            correlation_id: Optional correlation ID for tracking
        """
        self._emit('FallbackUsed', 1, 'Count', {'FallbackType': fallback_type}, correlation_id)
    
    def emit_coherence_degraded(
        self,
        emotion_type: str,
        issue_count: int,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit metric for coherence degradation.
        
        Args:
            emotion_type: Synthesized emotion
            issue_count: Number of coherence issues
            correlation_id: Optional correlation ID for tracking
        """
        self._emit('CoherenceDegraded', issue_count, 'Count',
                   {'EmotionType': emotion_type}, correlation_id)
    
    def emit_quality_score(
        self,
        metric_name: str,
        score: float,
        emotion_type: str,
        correlation_id: Optional[str] = None
    ) -> None:
        """
        Emit a quality score (authenticity, cultural accuracy, global quality...).
        
        Args:
            metric_name: Metric name
            score: Score in [0, 1]
            emotion_type: Emotion concerned
            correlation_id: Optional correlation ID for tracking
        """
        self._emit(metric_name, score, 'None', {'EmotionType': emotion_type}, correlation_id)
    
    def _emit(
        self,
        metric_name: str,
        value: float,
        unit: str,
        dimensions: Dict[str, str],
        correlation_id: Optional[str]
    ) -> None:
        if not self.enabled:
            return
        
        dimensions = dict(dimensions)
        if correlation_id:
            dimensions['CorrelationId'] = correlation_id
        
        metric = {
            'namespace': self.namespace,
            'metric_name': metric_name,
            'value': value,
            'unit': unit,
            'dimensions': dimensions
        }
        
        logger.info(
            f"METRIC {metric_name}={value} unit={unit} dimensions={dimensions}"
        )
        self.metrics_buffer.append(metric)
        
        if len(self.metrics_buffer) >= self.MAX_BATCH_SIZE:
            self.flush_metrics()
    
    def _emit_to_cloudwatch(self, metrics: List[Dict[str, Any]]) -> None:
        """
        Emit metrics to CloudWatch using boto3 client.
        
        Args:
            metrics: List of metric dictionaries
        """
        metric_data = []
        for metric in metrics:
            datum = {
                'MetricName': metric['metric_name'],
                'Value': metric['value'],
                'Unit': metric['unit']
            }
            if metric['dimensions']:
                datum['Dimensions'] = [
                    {'Name': k, 'Value': str(v)}
                    for k, v in metric['dimensions'].items()
                ]
            metric_data.append(datum)
        
        for i in range(0, len(metric_data), self.MAX_BATCH_SIZE):
            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=metric_data[i:i + self.MAX_BATCH_SIZE]
            )
        logger.debug(f"Emitted {len(metric_data)} metrics to CloudWatch")
    
    def flush_metrics(self) -> None:
        """
        Flush buffered metrics to CloudWatch and clear the buffer.
        """
        if not self.metrics_buffer:
            return
        
        logger.debug(f"Flushing {len(self.metrics_buffer)} buffered metrics")
        if self.use_cloudwatch and self.cloudwatch:
            try:
                self._emit_to_cloudwatch(self.metrics_buffer)
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to flush metrics to CloudWatch: {e}", exc_info=True)
        self.metrics_buffer = []
