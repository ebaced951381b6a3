"""
Unit tests for EmotionSynthesisMetrics.

Tests metric emission, CloudWatch publishing, and batching.
"""

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, NoRegionError

from emotion_synthesis.utils.metrics import EmotionSynthesisMetrics


class TestEmotionSynthesisMetrics:
    """Test suite for EmotionSynthesisMetrics."""

    def test_emit_synthesis_latency(self, metrics):
        """Test emitting synthesis latency metric."""
        metrics.emit_synthesis_latency(12.5, 'joy', 'test-123')

        assert len(metrics.metrics_buffer) == 1
        metric = metrics.metrics_buffer[0]
        assert metric['namespace'] == 'LSFAvatar/Test'
        assert metric['metric_name'] == 'SynthesisLatency'
        assert metric['value'] == 12.5
        assert metric['unit'] == 'Milliseconds'
        assert metric['dimensions'] == {'EmotionType': 'joy', 'CorrelationId': 'test-123'}

    def test_correlation_id_optional(self, metrics):
        """Test that the correlation dimension is only added when known."""
        metrics.emit_integration_latency(30, 'anger')

        assert metrics.metrics_buffer[0]['dimensions'] == {'EmotionType': 'anger'}

    def test_emit_error_count(self, metrics):
        """Test emitting error count metric."""
        metrics.emit_error_count('ethics', 'SyntaxEmotionController', 'test-123')

        metric = metrics.metrics_buffer[0]
        assert metric['metric_name'] == 'ErrorCount'
        assert metric['value'] == 1
        assert metric['unit'] == 'Count'
        assert metric['dimensions']['ErrorType'] == 'ethics'
        assert metric['dimensions']['Component'] == 'SyntaxEmotionController'

    def test_emit_fallback_and_coherence(self, metrics):
        """Test fallback and coherence metrics."""
        metrics.emit_fallback_used('NeutralFallback')
        metrics.emit_coherence_degraded('sadness', 2)

        names = [m['metric_name'] for m in metrics.metrics_buffer]
        assert names == ['FallbackUsed', 'CoherenceDegraded']
        assert metrics.metrics_buffer[1]['value'] == 2

    def test_emit_quality_score(self, metrics):
        """Test emitting a unitless quality score."""
        metrics.emit_quality_score('GlobalQuality', 0.9775, 'joy')

        metric = metrics.metrics_buffer[0]
        assert metric['metric_name'] == 'GlobalQuality'
        assert metric['unit'] == 'None'

    def test_disabled_metrics_not_buffered(self, mock_cloudwatch):
        """Test that disabled metrics are dropped."""
        metrics = EmotionSynthesisMetrics(enabled=False, cloudwatch_client=mock_cloudwatch)
        metrics.emit_synthesis_latency(10, 'joy')
        metrics.flush_metrics()

        assert metrics.metrics_buffer == []
        mock_cloudwatch.put_metric_data.assert_not_called()

    def test_auto_flush_on_buffer_size(self, metrics, mock_cloudwatch):
        """Test that metrics auto-flush when buffer is full."""
        for i in range(20):
            metrics.emit_synthesis_latency(i, 'joy')

        assert mock_cloudwatch.put_metric_data.call_count == 1
        assert len(metrics.metrics_buffer) == 0

        call_kwargs = mock_cloudwatch.put_metric_data.call_args.kwargs
        assert len(call_kwargs['MetricData']) == 20

    def test_flush_publishes_to_cloudwatch(self, metrics, mock_cloudwatch):
        """Test that flush publishes metrics to CloudWatch."""
        metrics.emit_synthesis_latency(12.5, 'joy', 'test-123')
        metrics.emit_error_count('input', 'ExpressionGenerator')

        metrics.flush_metrics()

        mock_cloudwatch.put_metric_data.assert_called_once()
        call_kwargs = mock_cloudwatch.put_metric_data.call_args.kwargs
        assert call_kwargs['Namespace'] == 'LSFAvatar/Test'

        latency = call_kwargs['MetricData'][0]
        assert latency['MetricName'] == 'SynthesisLatency'
        assert latency['Value'] == 12.5
        assert latency['Unit'] == 'Milliseconds'
        assert {'Name': 'CorrelationId', 'Value': 'test-123'} in latency['Dimensions']
        assert metrics.metrics_buffer == []

    def test_flush_empty_buffer(self, metrics, mock_cloudwatch):
        """Test that flushing nothing makes no call."""
        metrics.flush_metrics()

        mock_cloudwatch.put_metric_data.assert_not_called()

    def test_flush_error_clears_buffer(self, metrics, mock_cloudwatch):
        """Test that CloudWatch errors are logged, not raised."""
        mock_cloudwatch.put_metric_data.side_effect = ClientError(
            {'Error': {'Code': 'Throttling', 'Message': 'Rate exceeded'}},
            'PutMetricData'
        )
        metrics.emit_synthesis_latency(12.5, 'joy')

        metrics.flush_metrics()

        assert metrics.metrics_buffer == []

    def test_log_only_mode(self):
        """Test that log-based metrics never reach CloudWatch."""
        metrics = EmotionSynthesisMetrics(use_cloudwatch=False, enabled=True)
        metrics.emit_synthesis_latency(10, 'joy')

        assert metrics.cloudwatch is None
        metrics.flush_metrics()
        assert metrics.metrics_buffer == []

    def test_creates_boto3_client(self):
        """Test that a CloudWatch client is created when none is given."""
        client = Mock()
        with patch('emotion_synthesis.utils.metrics.boto3.client', return_value=client) as factory:
            metrics = EmotionSynthesisMetrics(use_cloudwatch=True, enabled=True)

        factory.assert_called_once_with('cloudwatch')
        assert metrics.cloudwatch is client

    def test_client_creation_failure_falls_back_to_logging(self):
        """Test fallback to log-based metrics when boto3 cannot build a client."""
        with patch('emotion_synthesis.utils.metrics.boto3.client', side_effect=NoRegionError()):
            metrics = EmotionSynthesisMetrics(use_cloudwatch=True, enabled=True)

        assert metrics.use_cloudwatch is False
        assert metrics.cloudwatch is None

    def test_defaults_from_settings(self, monkeypatch):
        """Test that defaults come from settings."""
        monkeypatch.setenv('METRICS_NAMESPACE', 'LSFAvatar/Staging')
        from emotion_synthesis.config import reset_settings
        reset_settings()

        with patch('emotion_synthesis.utils.metrics.boto3.client') as factory:
            metrics = EmotionSynthesisMetrics()

        assert metrics.namespace == 'LSFAvatar/Staging'
        assert metrics.enabled is True
        assert metrics.use_cloudwatch is False
        factory.assert_not_called()
