"""
Unit tests for structured logging utilities.
"""

import json
import logging
import sys

import pytest

from emotion_synthesis.utils.structured_logger import (
    StructuredFormatter,
    configure_structured_logging,
    log_coherence,
    log_error,
    log_integration,
    log_synthesis,
)


def make_record(message='Synthesis completed', level=logging.INFO, exc_info=None, **extra):
    """Build a log record carrying extra fields."""
    record = logging.LogRecord(
        'emotion_synthesis.engine', level, __file__, 10, message, None, exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestStructuredFormatter:
    """Test suite for StructuredFormatter."""

    @pytest.fixture
    def formatter(self):
        """Creates StructuredFormatter instance."""
        return StructuredFormatter()

    def test_base_fields(self, formatter):
        """Test the fields present on every entry."""
        entry = json.loads(formatter.format(make_record()))

        assert set(entry) == {'timestamp', 'level', 'component', 'message'}
        assert entry['level'] == 'INFO'
        assert entry['component'] == 'emotion_synthesis.engine'
        assert entry['message'] == 'Synthesis completed'
        assert entry['timestamp'].endswith('Z')

    def test_correlation_id_and_extras(self, formatter):
        """Test that extra fields are carried into the entry."""
        entry = json.loads(formatter.format(make_record(
            correlation_id='test-123', operation='synthesis', intensity=0.88
        )))

        assert entry['correlation_id'] == 'test-123'
        assert entry['operation'] == 'synthesis'
        assert entry['intensity'] == 0.88

    def test_non_serializable_extra(self, formatter):
        """Test that non-JSON extras are stringified."""
        entry = json.loads(formatter.format(make_record(labels={'joy'})))

        assert entry['labels'] == "{'joy'}"

    def test_exception_included(self, formatter):
        """Test that exception tracebacks are included."""
        try:
            raise ValueError('intensity must be in [0, 1]')
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        entry = json.loads(formatter.format(record))

        assert entry['level'] == 'ERROR'
        assert 'ValueError: intensity must be in [0, 1]' in entry['exception']


class TestLogHelpers:
    """Test suite for the structured log helpers."""

    @pytest.fixture
    def logger(self):
        return logging.getLogger('emotion_synthesis.tests')

    def test_log_synthesis(self, logger, caplog):
        """Test synthesis completion logging."""
        with caplog.at_level(logging.INFO):
            log_synthesis(logger, 'test-123', 'joy', 0.88, 1.0, False, 3)

        record = caplog.records[-1]
        assert record.getMessage() == 'Synthesis completed: emotion=joy, intensity=0.880, coherence=1.00'
        assert record.correlation_id == 'test-123'
        assert record.operation == 'synthesis'
        assert record.fallback is False
        assert record.latency_ms == 3

    def test_log_coherence(self, logger, caplog):
        """Test coherence degradation logging."""
        with caplog.at_level(logging.WARNING):
            log_coherence(logger, 'test-123', 'sadness', ['Overall intensity deviates'])

        record = caplog.records[-1]
        assert record.levelname == 'WARNING'
        assert record.getMessage() == 'Coherence degraded for sadness: 1 issue(s)'
        assert record.issues == ['Overall intensity deviates']

    def test_log_integration(self, logger, caplog):
        """Test integration completion logging."""
        with caplog.at_level(logging.INFO):
            log_integration(logger, 'test-123', 'anger', 'question', 0.9, 2)

        record = caplog.records[-1]
        assert record.operation == 'integration'
        assert record.structure == 'question'
        assert 'quality=0.900' in record.getMessage()

    def test_log_error(self, logger, caplog):
        """Test error logging with component and type."""
        with caplog.at_level(logging.ERROR):
            log_error(logger, 'test-123', 'ExpressionGenerator', 'input', 'bad intensity', exc_info=False)

        record = caplog.records[-1]
        assert record.levelname == 'ERROR'
        assert record.getMessage() == 'ExpressionGenerator error: bad intensity'
        assert record.error_component == 'ExpressionGenerator'
        assert record.error_type == 'input'


class TestConfigureStructuredLogging:
    """Test suite for configure_structured_logging."""

    def test_json_handler(self, restore_root_logger):
        """Test that JSON formatting is installed on the root logger."""
        configure_structured_logging(level=logging.DEBUG)

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_plain_handler(self, restore_root_logger):
        """Test plain text formatting."""
        configure_structured_logging(use_json=False)

        formatter = restore_root_logger.handlers[0].formatter
        assert not isinstance(formatter, StructuredFormatter)
        assert '%(levelname)s' in formatter._fmt
