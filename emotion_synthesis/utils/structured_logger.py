"""
Structured logging utilities for emotion synthesis.

This module provides JSON-formatted logging with correlation ID tracking
so that a single expression request can be followed through the pipeline.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List


# Standard LogRecord attributes left out of the JSON payload
_SKIP_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info', 'taskName'
})


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    
    Formats log records as JSON with consistent fields including:
    - timestamp: ISO 8601 timestamp
    - level: Log level (DEBUG, INFO, WARNING, ERROR)
    - correlation_id: Correlation ID from extra fields
    - component: Logger name
    - message: Log message
    - Additional fields from extra dict
    """
    
    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.
        
        Args:
            record: Log record to format
            
        Returns:
            JSON-formatted log string
        """
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage()
        }
        
        if getattr(record, 'correlation_id', None) is not None:
            log_entry['correlation_id'] = record.correlation_id
        
        for key, value in record.__dict__.items():
            if key in _SKIP_FIELDS or key.startswith('_') or key in log_entry:
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)
        
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)
        
        return json.dumps(log_entry)


def configure_structured_logging(
    level: int = logging.INFO,
    use_json: bool = True
) -> None:
    """
    Configure structured logging for the entire application.
    
    Args:
        level: Logging level (default: INFO)
        use_json: Whether to use JSON formatting (default: True)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    
    root_logger.info(
        f"Configured structured logging: level={logging.getLevelName(level)}, json={use_json}"
    )


def log_synthesis(
    logger: logging.Logger,
    correlation_id: str,
    emotion_type: str,
    intensity: float,
    coherence: float,
    fallback: bool,
    latency_ms: int
) -> None:
    """
    Log a completed synthesis with structured fields.
    
    Args:
        logger: Logger instance
        correlation_id: Correlation ID
        emotion_type: Declared emotion type
        intensity: Final global intensity
        coherence: Coherence score
        fallback: Whether neutral fallback tables were used
        latency_ms: Synthesis latency in milliseconds
    """
    logger.info(
        f"Synthesis completed: emotion={emotion_type}, intensity={intensity:.3f}, "
        f"coherence={coherence:.2f}",
        extra={
            'correlation_id': correlation_id,
            'operation': 'synthesis',
            'emotion_type': emotion_type,
            'intensity': intensity,
            'coherence': coherence,
            'fallback': fallback,
            'latency_ms': latency_ms
        }
    )


def log_coherence(
    logger: logging.Logger,
    correlation_id: str,
    emotion_type: str,
    issues: List[str]
) -> None:
    """
    Log coherence degradation with structured fields.
    
    Args:
        logger: Logger instance
        correlation_id: Correlation ID
        emotion_type: Declared emotion type
        issues: Coherence issue messages
    """
    logger.warning(
        f"Coherence degraded for {emotion_type}: {len(issues)} issue(s)",
        extra={
            'correlation_id': correlation_id,
            'operation': 'coherence_validation',
            'emotion_type': emotion_type,
            'issues': issues
        }
    )


def log_integration(
    logger: logging.Logger,
    correlation_id: str,
    emotion: str,
    structure: str,
    global_quality: float,
    latency_ms: int
) -> None:
    """
    Log a completed integration with structured fields.
    
    Args:
        logger: Logger instance
        correlation_id: Correlation ID
        emotion: Integrated emotion
        structure: Syntactic structure
        global_quality: Global control quality
        latency_ms: Integration latency in milliseconds
    """
    logger.info(
        f"Integration completed: emotion={emotion}, structure={structure}, "
        f"quality={global_quality:.3f}",
        extra={
            'correlation_id': correlation_id,
            'operation': 'integration',
            'emotion': emotion,
            'structure': structure,
            'global_quality': global_quality,
            'latency_ms': latency_ms
        }
    )


def log_error(
    logger: logging.Logger,
    correlation_id: str,
    component: str,
    error_type: str,
    error_message: str,
    exc_info: bool = True
) -> None:
    """
    Log error with structured fields and context.
    
    Args:
        logger: Logger instance
        correlation_id: Correlation ID
        component: Component where error occurred
        error_type: Type of error
        error_message: Error message
        exc_info: Whether to include exception info
    """
    logger.error(
        f"{component} error: {error_message}",
        extra={
            'correlation_id': correlation_id,
            'error_component': component,
            'error_type': error_type,
            'error_message': error_message
        },
        exc_info=exc_info
    )
