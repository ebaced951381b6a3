"""
Shared pytest fixtures for emotion synthesis tests.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from emotion_synthesis.config import reset_settings
from emotion_synthesis.controllers import SyntaxEmotionController
from emotion_synthesis.engine import EmotionSynthesisEngine
from emotion_synthesis.generators import ExpressionGenerator
from emotion_synthesis.models import (
    EmotionInput,
    EthicsDecision,
    Nuances,
    SecondaryEmotion,
    SocialContext,
)
from emotion_synthesis.utils.metrics import EmotionSynthesisMetrics


SETTINGS_ENV_VARS = (
    'LOG_LEVEL', 'LOG_JSON', 'ENABLE_METRICS', 'USE_CLOUDWATCH', 'METRICS_NAMESPACE',
    'INTENSITY_TOLERANCE', 'MAX_CHANNEL_DIVERGENCE', 'DEGRADED_COHERENCE_SCORE',
    'UNKNOWN_EMOTION_INTENSITY_FACTOR', 'MICRO_VARIATION', 'MAX_SPATIAL_EXPANSION',
    'MAX_ETHICAL_INTENSITY',
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def generator():
    """Fixture providing a deterministic expression generator."""
    return ExpressionGenerator()


@pytest.fixture
def joy_input():
    """Fixture providing a plain joy request."""
    return EmotionInput(type='joy', intensity=0.8)


@pytest.fixture
def blended_input():
    """Fixture providing a joy request blended with sadness."""
    return EmotionInput(
        type='joy',
        intensity=0.8,
        nuances=Nuances(secondary_emotion=SecondaryEmotion(type='sadness', blend_ratio=0.5))
    )


@pytest.fixture
def formal_sadness_input():
    """Fixture providing a sadness request in a formal context."""
    return EmotionInput(
        type='sadness',
        intensity=0.9,
        context=SocialContext(social='default', formality_level=0.8)
    )


@pytest.fixture
def approving_ethics():
    """Fixture providing an ethics collaborator that approves everything."""
    validator = Mock()
    validator.validate_action = AsyncMock(return_value=EthicsDecision(approved=True))
    return validator


@pytest.fixture
def rejecting_ethics():
    """Fixture providing an ethics collaborator that rejects everything."""
    validator = Mock()
    validator.validate_action = AsyncMock(
        return_value=EthicsDecision(approved=False, reason='Expression not appropriate')
    )
    return validator


@pytest.fixture
def controller(approving_ethics):
    """Fixture providing a controller backed by the approving collaborator."""
    return SyntaxEmotionController(ethics_validator=approving_ethics)


@pytest.fixture
def mock_cloudwatch():
    """Fixture providing a mock CloudWatch client."""
    return Mock()


@pytest.fixture
def metrics(mock_cloudwatch):
    """Fixture providing a metrics emitter wired to the mock client."""
    return EmotionSynthesisMetrics(
        namespace='LSFAvatar/Test',
        use_cloudwatch=True,
        enabled=True,
        cloudwatch_client=mock_cloudwatch
    )


@pytest.fixture
def engine(generator, controller, metrics):
    """Fixture providing an engine with the approving collaborator."""
    return EmotionSynthesisEngine(generator=generator, controller=controller, metrics=metrics)
