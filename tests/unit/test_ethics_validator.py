"""
Unit tests for the rule-based ethics validator.
"""

import logging

import pytest

from emotion_synthesis.ethics import RuleBasedEthicsValidator
from emotion_synthesis.models import EthicsRequest


def make_request(emotion='joy', intensity=0.8, metadata=None):
    """Build an ethics request as the controller does."""
    return EthicsRequest(
        action_type='lsf_emotion_control',
        action_details={
            'emotion': emotion,
            'emotion_type': emotion,
            'intensity': intensity,
            'metadata': metadata or {},
        },
        context={'structure': 'statement', 'complexity': 0.5, 'correlation_id': 'test-123'}
    )


class TestRuleBasedEthicsValidator:
    """Test suite for RuleBasedEthicsValidator."""

    @pytest.mark.asyncio
    async def test_approves_ordinary_expression(self):
        """Test approval of an ordinary expression."""
        decision = await RuleBasedEthicsValidator().validate_action(make_request())

        assert decision.approved
        assert decision.reason is None

    @pytest.mark.asyncio
    async def test_rejects_excessive_intensity(self):
        """Test the intensity ceiling."""
        validator = RuleBasedEthicsValidator(max_intensity=0.5)
        decision = await validator.validate_action(make_request(intensity=0.8))

        assert not decision.approved
        assert 'exceeds ethical limit' in decision.reason

    @pytest.mark.asyncio
    async def test_intensity_ceiling_from_settings(self, monkeypatch):
        """Test that the ceiling defaults to the configured value."""
        monkeypatch.setenv('MAX_ETHICAL_INTENSITY', '0.6')
        from emotion_synthesis.config import reset_settings
        reset_settings()

        decision = await RuleBasedEthicsValidator().validate_action(make_request(intensity=0.7))

        assert not decision.approved

    @pytest.mark.asyncio
    async def test_rejects_blocked_emotion(self):
        """Test blocked emotions, matched case-insensitively."""
        validator = RuleBasedEthicsValidator(blocked_emotions=['Anger'])

        assert not (await validator.validate_action(make_request(emotion='anger'))).approved
        assert (await validator.validate_action(make_request(emotion='joy'))).approved

    @pytest.mark.asyncio
    @pytest.mark.parametrize('flag', ['prohibited_content', 'harassment', 'mockery'])
    async def test_rejects_flagged_content(self, flag):
        """Test rejection of expressions flagged in their metadata."""
        decision = await RuleBasedEthicsValidator().validate_action(
            make_request(metadata={flag: True})
        )

        assert not decision.approved
        assert flag in decision.reason

    @pytest.mark.asyncio
    async def test_rejection_logged(self, caplog):
        """Test that rejections are logged with the correlation ID."""
        validator = RuleBasedEthicsValidator(max_intensity=0.1)
        with caplog.at_level(logging.WARNING):
            await validator.validate_action(make_request())

        record = caplog.records[-1]
        assert 'rejected lsf_emotion_control' in record.getMessage()
        assert record.correlation_id == 'test-123'
