"""
Unit tests for ExpressionValidator.
"""

import math

import pytest

from emotion_synthesis.models import EmotionInput
from emotion_synthesis.validation import ExpressionValidator


@pytest.fixture
def expression(generator):
    """Fixture providing a valid assembled joy expression."""
    analyzed = generator.analyzer.analyze(EmotionInput(type='joy', intensity=0.8))
    return generator.assemble(analyzed)


class TestExpressionValidator:
    """Test suite for ExpressionValidator."""

    @pytest.fixture
    def validator(self):
        """Creates ExpressionValidator instance."""
        return ExpressionValidator()

    def test_valid_expression(self, validator, expression):
        """Test that an assembled expression passes."""
        result = validator.validate(expression)

        assert result
        assert result.issues == []
        assert result.score == 1.0

    @pytest.mark.parametrize('channel', ['eyebrows', 'eyes', 'mouth', 'posture', 'movement'])
    def test_missing_required_channel(self, validator, expression, channel):
        """Test that required channels must be present."""
        expression.set_channel(channel, None)
        result = validator.validate(expression)

        assert not result
        assert result.issues[0].type == 'missing_channel'
        assert result.issues[0].component == channel

    def test_optional_channels(self, validator, expression):
        """Test that head, shoulders and arms may be absent."""
        for channel in ('head', 'shoulders', 'arms'):
            expression.set_channel(channel, None)

        assert validator.validate(expression)

    def test_empty_parameters(self, validator, expression):
        """Test that present channels need parameters."""
        expression.eyebrows = {}
        result = validator.validate(expression)

        assert not result
        assert [i.type for i in result.issues] == ['empty_parameters']
        assert str(result.issues[0]) == "Channel 'eyebrows' has no parameters"

    @pytest.mark.parametrize('value', ['high', None, math.nan, True])
    def test_non_numeric_parameter(self, validator, expression, value):
        """Test that parameters must be numbers."""
        expression.mouth['smiling'] = value
        result = validator.validate(expression)

        assert not result
        assert result.issues[0].type == 'invalid_parameter'

    def test_timing_must_sum_to_duration(self, validator, expression):
        """Test the onset + hold + release == duration invariant."""
        expression.timing.hold += 50
        result = validator.validate(expression)

        assert not result
        assert result.issues[0].type == 'timing_envelope'

    def test_negative_timing(self, validator, expression):
        """Test that timing phases must be non-negative."""
        expression.timing.onset = -10
        result = validator.validate(expression)

        assert not result
        assert 'onset' in result.issues[0].message

    def test_intensity_range(self, validator, expression):
        """Test global and channel intensity ranges."""
        expression.intensity = 1.2
        expression.channel_intensities['eyes'] = -0.1
        result = validator.validate(expression)

        assert not result
        assert [i.component for i in result.issues] == ['intensity', 'eyes']

    def test_score_penalizes_each_issue(self, validator, expression):
        """Test score reduction per structural error."""
        expression.eyebrows = {}
        expression.intensity = 1.5
        result = validator.validate(expression)

        assert len(result.errors) == 2
        assert result.score == pytest.approx(0.6)
