"""
Unit tests for CoherenceValidator.
"""

import pytest

from emotion_synthesis.models import EmotionInput
from emotion_synthesis.validation import CoherenceValidator


def synthesize(generator, emotion, intensity):
    """Synthesize an expression without nuances or context."""
    result = generator.generate(EmotionInput(type=emotion, intensity=intensity))
    assert result.success
    return result.expression


class TestCoherenceValidator:
    """Test suite for CoherenceValidator."""

    @pytest.fixture
    def validator(self):
        """Creates CoherenceValidator instance."""
        return CoherenceValidator()

    def test_coherent_expression(self, validator, generator):
        """Test that a plain joy expression is coherent."""
        result = validator.validate(synthesize(generator, 'joy', 0.8), 'joy', 0.8)

        assert result
        assert result.issues == []
        assert result.score == 1.0

    def test_type_mismatch_reported_first(self, validator, generator):
        """Test that the declared type is checked before anything else."""
        result = validator.validate(synthesize(generator, 'joy', 0.8), 'sadness', 0.8)

        assert not result
        assert result.issues[0].startswith("Declared emotion 'joy'")
        assert result.score == pytest.approx(0.7)

    def test_dominant_type_selects_rules(self, validator, generator):
        """Test that channel rules follow the dominant label, the type check the declared one."""
        expression = synthesize(generator, 'sadness', 0.8)
        expression.emotion_type = 'joy'

        assert not validator.validate(expression, 'joy', 0.8)

        result = validator.validate(expression, 'joy', 0.8, dominant_type='sadness')
        assert result
        assert result.issues == []

        mismatch = validator.validate(expression, 'anger', 0.8, dominant_type='sadness')
        assert mismatch.issues == ["Declared emotion 'joy' does not match requested 'anger'"]

    def test_overall_intensity_deviation(self, validator, generator):
        """Test that a request far from the produced intensity is flagged."""
        result = validator.validate(synthesize(generator, 'joy', 0.8), 'joy', 0.2)

        assert len(result.issues) == 1
        assert result.issues[0].startswith('Overall intensity')

    def test_facial_rule_failure(self, validator, generator):
        """Test a failing lower-bound facial rule."""
        expression = synthesize(generator, 'joy', 0.8)
        expression.mouth['smiling'] = 0.0
        result = validator.validate(expression, 'joy', 0.8)

        assert result.issues == [
            'Facial rule failed: mouth.smiling = 0.00 should be >= 0.44'
        ]

    def test_missing_rule_parameter(self, validator, generator):
        """Test that a missing rule parameter fails the rule."""
        expression = synthesize(generator, 'anger', 0.6)
        del expression.body.posture['tension']
        result = validator.validate(expression, 'anger', 0.6)

        assert result.issues == ['Body rule failed: posture.tension is missing']

    def test_upper_bound_rule(self, validator, generator):
        """Test sadness mouth corners as an upper bound."""
        expression = synthesize(generator, 'sadness', 0.8)
        assert validator.validate(expression, 'sadness', 0.8)

        expression.mouth['corners'] = abs(expression.mouth['corners'])
        result = validator.validate(expression, 'sadness', 0.8)
        assert any('mouth.corners' in issue and '<=' in issue for issue in result.issues)

    def test_inactive_channel_fails_rule(self, validator, generator):
        """Test that a zero-intensity channel has a zero profile."""
        expression = synthesize(generator, 'joy', 0.8)
        expression.channel_intensities['mouth'] = 0.0
        result = validator.validate(expression, 'joy', 0.8)

        assert any(issue.startswith('Facial rule failed: mouth.smiling') for issue in result.issues)

    def test_alignment_divergence(self, validator, generator):
        """Test that facial/body divergence is flagged."""
        expression = synthesize(generator, 'joy', 0.8)
        for channel in ('shoulders', 'arms', 'posture', 'movement'):
            expression.channel_intensities[channel] = 0.1
        result = validator.validate(expression, 'joy', 0.8)

        assert 'diverge' in result.issues[-1]

    def test_issues_accumulate_in_check_order(self, validator, generator):
        """Test that every check runs and issues keep their order."""
        expression = synthesize(generator, 'joy', 0.8)
        expression.emotion_type = 'anger'
        expression.mouth['smiling'] = 0.0
        for channel in ('shoulders', 'arms', 'posture', 'movement'):
            expression.channel_intensities[channel] = 0.0
        result = validator.validate(expression, 'joy', 0.8)

        assert result.issues[0].startswith('Declared emotion')
        assert result.issues[1].startswith('Overall intensity')
        assert result.issues[2].startswith('Facial rule failed')
        assert 'diverge' in result.issues[-1]

    def test_unknown_label_expected_intensity(self, validator, generator):
        """Test that unknown labels are checked at the reduced fallback intensity."""
        expression = synthesize(generator, 'nostalgia', 0.8)

        assert validator.validate(expression, 'nostalgia', 0.8)

    def test_custom_tolerance(self, generator):
        """Test a stricter intensity tolerance."""
        validator = CoherenceValidator(intensity_tolerance=0.01, degraded_score=0.5)
        result = validator.validate(synthesize(generator, 'joy', 0.8), 'joy', 0.8)

        assert not result
        assert result.score == 0.5

    @pytest.mark.parametrize('emotion', ['joy', 'sadness', 'anger', 'fear', 'surprise', 'disgust', 'neutral', 'pride'])
    @pytest.mark.parametrize('intensity', [0.0, 0.1, 0.35, 0.5, 0.8, 1.0])
    def test_plain_synthesis_is_coherent(self, validator, generator, emotion, intensity):
        """Test that synthesis without nuances or context is always coherent."""
        expression = synthesize(generator, emotion, intensity)
        assert validator.validate(expression, emotion, intensity).issues == []
