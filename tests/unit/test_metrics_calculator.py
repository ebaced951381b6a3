"""
Unit tests for MetricsCalculator.
"""

import pytest

from emotion_synthesis.factories import BodyComponentFactory, FacialComponentFactory
from emotion_synthesis.models import (
    AnalyzedEmotion,
    BodyComponents,
    EmotionLabel,
    FacialComponents,
)
from emotion_synthesis.timing import TimingManager
from emotion_synthesis.validation import MetricsCalculator


def make_analyzed(emotion, intensity):
    """Build an analysed emotion straight from the factories."""
    label = EmotionLabel.parse(emotion)
    body_factory = BodyComponentFactory()
    return AnalyzedEmotion(
        base_type=emotion,
        label=label,
        requested_intensity=intensity,
        calibrated_intensity=intensity,
        facial=FacialComponentFactory().create(label, intensity),
        body=body_factory.create(label, intensity),
        hand=body_factory.create_hand(label, intensity),
        timing=TimingManager().compute(label, intensity)
    )


class TestMetricsCalculator:
    """Test suite for MetricsCalculator."""

    @pytest.fixture
    def calculator(self):
        """Creates MetricsCalculator instance."""
        return MetricsCalculator()

    def test_full_intensity_joy(self, calculator):
        """Test all three metrics for joy at full intensity."""
        metrics = calculator.calculate(make_analyzed('joy', 1.0))

        # facial pairs 0.95, body pairs 0.88, alignment 0.9
        assert metrics.authenticity == pytest.approx(0.914)
        # facial norms 0.9333, body norms 0.9667
        assert metrics.cultural_accuracy == pytest.approx(0.94667, abs=1e-4)
        # facial 0.4542, body 0.7125, temporal 0.964
        assert metrics.expressiveness == pytest.approx(0.65947, abs=1e-4)
        assert metrics.coherence == 1.0

    def test_emotion_alignment(self, calculator):
        """Test base alignment plus increments for typical parameters."""
        analyzed = make_analyzed('joy', 0.5)
        channels = {**analyzed.facial.channels(), **analyzed.body.channels()}

        assert calculator.emotion_alignment(EmotionLabel.JOY, channels) == pytest.approx(0.9)
        # neutral channels carry no fear markers
        neutral = make_analyzed('neutral', 0.5)
        neutral_channels = {**neutral.facial.channels(), **neutral.body.channels()}
        assert calculator.emotion_alignment(EmotionLabel.FEAR, neutral_channels) == pytest.approx(0.7)

    def test_zero_intensity_parameters_do_not_align(self, calculator):
        """Test that zero-valued markers do not count."""
        analyzed = make_analyzed('joy', 0.0)
        channels = {**analyzed.facial.channels(), **analyzed.body.channels()}

        assert calculator.emotion_alignment(EmotionLabel.JOY, channels) == pytest.approx(0.7)

    def test_defaults_without_channels(self, calculator):
        """Test sub-score defaults when no channel can be measured."""
        analyzed = make_analyzed('joy', 0.5)
        empty = AnalyzedEmotion(
            base_type='joy',
            label=EmotionLabel.JOY,
            requested_intensity=0.5,
            calibrated_intensity=0.5,
            facial=FacialComponents(),
            body=BodyComponents(),
            hand={},
            timing=analyzed.timing
        )
        metrics = calculator.calculate(empty)

        assert metrics.authenticity == pytest.approx(0.4 * 0.9 + 0.3 * 0.85 + 0.3 * 0.7)
        assert metrics.cultural_accuracy == pytest.approx(0.85)
        assert metrics.expressiveness == pytest.approx(0.4 * 0.65 + 0.4 * 0.65 + 0.2 * 0.964)

    def test_unknown_label_scored_against_neutral_norms(self, calculator):
        """Test that fallback expressions are scored with neutral norms."""
        unknown = make_analyzed('nostalgia', 0.5)
        neutral = make_analyzed('neutral', 0.5)

        assert calculator.calculate(unknown).cultural_accuracy == pytest.approx(
            calculator.calculate(neutral).cultural_accuracy
        )

    @pytest.mark.parametrize('emotion', ['joy', 'sadness', 'anger', 'fear', 'surprise', 'disgust', 'neutral'])
    @pytest.mark.parametrize('intensity', [0.0, 0.3, 0.6, 1.0])
    def test_metrics_in_unit_interval(self, calculator, emotion, intensity):
        """Test that every metric lies in [0, 1]."""
        metrics = calculator.calculate(make_analyzed(emotion, intensity))

        for value in metrics.to_dict().values():
            assert 0.0 <= value <= 1.0
