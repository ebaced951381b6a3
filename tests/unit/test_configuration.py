"""
Unit tests for configuration settings.
"""

import pytest

from emotion_synthesis.config import Settings, get_settings, reset_settings


class TestSettingsDefaults:
    """Test default configuration values."""

    def test_default_values(self):
        """Test that defaults match the documented configuration."""
        settings = Settings()

        assert settings.log_level == 'INFO'
        assert settings.log_json is True
        assert settings.enable_metrics is True
        assert settings.use_cloudwatch is False
        assert settings.metrics_namespace == 'LSFAvatar/EmotionSynthesis'
        assert settings.intensity_tolerance == 0.2
        assert settings.max_channel_divergence == 0.3
        assert settings.degraded_coherence_score == 0.7
        assert settings.unknown_emotion_intensity_factor == 0.5
        assert settings.micro_variation == 0.0
        assert settings.max_spatial_expansion == 1.5
        assert settings.max_ethical_intensity == 1.0


class TestSettingsFromEnvironment:
    """Test environment overrides."""

    def test_environment_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv('LOG_LEVEL', 'DEBUG')
        monkeypatch.setenv('USE_CLOUDWATCH', 'yes')
        monkeypatch.setenv('INTENSITY_TOLERANCE', '0.15')
        monkeypatch.setenv('MICRO_VARIATION', '0.05')

        settings = Settings()

        assert settings.log_level == 'DEBUG'
        assert settings.use_cloudwatch is True
        assert settings.intensity_tolerance == 0.15
        assert settings.micro_variation == 0.05

    @pytest.mark.parametrize('value,expected', [
        ('true', True), ('1', True), ('on', True), ('false', False), ('0', False), ('nope', False)
    ])
    def test_boolean_parsing(self, monkeypatch, value, expected):
        """Test parsing of boolean flags."""
        monkeypatch.setenv('ENABLE_METRICS', value)
        assert Settings().enable_metrics is expected


class TestSettingsValidation:
    """Test configuration validation."""

    def test_invalid_log_level_rejected(self, monkeypatch):
        """Test that an unknown log level raises ValueError."""
        monkeypatch.setenv('LOG_LEVEL', 'VERBOSE')
        with pytest.raises(ValueError, match='LOG_LEVEL'):
            Settings()

    @pytest.mark.parametrize('name', [
        'INTENSITY_TOLERANCE',
        'MAX_CHANNEL_DIVERGENCE',
        'DEGRADED_COHERENCE_SCORE',
        'UNKNOWN_EMOTION_INTENSITY_FACTOR',
        'MAX_ETHICAL_INTENSITY',
    ])
    def test_unit_interval_settings_rejected_outside_range(self, monkeypatch, name):
        """Test that unit-interval settings reject values above 1."""
        monkeypatch.setenv(name, '1.5')
        with pytest.raises(ValueError, match=name):
            Settings()

    def test_micro_variation_capped(self, monkeypatch):
        """Test that micro-variation above 10% is rejected."""
        monkeypatch.setenv('MICRO_VARIATION', '0.2')
        with pytest.raises(ValueError, match='MICRO_VARIATION'):
            Settings()

    def test_spatial_expansion_must_not_shrink(self, monkeypatch):
        """Test that the expansion cap must be at least 1."""
        monkeypatch.setenv('MAX_SPATIAL_EXPANSION', '0.8')
        with pytest.raises(ValueError, match='MAX_SPATIAL_EXPANSION'):
            Settings()

    def test_non_numeric_value_rejected(self, monkeypatch):
        """Test that non-numeric thresholds raise ValueError."""
        monkeypatch.setenv('INTENSITY_TOLERANCE', 'high')
        with pytest.raises(ValueError):
            Settings()


class TestSettingsSingleton:
    """Test the settings singleton."""

    def test_get_settings_returns_same_instance(self):
        """Test that get_settings caches its instance."""
        assert get_settings() is get_settings()

    def test_reset_settings_rereads_environment(self, monkeypatch):
        """Test that reset_settings picks up environment changes."""
        first = get_settings()
        monkeypatch.setenv('MAX_CHANNEL_DIVERGENCE', '0.25')
        reset_settings()
        second = get_settings()

        assert second is not first
        assert second.max_channel_divergence == 0.25
