"""
Configuration settings for emotion synthesis module.

Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import Optional


class Settings:
    """
    Configuration settings for expression synthesis and integration.
    
    All settings are loaded from environment variables with defaults.
    """
    
    def __init__(self):
        """Initialize settings from environment variables."""
        # Logging Configuration
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')
        self.log_json: bool = self._parse_bool(os.getenv('LOG_JSON', 'true'))
        
        # Metrics Configuration
        self.enable_metrics: bool = self._parse_bool(os.getenv('ENABLE_METRICS', 'true'))
        self.use_cloudwatch: bool = self._parse_bool(os.getenv('USE_CLOUDWATCH', 'false'))
        self.metrics_namespace: str = os.getenv(
            'METRICS_NAMESPACE', 'LSFAvatar/EmotionSynthesis'
        )
        
        # Coherence Thresholds
        self.intensity_tolerance: float = float(os.getenv('INTENSITY_TOLERANCE', '0.2'))
        self.max_channel_divergence: float = float(
            os.getenv('MAX_CHANNEL_DIVERGENCE', '0.3')
        )
        self.degraded_coherence_score: float = float(
            os.getenv('DEGRADED_COHERENCE_SCORE', '0.7')
        )
        
        # Synthesis Configuration
        self.unknown_emotion_intensity_factor: float = float(
            os.getenv('UNKNOWN_EMOTION_INTENSITY_FACTOR', '0.5')
        )
        self.micro_variation: float = float(os.getenv('MICRO_VARIATION', '0.0'))
        
        # Integration Configuration
        self.max_spatial_expansion: float = float(
            os.getenv('MAX_SPATIAL_EXPANSION', '1.5')
        )
        self.max_ethical_intensity: float = float(
            os.getenv('MAX_ETHICAL_INTENSITY', '1.0')
        )
        
        # Validate configuration
        self._validate()
    
    def _parse_bool(self, value: str) -> bool:
        """
        Parse boolean value from string.
        
        Args:
            value: String value to parse
            
        Returns:
            Boolean value
        """
        return value.lower() in ('true', '1', 'yes', 'on')
    
    def _validate(self):
        """Validate configuration values."""
        # Validate log level
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level}. "
                f"Must be one of {valid_log_levels}"
            )
        
        # Validate unit-interval settings
        unit_fields = {
            'INTENSITY_TOLERANCE': self.intensity_tolerance,
            'MAX_CHANNEL_DIVERGENCE': self.max_channel_divergence,
            'DEGRADED_COHERENCE_SCORE': self.degraded_coherence_score,
            'UNKNOWN_EMOTION_INTENSITY_FACTOR': self.unknown_emotion_intensity_factor,
            'MAX_ETHICAL_INTENSITY': self.max_ethical_intensity,
        }
        for name, value in unit_fields.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")
        
        if not 0.0 <= self.micro_variation <= 0.1:
            raise ValueError(
                f"MICRO_VARIATION must be between 0.0 and 0.1, got {self.micro_variation}"
            )
        
        if self.max_spatial_expansion < 1.0:
            raise ValueError(
                f"MAX_SPATIAL_EXPANSION must be at least 1.0, got {self.max_spatial_expansion}"
            )
        
        if not self.metrics_namespace:
            raise ValueError("METRICS_NAMESPACE must be non-empty")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton pattern).
    
    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
