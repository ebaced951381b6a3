"""
Emotion analysis.

Builds the AnalyzedEmotion for a request: calibration, channel synthesis,
optional micro-variation, timing, context adjustment and metrics.
"""

import logging
from typing import Optional

import numpy as np

from emotion_synthesis.calibration.intensity_calibrator import IntensityCalibrator
from emotion_synthesis.config.settings import get_settings
from emotion_synthesis.context.contextual_adjuster import ContextualAdjuster
from emotion_synthesis.factories.body_factory import BodyComponentFactory
from emotion_synthesis.factories.facial_factory import FacialComponentFactory
from emotion_synthesis.models.analyzed_emotion import AnalyzedEmotion
from emotion_synthesis.models.emotion_input import EmotionInput
from emotion_synthesis.models.emotion_label import EmotionLabel
from emotion_synthesis.timing.timing_manager import TimingManager
from emotion_synthesis.validation.metrics_calculator import MetricsCalculator


logger = logging.getLogger(__name__)


class EmotionAnalyzer:
    """
    Turns an EmotionInput into a fully analysed emotion.
    
    Unknown labels are synthesized from the neutral tables at a reduced
    intensity. A bounded micro-variation (at most 10%) can perturb every
    channel parameter; it defaults to zero, which keeps analysis
    deterministic.
    """
    
    MAX_MICRO_VARIATION = 0.1
    
    def __init__(
        self,
        calibrator: Optional[IntensityCalibrator] = None,
        facial_factory: Optional[FacialComponentFactory] = None,
        body_factory: Optional[BodyComponentFactory] = None,
        timing_manager: Optional[TimingManager] = None,
        contextual_adjuster: Optional[ContextualAdjuster] = None,
        metrics_calculator: Optional[MetricsCalculator] = None,
        unknown_intensity_factor: Optional[float] = None,
        micro_variation: Optional[float] = None
    ):
        """
        Initialize emotion analyzer.
        
        Args:
            calibrator: Intensity calibrator (creates new if None)
            facial_factory: Facial component factory (creates new if None)
            body_factory: Body component factory (creates new if None)
            timing_manager: Timing manager (creates new if None)
            contextual_adjuster: Contextual adjuster (creates new if None)
            metrics_calculator: Metrics calculator (creates new if None)
            unknown_intensity_factor: Intensity factor for unknown labels (settings if None)
            micro_variation: Micro-variation amplitude (settings if None)
        """
        settings = get_settings()
        self.calibrator = calibrator or IntensityCalibrator()
        self.facial_factory = facial_factory or FacialComponentFactory()
        self.body_factory = body_factory or BodyComponentFactory()
        self.timing_manager = timing_manager or TimingManager()
        self.contextual_adjuster = contextual_adjuster or ContextualAdjuster(self.timing_manager)
        self.metrics_calculator = metrics_calculator or MetricsCalculator(self.timing_manager)
        
        if unknown_intensity_factor is None:
            unknown_intensity_factor = settings.unknown_emotion_intensity_factor
        if micro_variation is None:
            micro_variation = settings.micro_variation
        if not 0.0 <= micro_variation <= self.MAX_MICRO_VARIATION:
            raise ValueError(
                f"micro_variation must be between 0.0 and {self.MAX_MICRO_VARIATION}, "
                f"got {micro_variation}"
            )
        
        self.unknown_intensity_factor = unknown_intensity_factor
        self.micro_variation = micro_variation
    
    def expected_intensity(self, emotion: str, intensity: float) -> float:
        """
        Intensity the synthesized channels should express for a request.
        
        Args:
            emotion: Raw emotion label
            intensity: Requested intensity
            
        Returns:
            Calibrated intensity, reduced for unknown labels
        """
        calibrated = self.calibrator.calibrate(emotion, intensity)
        if not EmotionLabel.parse(emotion).is_known:
            calibrated *= self.unknown_intensity_factor
        return calibrated
    
    def analyze(self, emotion_input: EmotionInput) -> AnalyzedEmotion:
        """
        Analyse an emotion request.
        
        Args:
            emotion_input: Validated request
            
        Returns:
            AnalyzedEmotion with metrics attached
        """
        label = emotion_input.label
        calibrated = self.expected_intensity(emotion_input.type, emotion_input.intensity)
        
        if not label.is_known:
            logger.warning(
                f"Unknown emotion '{emotion_input.normalized_type}', "
                f"using neutral channels at intensity {calibrated:.3f}"
            )
        
        facial = self.facial_factory.create(label, calibrated)
        body = self.body_factory.create(label, calibrated)
        hand = self.body_factory.create_hand(label, calibrated)
        
        if self.micro_variation > 0:
            rng = np.random.default_rng(emotion_input.seed)
            def jitter(_, component):
                return component.with_parameters(self._vary(component.parameters, rng))
            
            facial = facial.map(jitter)
            body = body.map(jitter)
        
        analyzed = AnalyzedEmotion(
            base_type=emotion_input.normalized_type,
            label=label,
            requested_intensity=emotion_input.intensity,
            calibrated_intensity=calibrated,
            facial=facial,
            body=body,
            hand=hand,
            timing=self.timing_manager.compute(label, calibrated)
        )
        
        if emotion_input.context is not None:
            analyzed = self.contextual_adjuster.adjust(analyzed, emotion_input.context)
        
        return analyzed.with_metrics(self.metrics_calculator.calculate(analyzed))
    
    def _vary(self, parameters, rng: np.random.Generator):
        factors = 1 + rng.uniform(-self.micro_variation, self.micro_variation, size=len(parameters))
        return {
            name: float(value * factor)
            for (name, value), factor in zip(parameters.items(), factors)
        }
