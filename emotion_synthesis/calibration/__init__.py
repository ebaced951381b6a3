"""Intensity calibration."""

from .intensity_calibrator import IntensityCalibrator

__all__ = ['IntensityCalibrator']
