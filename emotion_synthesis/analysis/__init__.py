"""Emotion analysis."""

from .emotion_analyzer import EmotionAnalyzer

__all__ = ['EmotionAnalyzer']
