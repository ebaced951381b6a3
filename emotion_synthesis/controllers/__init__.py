"""Syntax/emotion integration control."""

from .syntax_emotion_controller import SyntaxEmotionController

__all__ = ['SyntaxEmotionController']
