"""Facial and body component factories."""

from .facial_factory import FacialComponentFactory
from .body_factory import BodyComponentFactory

__all__ = ['FacialComponentFactory', 'BodyComponentFactory']
