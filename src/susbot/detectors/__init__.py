"""Detector package for Susbot."""

from .base import Detector
from .common import SourceView, build_source_view
from .rules import DETECTOR_CLASSES, build_detectors

__all__ = ["DETECTOR_CLASSES", "Detector", "SourceView", "build_detectors", "build_source_view"]
