"""Image analysis for DripMuse: facial colours, clothing, palettes and colour harmony."""

from .clothing import ClothingCategorizer
from .color_profile import ColorProfileBuilder
from .color_season import SeasonAnalyst
from .config import VisionSettings
from .errors import AnalysisTimeout, CapabilityUnavailable, InsufficientSamples, LoadError, VisionError
from .facial_analysis import FacialFeatureAnalyzer
from .harmony import HarmonyEngine
from .metrics import AnalysisMonitor
from .palette import extract_palette

__all__ = [
    "AnalysisMonitor",
    "AnalysisTimeout",
    "CapabilityUnavailable",
    "ClothingCategorizer",
    "ColorProfileBuilder",
    "FacialFeatureAnalyzer",
    "HarmonyEngine",
    "InsufficientSamples",
    "LoadError",
    "SeasonAnalyst",
    "VisionError",
    "VisionSettings",
    "extract_palette",
]
