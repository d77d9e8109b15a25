"""Value objects returned by the analysis pipelines."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

from .color_space import rgb_to_hex

CLOTHING_CATEGORIES = ("tops", "bottoms", "dresses", "outerwear", "shoes", "accessories")
NOT_CLOTHING = "other"


class _Record:
    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ColorSample(_Record):
    r: int
    g: int
    b: int
    weight: float = 1.0

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b


@dataclass(frozen=True)
class ColorCluster(_Record):
    """Centroid and mass of one k-means cluster."""

    r: int
    g: int
    b: int
    mass: float
    lab: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)


@dataclass(frozen=True)
class ClassifiedColor(_Record):
    name: str
    family: str
    temperature: str
    intensity: str
    saturation: str


@dataclass(frozen=True)
class FeatureColor(_Record):
    """Dominant colour of one facial feature."""

    color: str
    category: str
    confidence: float
    description: str
    pixel_count: int = 0


@dataclass(frozen=True)
class SkinTone(FeatureColor):
    lightness: str = "medium"
    undertone: str = "neutral"


@dataclass(frozen=True)
class LightingProfile(_Record):
    average_brightness: float
    contrast: float
    average_saturation: float
    warm_ratio: float
    cool_ratio: float
    conditions: Tuple[str, ...] = ()
    average_rgb: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def needs_correction(self) -> bool:
        return bool(self.conditions)


@dataclass(frozen=True)
class QualityIssue(_Record):
    severity: str
    message: str


@dataclass(frozen=True)
class FacialFeatureReport(_Record):
    skin_tone: SkinTone
    hair_color: FeatureColor
    eye_color: FeatureColor
    overall_confidence: float
    detected_features: bool
    method: str
    lighting: Optional[LightingProfile] = None
    quality_issues: Tuple[QualityIssue, ...] = ()


@dataclass(frozen=True)
class ClothingAnalysisResult(_Record):
    is_clothing: bool
    category: str
    subcategory: str
    style: str
    colors: List[str]
    occasions: List[str]
    seasons: List[str]
    tags: List[str]
    confidence: float
    reasoning: str
    patterns: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    detection_methods: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ColorHarmonyResult(_Record):
    is_harmonious: bool
    harmony_type: str
    confidence: float
    reasoning: str
    color_distance: float = 0.0


@dataclass(frozen=True)
class ColorAnalysis(_Record):
    dominant_color: str
    color_family: str
    temperature: str
    intensity: str
    saturation: str
    hex_value: str
    lab: Tuple[float, float, float]


@dataclass(frozen=True)
class SeasonProfile(_Record):
    season: str
    subseason: str
    temperature: str
    temperature_score: int
    contrast: str
    contrast_value: float
    confidence: str
    season_scores: Dict[str, int]
    temperature_factors: List[Tuple[str, int, str]]
    recommended_colors: List[str] = field(default_factory=list)
    temperature_confidence: str = "medium"
    contrast_confidence: str = "medium"


@dataclass(frozen=True)
class ExtractedPalette(_Record):
    colors: List[str]
    confidence: float
    method: str


__all__ = [
    "CLOTHING_CATEGORIES",
    "NOT_CLOTHING",
    "ClassifiedColor",
    "ClothingAnalysisResult",
    "ColorAnalysis",
    "ColorCluster",
    "ColorHarmonyResult",
    "ColorSample",
    "ExtractedPalette",
    "FacialFeatureReport",
    "FeatureColor",
    "LightingProfile",
    "QualityIssue",
    "SeasonProfile",
    "SkinTone",
]
