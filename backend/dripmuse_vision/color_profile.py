"""Personal colour profile built from a facial feature report."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence

from .color_season import SeasonAnalyst
from .color_space import hex_distance
from .harmony import SEASONAL_PALETTES, HarmonyEngine
from .models import ExtractedPalette, FacialFeatureReport, SeasonProfile
from .quality import accuracy_description, is_well_detected

DUPLICATE_DISTANCE = 15
SEASONAL_MATCH_DISTANCE = 50

_AVOID_BY_UNDERTONE = {
    "warm": ["#FF69B4", "#87CEEB", "#E6E6FA"],
    "cool": ["#FFA500", "#FFD700", "#FF4500"],
}
_AVOID_BY_HAIR = {
    "blonde": ["#FFFF99", "#FFFACD", "#F5DEB3"],
    "brown": ["#8B4513", "#A0522D", "#D2B48C"],
}
_AVOID_BY_EYE = {
    "blue": ["#0000FF", "#4169E1"],
    "green": ["#00FF00", "#32CD32"],
}


@dataclass(frozen=True)
class ColorProfile:
    season: SeasonProfile
    recommended_palette: List[str]
    complementary_colors: List[str]
    harmonizing_colors: List[str]
    avoid_colors: List[str]
    best_matches: List[str] = field(default_factory=list)
    accuracy: Dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def unique_colors(colors: Sequence[str], min_distance: float = DUPLICATE_DISTANCE) -> List[str]:
    """Drop colours closer than ``min_distance`` (RGB) to one already kept."""
    kept: List[str] = []
    for color in colors:
        if all(hex_distance(color, other) >= min_distance for other in kept):
            kept.append(color)
    return kept


class ColorProfileBuilder:
    def __init__(self, harmony: Optional[HarmonyEngine] = None, analyst: Optional[SeasonAnalyst] = None):
        self.harmony = harmony or HarmonyEngine()
        self.analyst = analyst or SeasonAnalyst(
            {name: list(p.hex_palette) for name, p in SEASONAL_PALETTES.items()}
        )

    def build(self, report: FacialFeatureReport, palette: Optional[ExtractedPalette] = None) -> ColorProfile:
        season = self.analyst.analyze_report(report)
        best = self.best_matches(report, palette.colors, season.season) if palette else []
        return ColorProfile(
            season=season,
            recommended_palette=list(SEASONAL_PALETTES[season.season].hex_palette[:8]),
            complementary_colors=self.complementary_colors(report),
            harmonizing_colors=self.harmonizing_colors(report),
            avoid_colors=self.avoid_colors(report),
            best_matches=best,
            accuracy=self.accuracy(report),
        )

    def complementary_colors(self, report: FacialFeatureReport) -> List[str]:
        colors = self.harmony.generate_harmonious_colors(report.skin_tone.color, "complementary")
        colors += self.harmony.generate_harmonious_colors(report.eye_color.color, "complementary")
        return unique_colors(colors)[:6]

    def harmonizing_colors(self, report: FacialFeatureReport) -> List[str]:
        skin = report.skin_tone.color
        colors = self.harmony.generate_harmonious_colors(skin, "analogous")
        colors += self.harmony.generate_harmonious_colors(skin, "monochromatic")
        return unique_colors(colors)[:8]

    @staticmethod
    def avoid_colors(report: FacialFeatureReport) -> List[str]:
        colors = (
            _AVOID_BY_UNDERTONE.get(report.skin_tone.undertone, [])
            + _AVOID_BY_HAIR.get(report.hair_color.category, [])
            + _AVOID_BY_EYE.get(report.eye_color.category, [])
        )
        return unique_colors(colors)

    def best_matches(self, report: FacialFeatureReport, colors: Sequence[str], season: str) -> List[str]:
        """Rank palette colours by harmony with skin and eyes plus seasonal fit."""
        seasonal = SEASONAL_PALETTES[season].hex_palette
        scored = []
        for color in colors:
            skin = self.harmony.analyze_harmony([color], [report.skin_tone.color], season=season)
            eye = self.harmony.analyze_harmony([color], [report.eye_color.color], season=season)
            score = skin.confidence * 40 + eye.confidence * 30
            if any(hex_distance(color, s) < SEASONAL_MATCH_DISTANCE for s in seasonal):
                score += 20
            if "complementary" in (skin.harmony_type, eye.harmony_type):
                score += 10
            scored.append((score, color))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [color for _, color in scored[:6]]

    @staticmethod
    def accuracy(report: FacialFeatureReport) -> Dict[str, object]:
        return {
            "overall": round(report.overall_confidence * 100),
            "skin": round(report.skin_tone.confidence * 100),
            "hair": round(report.hair_color.confidence * 100),
            "eyes": round(report.eye_color.confidence * 100),
            "description": accuracy_description(report.overall_confidence),
            "well_detected": [
                feature for feature, confidence in (
                    ("skin", report.skin_tone.confidence),
                    ("hair", report.hair_color.confidence),
                    ("eyes", report.eye_color.confidence),
                ) if is_well_detected(confidence)
            ],
        }


__all__ = ["ColorProfile", "ColorProfileBuilder", "unique_colors"]
