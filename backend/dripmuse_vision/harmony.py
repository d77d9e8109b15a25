"""Colour-harmony rules over named or hex colours."""

from __future__ import annotations

import datetime
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .color_classifier import classify_color
from .color_space import hex_to_lab, hex_to_rgb, lab_distance, lab_to_rgb, normalize_hex, rgb_to_hex
from .models import ColorAnalysis, ColorHarmonyResult

logger = logging.getLogger(__name__)

# name -> (hex, family)
COLOR_TABLE: Dict[str, Tuple[str, str]] = {
    "black": ("#000000", "neutral"),
    "white": ("#FFFFFF", "neutral"),
    "gray": ("#808080", "neutral"),
    "light-gray": ("#D3D3D3", "neutral"),
    "charcoal": ("#36454F", "neutral"),
    "silver": ("#C0C0C0", "neutral"),
    "cream": ("#FFFDD0", "neutral"),
    "ivory": ("#FFFFF0", "neutral"),
    "beige": ("#F5F5DC", "neutral"),
    "tan": ("#D2B48C", "neutral"),
    "brown": ("#A0522D", "neutral"),
    "navy": ("#000080", "blue"),
    "neutral": ("#808080", "neutral"),
    "pearl": ("#EAE0C8", "neutral"),
    "champagne": ("#F7E7CE", "neutral"),
    "red": ("#FF0000", "red"),
    "crimson": ("#DC143C", "red"),
    "burgundy": ("#800020", "red"),
    "pink": ("#FFC0CB", "red"),
    "soft-pink": ("#FFB6C1", "red"),
    "hot-pink": ("#FF69B4", "red"),
    "rose": ("#FF007F", "red"),
    "coral": ("#FF7F50", "orange"),
    "peach": ("#FFDAB9", "orange"),
    "orange": ("#FFA500", "orange"),
    "rust": ("#B7410E", "orange"),
    "terracotta": ("#E2725B", "orange"),
    "bronze": ("#CD7F32", "orange"),
    "yellow": ("#FFFF00", "yellow"),
    "gold": ("#FFD700", "yellow"),
    "mustard": ("#FFDB58", "yellow"),
    "green": ("#008000", "green"),
    "lime": ("#32CD32", "green"),
    "olive": ("#808000", "green"),
    "sage": ("#9CAF88", "green"),
    "mint": ("#98FB98", "green"),
    "forest": ("#228B22", "green"),
    "emerald": ("#50C878", "green"),
    "teal": ("#008080", "blue"),
    "turquoise": ("#40E0D0", "blue"),
    "cyan": ("#00FFFF", "blue"),
    "blue": ("#0000FF", "blue"),
    "royal-blue": ("#4169E1", "blue"),
    "light-blue": ("#87CEEB", "blue"),
    "powder-blue": ("#B0E0E6", "blue"),
    "purple": ("#800080", "purple"),
    "lavender": ("#E6E6FA", "purple"),
    "mauve": ("#E0B0FF", "purple"),
    "magenta": ("#FF00FF", "purple"),
}

NEUTRAL_NAMES = frozenset(
    {"black", "white", "gray", "light-gray", "charcoal", "silver", "cream", "ivory",
     "beige", "tan", "brown", "neutral"}
)

MODERN_COMBINATIONS = [
    ({"light-gray", "charcoal", "white"}, "monochromatic", "minimalist"),
    ({"navy", "powder-blue", "beige"}, "monochromatic", "classic"),
    ({"soft-pink", "hot-pink", "burgundy"}, "monochromatic", "romantic"),
    ({"sage", "terracotta"}, "complementary", "earthy modern"),
    ({"mint", "terracotta"}, "complementary", "earthy modern"),
    ({"navy", "tan"}, "complementary", "sophisticated"),
    ({"hot-pink", "lime"}, "complementary", "bold"),
    ({"red", "green", "blue"}, "triadic", "vibrant"),
    ({"orange", "purple", "green"}, "triadic", "creative"),
]

COMPLEMENTARY_PAIRS = [
    ("red", "green"),
    ("blue", "orange"),
    ("yellow", "purple"),
    ("hot-pink", "mint"),
    ("coral", "teal"),
    ("navy", "gold"),
    ("burgundy", "forest"),
    ("rust", "mint"),
    ("purple", "lime"),
    ("lavender", "yellow"),
]

ANALOGOUS_SETS = [
    {"red", "orange", "pink"},
    {"blue", "purple", "teal"},
    {"green", "yellow", "lime"},
    {"orange", "yellow", "red"},
    {"purple", "pink", "blue"},
    {"teal", "green", "blue"},
]

TRIADIC_SETS = [
    {"red", "blue", "yellow"},
    {"green", "orange", "purple"},
    {"hot-pink", "teal", "gold"},
    {"navy", "coral", "mint"},
]


@dataclass(frozen=True)
class SeasonalPalette:
    season: str
    names: Tuple[str, ...]
    characteristics: Tuple[str, ...]
    hex_palette: Tuple[str, ...]


SEASONAL_PALETTES: Dict[str, SeasonalPalette] = {
    "spring": SeasonalPalette(
        "spring",
        ("coral", "peach", "yellow", "lime", "turquoise", "pink", "gold", "ivory", "light-blue", "mint"),
        ("warm", "clear", "fresh", "bright"),
        ("#FF7F50", "#FFC0CB", "#FFFF00", "#32CD32", "#40E0D0", "#FF69B4", "#FFD700", "#FFFFF0", "#87CEEB",
         "#98FB98"),
    ),
    "summer": SeasonalPalette(
        "summer",
        ("lavender", "rose", "sage", "powder-blue", "mint", "pearl", "champagne", "mauve", "soft-pink", "gray"),
        ("cool", "soft", "muted", "elegant"),
        ("#E6E6FA", "#FF1493", "#98FB98", "#B0E0E6", "#F0E68C", "#E0B0FF", "#FFC0CB", "#808080"),
    ),
    "autumn": SeasonalPalette(
        "autumn",
        ("rust", "burgundy", "forest", "gold", "brown", "orange", "olive", "bronze", "terracotta", "mustard"),
        ("warm", "rich", "earthy", "deep"),
        ("#FF4500", "#8B0000", "#228B22", "#FFD700", "#A0522D", "#FFA500", "#808000", "#CD853F", "#E2725B"),
    ),
    "winter": SeasonalPalette(
        "winter",
        ("navy", "black", "white", "crimson", "royal-blue", "emerald", "silver", "purple", "hot-pink", "charcoal"),
        ("cool", "clear", "intense", "dramatic"),
        ("#000080", "#000000", "#FFFFFF", "#DC143C", "#4169E1", "#00FF7F", "#C0C0C0", "#800080", "#FF69B4",
         "#36454F"),
    ),
}

HARMONY_TYPES = ("complementary", "analogous", "triadic", "monochromatic")

_MONTH_SEASONS = {
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "autumn", 10: "autumn", 11: "autumn",
}


def season_for_month(month: int) -> str:
    return _MONTH_SEASONS.get(month, "winter")


def canonical_name(value: str) -> str:
    name = "-".join(value.strip().lower().replace("_", " ").split())
    return name.replace("grey", "gray")


@dataclass(frozen=True)
class ResolvedColor:
    name: str
    family: str
    hex: str


def resolve_color(value: str) -> ResolvedColor:
    """Resolve a colour name or hex string to a canonical name, family and hex."""
    hex_value = normalize_hex(value)
    if hex_value:
        classified = classify_color(*hex_to_rgb(hex_value))
        return ResolvedColor(classified.name, classified.family, hex_value)

    name = canonical_name(value)
    if name in COLOR_TABLE:
        hex_value, family = COLOR_TABLE[name]
        return ResolvedColor(name, family, hex_value)

    # "dark-green" -> green; the last known word carries the hue
    for part in reversed(name.split("-")):
        if part in COLOR_TABLE:
            hex_value, family = COLOR_TABLE[part]
            return ResolvedColor(part, family, hex_value)

    logger.debug("Unknown colour name %r", value)
    return ResolvedColor(name, "unknown", "#808080")


def _result(harmony_type, confidence, reasoning, distance=0.0) -> ColorHarmonyResult:
    return ColorHarmonyResult(
        is_harmonious=confidence > 0.6,
        harmony_type=harmony_type,
        confidence=confidence,
        reasoning=reasoning,
        color_distance=round(distance, 2),
    )


def _cross(members, side_a, side_b) -> bool:
    """True when two distinct members appear, one from each side."""
    return any(
        x != y and x in members and y in members
        for x in side_a
        for y in side_b
    )


class HarmonyEngine:
    """Tests colour sets against fixed harmony tables; best confidence wins."""

    def __init__(self, today: Optional[Callable[[], datetime.date]] = None):
        self.today = today or datetime.date.today

    def current_season(self, on: Optional[datetime.date] = None) -> str:
        return season_for_month((on or self.today()).month)

    def seasonal_palette(self, season: Optional[str] = None) -> SeasonalPalette:
        return SEASONAL_PALETTES.get(season or self.current_season(), SEASONAL_PALETTES["spring"])

    def analyze_harmony(self, colors_a: Sequence[str], colors_b: Sequence[str],
                        season: Optional[str] = None) -> ColorHarmonyResult:
        """Pairwise harmony between two colour sets."""
        side_a = [resolve_color(c) for c in colors_a]
        side_b = [resolve_color(c) for c in colors_b]
        return self._evaluate(side_a, side_b, season, set_mode=False)

    def find_best_harmony(self, colors: Sequence[str], season: Optional[str] = None) -> ColorHarmonyResult:
        """Harmony of a single outfit's colours taken together."""
        if len(colors) < 2:
            return _result("single-color", 1.0, "Single color is always harmonious")
        resolved = [resolve_color(c) for c in colors]
        return self._evaluate(resolved, resolved, season, set_mode=True)

    def _evaluate(self, side_a: List[ResolvedColor], side_b: List[ResolvedColor],
                  season: Optional[str], set_mode: bool) -> ColorHarmonyResult:
        everything = side_a if set_mode else side_a + side_b
        distance = _mean_distance([c.hex for c in everything])

        names_a = {c.name for c in side_a}
        names_b = {c.name for c in side_b}
        palette = self.seasonal_palette(season)
        # neutral comes first so it keeps ties
        checks = [
            self._check_neutral(side_a, side_b, set_mode),
            self._check_modern(names_a, names_b),
            self._check_pairs(names_a, names_b),
            self._check_sets(ANALOGOUS_SETS, names_a, names_b, "analogous", 0.75,
                             "Analogous colors sit next to each other on the wheel"),
            self._check_sets(TRIADIC_SETS, names_a, names_b, "triadic", 0.7,
                             "Balanced triadic color scheme"),
            self._check_seasonal(palette, names_a, names_b, set_mode),
            self._check_family(side_a, side_b, set_mode),
        ]
        matches = [check for check in checks if check is not None]
        if not matches:
            return _result("none", 0.1, "No established harmony", distance)

        harmony_type, confidence, reasoning = max(matches, key=lambda m: m[1])
        return _result(harmony_type, confidence, reasoning, distance)

    @staticmethod
    def _check_neutral(side_a, side_b, set_mode):
        if set_mode:
            count = sum(1 for c in side_a if c.name in NEUTRAL_NAMES)
            confidence = 0.95 if count >= 2 else 0.85 if count else None
        else:
            in_a = any(c.name in NEUTRAL_NAMES for c in side_a)
            in_b = any(c.name in NEUTRAL_NAMES for c in side_b)
            confidence = 0.95 if in_a and in_b else 0.85 if in_a or in_b else None
        if confidence is None:
            return None
        return "neutral", confidence, "Neutral colors provide universal harmony"

    @staticmethod
    def _check_modern(names_a, names_b):
        for members, kind, style in MODERN_COMBINATIONS:
            if _cross(members, names_a, names_b):
                return f"modern-{kind}", 0.9, f"Modern {style} color combination"
        return None

    @staticmethod
    def _check_pairs(names_a, names_b):
        for x, y in COMPLEMENTARY_PAIRS:
            if _cross({x, y}, names_a, names_b):
                return "complementary", 0.8, "Dynamic complementary color harmony"
        return None

    @staticmethod
    def _check_sets(sets, names_a, names_b, kind, confidence, reasoning):
        for members in sets:
            if _cross(members, names_a, names_b):
                return kind, confidence, reasoning
        return None

    @staticmethod
    def _check_seasonal(palette: SeasonalPalette, names_a, names_b, set_mode):
        members = set(palette.names)
        if set_mode:
            hits = [n for n in names_a if n in members]
            ok = len(hits) >= 2 and len(hits) >= len(names_a) * 0.6
        else:
            ok = bool(names_a & members) and bool(names_b & members)
        if ok:
            return "seasonal", 0.8, f"Perfect for {palette.season} season"
        return None

    @staticmethod
    def _check_family(side_a, side_b, set_mode):
        if set_mode:
            families = [c.family for c in side_a if c.family not in ("neutral", "unknown")]
            for family in set(families):
                if families.count(family) >= 2 and families.count(family) >= len(side_a) * 0.7:
                    return "monochromatic", 0.7, f"Cohesive {family} monochromatic scheme"
            return None

        shared = {c.family for c in side_a} & {c.family for c in side_b}
        shared -= {"neutral", "unknown"}
        if shared:
            family = sorted(shared)[0]
            return "monochromatic", 0.7, f"Cohesive {family} monochromatic scheme"
        return None

    def analyze_color(self, color: str) -> ColorAnalysis:
        resolved = resolve_color(color)
        r, g, b = hex_to_rgb(resolved.hex)
        classified = classify_color(r, g, b)
        family = resolved.family if resolved.family != "unknown" else classified.family
        return ColorAnalysis(
            dominant_color=resolved.name,
            color_family=family,
            temperature=classified.temperature,
            intensity=classified.intensity,
            saturation=classified.saturation,
            hex_value=resolved.hex,
            lab=tuple(round(v, 2) for v in hex_to_lab(resolved.hex)),
        )

    def generate_harmonious_colors(self, base: str, harmony_type: str = "complementary") -> List[str]:
        """Hex colours derived from ``base`` by rotating or shifting it in LAB."""
        l, a, b = hex_to_lab(resolve_color(base).hex)

        if harmony_type == "analogous":
            labs = [(l, *_rotate(a, b, angle)) for angle in (30, 60, 90)]
        elif harmony_type == "triadic":
            labs = [(l, *_rotate(a, b, angle)) for angle in (120, 240)]
        elif harmony_type == "monochromatic":
            labs = [(max(0.0, min(100.0, l + shift)), a, b) for shift in (-10, 0, 10)]
        else:
            labs = [(l, -a, -b)]
        return [rgb_to_hex(*lab_to_rgb(*lab)) for lab in labs]


def _rotate(a, b, degrees):
    angle = math.radians(degrees)
    return (a * math.cos(angle) - b * math.sin(angle),
            a * math.sin(angle) + b * math.cos(angle))


def _mean_distance(hexes: Sequence[str]) -> float:
    labs = [hex_to_lab(h) for h in hexes]
    distances = [lab_distance(p, q) for p, q in itertools.combinations(labs, 2)]
    return sum(distances) / len(distances) if distances else 0.0


__all__ = [
    "COLOR_TABLE",
    "HARMONY_TYPES",
    "HarmonyEngine",
    "NEUTRAL_NAMES",
    "ResolvedColor",
    "SEASONAL_PALETTES",
    "SeasonalPalette",
    "resolve_color",
    "season_for_month",
]
