"""Clothing category, colours and style from an image and/or its filename.

Up to four signals vote on the category: filename keywords, image shape and
texture, an optional external vision service and a caller-supplied hint.
Votes are weighted and summed per category; the highest total wins.
"""

from __future__ import annotations

import datetime
import logging
import re
import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

import cv2
import numpy as np

from .color_classifier import BACKGROUND_NAMES, NAME_FAMILIES, color_name
from .config import VisionSettings
from .image_io import downscale, to_rgba
from .logging_config import log_event
from .models import CLOTHING_CATEGORIES, NOT_CLOTHING, ClothingAnalysisResult
from .strategies import Strategy, Success, call_with_timeout, first_success
from .vision_service import VisionService

logger = logging.getLogger(__name__)

# (primary, secondary, brands)
CATEGORY_KEYWORDS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]] = {
    "tops": (
        ("shirt", "top", "blouse", "sweater", "hoodie", "tshirt", "tank", "pullover", "cardigan",
         "polo", "henley", "tee", "sweatshirt", "jersey", "camisole", "turtleneck"),
        ("crew", "vneck", "scoop", "collar", "sleeve", "crop"),
        ("uniqlo", "zara"),
    ),
    "bottoms": (
        ("pants", "pant", "jeans", "jean", "trousers", "trouser", "shorts", "leggings", "skirt",
         "slacks", "chinos", "joggers", "sweatpants", "culottes"),
        ("denim", "cargo", "bootcut", "skinny", "khaki", "capri", "palazzo"),
        ("levis", "gap"),
    ),
    "dresses": (
        ("dress", "gown", "frock", "sundress", "kaftan", "tunic"),
        ("maxi", "midi", "mini", "cocktail", "bodycon", "sheath", "aline"),
        (),
    ),
    "outerwear": (
        ("jacket", "coat", "blazer", "parka", "windbreaker", "bomber", "trench", "peacoat",
         "overcoat", "puffer", "anorak", "raincoat", "poncho"),
        ("zipup", "hooded", "lined", "insulated", "waterproof"),
        ("northface", "patagonia", "columbia"),
    ),
    "shoes": (
        ("shoe", "shoes", "boot", "boots", "sneaker", "sneakers", "sandal", "sandals", "heel",
         "heels", "pump", "pumps", "loafer", "loafers", "oxford", "oxfords", "trainer", "trainers",
         "slipper", "clog", "moccasin"),
        ("athletic", "running", "walking", "hiking", "hightop", "lowtop", "platform", "wedge", "stiletto"),
        ("vans", "converse", "jordans", "nike", "adidas"),
    ),
    "accessories": (
        ("bag", "purse", "backpack", "hat", "cap", "scarf", "belt", "watch", "jewelry", "necklace",
         "bracelet", "earrings", "ring", "sunglasses", "wallet", "clutch", "tote", "beanie", "gloves"),
        ("canvas", "designer", "statement"),
        ("coach", "gucci", "prada"),
    ),
}

KEYWORD_POINTS = (0.6, 0.3, 0.2)
EXACT_MATCH_BONUS = 0.2
MIN_FILENAME_SCORE = 0.3

ALL_KEYWORDS = frozenset(
    keyword for tiers in CATEGORY_KEYWORDS.values() for keywords in tiers for keyword in keywords
)

NON_CLOTHING_KEYWORDS = (
    "food", "drink", "kitchen", "recipe", "car", "vehicle", "motorcycle", "bike", "animal",
    "dog", "cat", "pet", "bird", "building", "house", "architecture", "room", "furniture",
    "nature", "landscape", "tree", "flower", "plant", "document", "paper", "book", "magazine",
    "computer", "phone", "screen", "medical", "hospital", "medicine",
)

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif", "bmp", "heic", "tif", "tiff"}

DEFAULT_SUBCATEGORY = {
    "tops": "shirt",
    "bottoms": "pants",
    "dresses": "dress",
    "outerwear": "jacket",
    "shoes": "sneakers",
    "accessories": "accessory",
}

# Aspect bucket -> category points
ASPECT_POINTS = {
    "very-wide": {"shoes": 3, "accessories": 1},
    "wide": {"shoes": 2, "accessories": 1, "tops": 1, "outerwear": 1},
    "squarish": {"tops": 2, "accessories": 2, "outerwear": 1},
    "tall": {"tops": 1, "bottoms": 2, "outerwear": 1, "dresses": 1},
    "very-tall": {"dresses": 3, "bottoms": 2},
}
SIZE_POINTS = {
    "small": {"accessories": 1, "shoes": 1},
    "medium": {"tops": 1},
    "large": {"outerwear": 1, "dresses": 1},
}
SHAPE_PENALTIES = {
    "very-tall": {"shoes": -3},
    "very-wide": {"dresses": -2, "bottoms": -2},
}

STYLE_KEYWORDS = (
    ("formal", ("formal", "suit", "office", "business")),
    ("sporty", ("sport", "gym", "athletic", "running", "training")),
    ("casual", ("casual", "everyday", "basic")),
    ("elegant", ("elegant", "evening", "cocktail", "silk", "satin")),
    ("bohemian", ("bohemian", "boho", "hippie", "floral")),
    ("minimalist", ("minimalist", "minimal", "simple", "clean")),
    ("streetwear", ("street", "urban", "oversized", "graphic")),
    ("vintage", ("vintage", "retro", "classic")),
)
CATEGORY_STYLE = {"dresses": "elegant", "outerwear": "formal", "shoes": "sporty"}

MATERIAL_KEYWORDS = (
    "denim", "leather", "cotton", "wool", "silk", "linen", "polyester", "suede", "knit",
    "canvas", "cashmere", "satin", "velvet", "fleece", "nylon",
)
CATEGORY_MATERIAL = {
    "tops": "cotton",
    "bottoms": "cotton",
    "dresses": "cotton",
    "outerwear": "polyester",
    "shoes": "leather",
    "accessories": "leather",
}

CATEGORY_TAGS = {
    "tops": ("versatile", "layerable"),
    "bottoms": ("essential", "wardrobe-staple"),
    "dresses": ("statement-piece",),
    "outerwear": ("layering", "weather-protection"),
    "shoes": ("footwear", "comfort"),
    "accessories": ("accent", "finishing-touch"),
}

LIGHT_COLORS = {"white", "cream", "light-gray", "pink", "coral", "yellow"}
DARK_COLORS = {"black", "navy", "charcoal", "purple"}

_MONTH_SEASONS = {
    12: ("winter", "spring"), 1: ("winter", "spring"), 2: ("winter", "spring"),
    3: ("spring", "summer"), 4: ("spring", "summer"), 5: ("spring", "summer"),
    6: ("summer", "autumn"), 7: ("summer", "autumn"), 8: ("summer", "autumn"),
    9: ("autumn", "winter"), 10: ("autumn", "winter"), 11: ("autumn", "winter"),
}

COLOR_MAX_DIMENSION = 100
EDGE_BAND = 0.1


@dataclass(frozen=True)
class SignalVote:
    method: str
    category: str
    confidence: float
    reasoning: str


@dataclass(frozen=True)
class FilenameAnalysis:
    tokens: Tuple[str, ...]
    scores: Dict[str, float]
    keywords: Dict[str, Tuple[str, ...]]
    non_clothing: bool


@dataclass(frozen=True)
class TextureFeatures:
    edge_density: float
    horizontal_ratio: float
    color_complexity: float
    symmetry: float
    compactness: float


def tokenize_filename(filename: str) -> List[str]:
    """Lowercase alphanumeric tokens without extensions, digits or short fragments."""
    tokens = re.split(r"[^a-z0-9]+", filename.lower())
    return [
        t for t in tokens
        if len(t) >= 3 and not t.isdigit() and t not in IMAGE_EXTENSIONS
    ]


def _keyword_hit(token: str, keyword: str, partial: bool = True) -> Optional[float]:
    if token == keyword:
        return EXACT_MATCH_BONUS
    if partial and len(keyword) >= 3 and keyword in token:
        return 0.0
    return None


def analyze_filename(filename: str) -> FilenameAnalysis:
    tokens = tokenize_filename(filename)
    scores: Dict[str, float] = {}
    matched: Dict[str, Tuple[str, ...]] = {}

    for category, tiers in CATEGORY_KEYWORDS.items():
        total = 0.0
        hits = []
        for token in tokens:
            # a token that is itself a keyword somewhere only matches exactly
            partial = token not in ALL_KEYWORDS
            best = 0.0
            best_keyword = None
            for points, keywords in zip(KEYWORD_POINTS, tiers):
                for keyword in keywords:
                    bonus = _keyword_hit(token, keyword, partial)
                    if bonus is not None and points + bonus > best:
                        best, best_keyword = points + bonus, keyword
            if best_keyword:
                total += best
                hits.append(best_keyword)
        if hits:
            scores[category] = min(1.0, total)
            matched[category] = tuple(hits)

    non_clothing = not scores and any(
        keyword in token for token in tokens for keyword in NON_CLOTHING_KEYWORDS
    )
    return FilenameAnalysis(tuple(tokens), scores, matched, non_clothing)


def aspect_bucket(width: int, height: int) -> str:
    ratio = width / float(max(height, 1))
    if ratio > 2.0:
        return "very-wide"
    if ratio > 1.3:
        return "wide"
    if ratio >= 0.77:
        return "squarish"
    if ratio >= 0.5:
        return "tall"
    return "very-tall"


def size_bucket(width: int, height: int) -> str:
    pixels = width * height
    if pixels < 250_000:
        return "small"
    if pixels < 1_000_000:
        return "medium"
    return "large"


def texture_features(image: np.ndarray) -> TextureFeatures:
    """Edge, colour-complexity, symmetry and compactness measures on a small grayscale copy."""
    small = downscale(image, 200)
    rgb = np.ascontiguousarray(small[:, :, :3])
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)
    magnitude = np.hypot(gx, gy)
    edge_density = float((magnitude > 100).mean())

    energy_x, energy_y = float(np.abs(gx).sum()), float(np.abs(gy).sum())
    # > 1 means horizontal edges dominate
    horizontal_ratio = energy_y / energy_x if energy_x > 1e-6 else (1.0 if energy_y <= 1e-6 else 10.0)

    quantized = (rgb // 32).reshape(-1, 3)
    distinct = len(np.unique(quantized, axis=0))
    color_complexity = min(1.0, distinct / 64.0)

    mirrored = gray[:, ::-1].astype(np.float64)
    symmetry = 1.0 - float(np.abs(gray.astype(np.float64) - mirrored).mean()) / 255.0

    corners = np.array([rgb[0, 0], rgb[0, -1], rgb[-1, 0], rgb[-1, -1]], dtype=np.float64)
    background = np.median(corners, axis=0)
    distance = np.linalg.norm(rgb.astype(np.float64) - background, axis=2)
    compactness = float((distance > 30).mean())

    return TextureFeatures(edge_density, horizontal_ratio, color_complexity, symmetry, compactness)


def texture_points(features: TextureFeatures) -> Dict[str, int]:
    points: Counter = Counter()
    if features.symmetry > 0.85 and features.compactness > 0.5:
        points["tops"] += 1
        points["dresses"] += 1
    if features.horizontal_ratio < 0.75:
        points["bottoms"] += 1
        points["dresses"] += 1
    elif features.horizontal_ratio > 1.3:
        points["shoes"] += 1
    if features.edge_density > 0.25:
        points["accessories"] += 1
        points["outerwear"] += 1
    if features.color_complexity > 0.5:
        points["accessories"] += 1
    if features.compactness < 0.3:
        points["accessories"] += 1
        points["shoes"] += 1
    return dict(points)


def filter_background_colors(names: Sequence[str]) -> List[str]:
    """Drop background-like names; keep the first one if nothing else is left."""
    kept = [n for n in names if n not in BACKGROUND_NAMES]
    if kept:
        return kept
    if names:
        return [names[0]]
    return ["neutral"]


def detect_background_colors(edge_counts: Counter, center_counts: Counter) -> Set[str]:
    """Names much more frequent in the edge band than in the centre."""
    backgrounds: Set[str] = set()
    edge_total = sum(edge_counts.values())
    center_total = sum(center_counts.values())
    if not edge_total:
        return backgrounds

    for name, count in edge_counts.items():
        edge_ratio = count / edge_total
        center_ratio = center_counts.get(name, 0) / center_total if center_total else 0.0
        if edge_ratio > 0.15 and edge_ratio > center_ratio * 2:
            backgrounds.add(name)
        if edge_ratio > 0.3 and name in BACKGROUND_NAMES + ("black",):
            backgrounds.add(name)
    return backgrounds


def _name_counts(pixels: np.ndarray) -> Counter:
    counts: Counter = Counter()
    if len(pixels) == 0:
        return counts
    colors, freq = np.unique(pixels.astype(np.int64), axis=0, return_counts=True)
    for (r, g, b), n in zip(colors, freq):
        counts[color_name(r, g, b)] += int(n)
    return counts


def extract_colors(image: np.ndarray, limit: int = 3) -> List[str]:
    small = downscale(image, COLOR_MAX_DIMENSION)
    h, w = small.shape[:2]
    opaque = small[:, :, 3] >= 128 if small.shape[2] == 4 else np.ones((h, w), dtype=bool)

    band = max(1, int(min(h, w) * EDGE_BAND))
    edge = np.ones((h, w), dtype=bool)
    edge[band:h - band, band:w - band] = False

    rgb = small[:, :, :3]
    edge_counts = _name_counts(rgb[edge & opaque])
    center_counts = _name_counts(rgb[~edge & opaque])
    backgrounds = detect_background_colors(edge_counts, center_counts)

    totals = edge_counts + center_counts
    ranked = [name for name, _ in totals.most_common()]
    clothing = [name for name in ranked if name not in backgrounds] or ranked[:1]
    return filter_background_colors(clothing[:limit])


def patterns_of(image: np.ndarray) -> List[str]:
    """Pattern labels from adjacent-pixel difference statistics."""
    small = downscale(image, COLOR_MAX_DIMENSION)
    gray = cv2.cvtColor(np.ascontiguousarray(small[:, :, :3]), cv2.COLOR_RGB2GRAY).astype(np.float64)
    diffs = np.concatenate([
        np.abs(np.diff(gray, axis=1)).ravel(),
        np.abs(np.diff(gray, axis=0)).ravel(),
    ])
    if diffs.size == 0:
        return ["solid"]

    average = float(diffs.mean())
    edge_ratio = float((diffs > 30).mean())
    patterns = []
    if average < 20:
        patterns.append("solid")
    if edge_ratio > 0.3:
        patterns.append("patterned")
    if average > 40:
        patterns.append("textured")
    return patterns or ["mixed"]


def style_of(text: str, category: str, colors: Sequence[str]) -> str:
    for style, keywords in STYLE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return style
    if list(colors) == ["black"]:
        return "minimalist"
    if "pink" in colors or "purple" in colors:
        return "elegant"
    return CATEGORY_STYLE.get(category, "casual")


def materials_of(text: str, category: str) -> List[str]:
    found = [m for m in MATERIAL_KEYWORDS if m in text]
    return found or [CATEGORY_MATERIAL.get(category, "cotton")]


def occasions_of(category: str, style: str, colors: Sequence[str]) -> List[str]:
    occasions: List[str] = []

    def add(*names):
        for name in names:
            if name not in occasions:
                occasions.append(name)

    if style == "formal":
        add("work", "formal")
    elif style == "sporty":
        add("sport", "casual")
    elif style == "elegant":
        add("party", "date", "formal")
    else:
        add("casual")

    if category == "outerwear":
        add("travel")
    elif category == "dresses":
        add("party", "date")

    if {"black", "navy", "charcoal"} & set(colors):
        add("work", "formal")
    return occasions[:3]


def seasons_of(category: str, colors: Sequence[str], style: str, month: int) -> List[str]:
    seasons: List[str] = []

    def add(*names):
        for name in names:
            if name not in seasons:
                seasons.append(name)

    if LIGHT_COLORS & set(colors):
        add("spring", "summer")
    if DARK_COLORS & set(colors):
        add("autumn", "winter")
    if category == "outerwear":
        add("autumn", "winter")
    elif category == "shoes" and style == "sporty":
        add("spring", "summer")

    if len(seasons) < 2:
        add(*_MONTH_SEASONS.get(month, ("spring", "autumn")))
    return seasons


def tags_of(category: str, subcategory: str, colors: Sequence[str], style: str) -> List[str]:
    tags = [category, subcategory, *CATEGORY_TAGS.get(category, ())]
    if style != "casual":
        tags.append(style)
    if len(colors) == 1 and colors[0] != "neutral":
        tags.append(f"{colors[0]}-piece")
    return list(dict.fromkeys(tags))


class ClothingCategorizer:
    """Weighted vote over filename, image, vision-service and hint signals."""

    def __init__(self, vision: Optional[VisionService] = None,
                 settings: Optional[VisionSettings] = None,
                 today: Optional[Callable[[], datetime.date]] = None):
        self.vision = vision
        self.settings = settings or VisionSettings()
        self.weights = self.settings.weights
        self.today = today or datetime.date.today

    def categorize(self, image: Optional[np.ndarray] = None, filename: Optional[str] = None,
                   context_hint: Optional[str] = None,
                   source_size: Optional[Tuple[int, int]] = None) -> ClothingAnalysisResult:
        """Categorize an item. ``source_size`` is the (width, height) before any downscaling."""
        start = time.time()
        if image is not None and (image.ndim != 3 or image.shape[2] != 4):
            image = to_rgba(image)

        name_info = analyze_filename(filename) if filename else None
        if name_info is not None and name_info.non_clothing:
            result = self._not_clothing(image, filename)
        else:
            outcome = first_success(self.strategies(), image, filename, context_hint, name_info, source_size)
            result = outcome.value if isinstance(outcome, Success) else self._default(image)

        log_event(
            logger,
            logging.INFO,
            "clothing_categorized",
            category=result.category,
            confidence=result.confidence,
            methods=",".join(result.detection_methods),
            processing_time=time.time() - start,
        )
        return result

    def strategies(self) -> List[Strategy]:
        return [
            Strategy("vote", self._vote),
            Strategy("default", lambda image, *rest: self._default(image)),
        ]

    # Signals

    def filename_vote(self, info: FilenameAnalysis) -> Optional[SignalVote]:
        if not info.scores:
            return None
        category = max(CLOTHING_CATEGORIES, key=lambda c: info.scores.get(c, 0.0))
        score = info.scores[category]
        if score < MIN_FILENAME_SCORE:
            return None
        keywords = ", ".join(info.keywords[category])
        return SignalVote(
            "filename",
            category,
            min(0.95, 0.4 + 0.4 * score),
            f"Filename keywords: {keywords}",
        )

    def image_vote(self, image: np.ndarray, source_size: Optional[Tuple[int, int]] = None) -> Optional[SignalVote]:
        h, w = image.shape[:2]
        if source_size is not None:
            w, h = source_size
        aspect, size = aspect_bucket(w, h), size_bucket(w, h)

        points: Counter = Counter()
        for table in (ASPECT_POINTS.get(aspect, {}), SIZE_POINTS.get(size, {}),
                      SHAPE_PENALTIES.get(aspect, {}), texture_points(texture_features(image))):
            points.update(table)

        category = max(CLOTHING_CATEGORIES, key=lambda c: points.get(c, 0))
        best = points.get(category, 0)
        if best <= 0:
            return None
        return SignalVote(
            "image-properties",
            category,
            min(0.8, 0.3 + 0.1 * best),
            f"Shape {aspect}/{size} favours {category}",
        )

    def vision_vote(self, image: np.ndarray, filename: Optional[str]) -> Optional[SignalVote]:
        if self.vision is None:
            return None
        outcome = Strategy("ai-analysis", lambda: call_with_timeout(
            self.vision.analyze, self.settings.capability_timeout, image, filename
        )).attempt()
        if not isinstance(outcome, Success):
            return None
        result = outcome.value
        if not result.is_clothing or result.category not in CLOTHING_CATEGORIES:
            return None
        return SignalVote(
            "ai-analysis",
            result.category,
            result.confidence,
            f"Vision service detected {result.category} ({result.confidence:.0%})",
        )

    @staticmethod
    def context_vote(hint: str) -> Optional[SignalVote]:
        text = hint.lower().strip()
        if text in CLOTHING_CATEGORIES:
            return SignalVote("context", text, 0.7, f"Context hint names {text}")
        for category, (primary, secondary, _) in CATEGORY_KEYWORDS.items():
            for keyword in primary + secondary:
                if keyword in text:
                    return SignalVote("context", category, 0.7, f'Context suggests "{keyword}"')
        return None

    # Combination

    def collect_votes(self, image, filename, context_hint, name_info=None,
                      source_size=None) -> List[SignalVote]:
        votes: List[Optional[SignalVote]] = []
        if filename:
            votes.append(self.filename_vote(name_info or analyze_filename(filename)))
        if image is not None:
            votes.append(self.image_vote(image, source_size))
            votes.append(self.vision_vote(image, filename))
        if context_hint:
            votes.append(self.context_vote(context_hint))
        return [v for v in votes if v is not None]

    def _vote(self, image, filename, context_hint, name_info=None,
              source_size=None) -> Optional[ClothingAnalysisResult]:
        votes = self.collect_votes(image, filename, context_hint, name_info, source_size)
        if not votes:
            return None

        totals: Dict[str, float] = {}
        for vote in votes:
            totals[vote.category] = totals.get(vote.category, 0.0) + vote.confidence * self.weights.for_method(vote.method)

        category = max(totals, key=totals.get)
        confidence = min(self.weights.max_confidence,
                         max(self.weights.min_confidence, totals[category] * self.weights.scale))
        winners = [v for v in votes if v.category == category]
        return self._build(
            image,
            filename or "",
            context_hint or "",
            category,
            round(confidence, 3),
            "; ".join(v.reasoning for v in winners),
            [v.method for v in winners],
            name_info,
        )

    def _build(self, image, filename, context_hint, category, confidence, reasoning, methods,
               name_info=None) -> ClothingAnalysisResult:
        text = f"{filename} {context_hint}".lower()
        colors = self._colors(image, filename)
        subcategory = self._subcategory(category, name_info)
        style = style_of(text, category, colors)
        return ClothingAnalysisResult(
            is_clothing=True,
            category=category,
            subcategory=subcategory,
            style=style,
            colors=colors,
            occasions=occasions_of(category, style, colors),
            seasons=seasons_of(category, colors, style, self.today().month),
            tags=tags_of(category, subcategory, colors, style),
            confidence=confidence,
            reasoning=reasoning,
            patterns=patterns_of(image) if image is not None else [],
            materials=materials_of(text, category),
            detection_methods=methods,
        )

    @staticmethod
    def _subcategory(category, name_info: Optional[FilenameAnalysis]) -> str:
        if name_info and category in name_info.keywords:
            primary = CATEGORY_KEYWORDS[category][0]
            for keyword in name_info.keywords[category]:
                if keyword in primary:
                    return keyword
        return DEFAULT_SUBCATEGORY.get(category, "item")

    @staticmethod
    def _colors(image, filename) -> List[str]:
        if image is not None:
            try:
                return extract_colors(image)
            except (cv2.error, ValueError) as exc:
                logger.warning("Colour extraction failed: %s", exc, exc_info=True)
        named = [t for t in tokenize_filename(filename or "") if t in NAME_FAMILIES]
        return filter_background_colors(named) if named else ["neutral"]

    def _default(self, image) -> ClothingAnalysisResult:
        month = self.today().month
        return ClothingAnalysisResult(
            is_clothing=True,
            category="tops",
            subcategory="t-shirt",
            style="casual",
            colors=["blue"],
            occasions=["casual"],
            seasons=seasons_of("tops", ["blue"], "casual", month),
            tags=tags_of("tops", "t-shirt", ["blue"], "casual"),
            confidence=0.3,
            reasoning="Fallback analysis - manual categorization recommended",
            patterns=[],
            materials=[CATEGORY_MATERIAL["tops"]],
            detection_methods=["fallback"],
        )

    def _not_clothing(self, image, filename) -> ClothingAnalysisResult:
        colors = self._colors(image, filename)
        return ClothingAnalysisResult(
            is_clothing=False,
            category=NOT_CLOTHING,
            subcategory="item",
            style="casual",
            colors=colors,
            occasions=[],
            seasons=[],
            tags=[NOT_CLOTHING],
            confidence=0.8,
            reasoning="Filename suggests non-clothing item",
            detection_methods=["filename"],
        )


__all__ = [
    "CATEGORY_KEYWORDS",
    "ClothingCategorizer",
    "SignalVote",
    "TextureFeatures",
    "analyze_filename",
    "aspect_bucket",
    "extract_colors",
    "filter_background_colors",
    "size_bucket",
    "texture_features",
    "tokenize_filename",
]
