"""Skin, hair and eye colour detection from a face photo.

The analyzer tries three strategies in order:

1. ``landmarks`` - tight regions derived from an injected landmark detector
   (forehead and cheeks for skin, bands above the brows for hair, irises).
2. ``heuristic`` - fixed fractional regions of the frame, with a lighting
   correction applied to every sampled pixel.
3. ``fallback`` - a fixed record with ``detected_features=False``.

Only image acquisition errors (``LoadError``, ``AnalysisTimeout``) escape
:meth:`FacialFeatureAnalyzer.analyze`; everything after that degrades to a
lower-confidence answer.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from .clustering import dominant_color
from .color_classifier import is_bluish, is_eye_color, is_hair_color, is_skin_color
from .color_space import image_to_lab, rgb_to_hsl
from .config import HEURISTIC_CONFIDENCE, LANDMARK_CONFIDENCE, FeatureConfidence, VisionSettings
from .errors import AnalysisTimeout, CapabilityUnavailable, InsufficientSamples, LoadError
from .image_io import load_image, to_rgba
from .landmarks import FaceLandmarks, LandmarkDetector, derive_regions
from .lighting import analyze_lighting, normalize_samples
from .logging_config import log_event
from .models import FacialFeatureReport, FeatureColor, SkinTone
from .quality import detect_environmental_issues, face_area_ratio, robust_zone_color
from .sampler import Rect, sample_array
from .strategies import Strategy, Success, call_with_timeout, first_success

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95

SKIN_FALLBACK = SkinTone(
    color="#D4A574",
    category="medium",
    confidence=0.3,
    description="Medium skin with neutral undertones",
    lightness="medium",
    undertone="neutral",
)
HAIR_FALLBACK = FeatureColor(color="#3C2415", category="dark-brown", confidence=0.3, description="Dark Brown")
EYE_FALLBACK = FeatureColor(color="#654321", category="brown", confidence=0.3, description="Brown")

SKIN_CATEGORIES = ("very-fair", "fair", "light", "medium", "tan", "deep")
HAIR_CATEGORIES = ("black", "dark-brown", "brown", "auburn", "red", "blonde", "gray")
EYE_CATEGORIES = ("blue", "green", "gray", "hazel", "brown", "dark-brown")

HAIR_DESCRIPTIONS = {
    "black": "Black",
    "dark-brown": "Dark Brown",
    "brown": "Brown",
    "auburn": "Auburn",
    "red": "Red",
    "blonde": "Blonde",
    "gray": "Gray",
}
EYE_DESCRIPTIONS = {
    "blue": "Blue",
    "green": "Green",
    "gray": "Gray",
    "hazel": "Hazel",
    "brown": "Brown",
    "dark-brown": "Dark Brown",
}


def clamp_confidence(value):
    return float(min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, value)))


def classify_skin_lightness(lab_l):
    if lab_l >= 80:
        return "very-fair"
    if lab_l >= 70:
        return "fair"
    if lab_l >= 60:
        return "light"
    if lab_l >= 48:
        return "medium"
    if lab_l >= 36:
        return "tan"
    return "deep"


def classify_undertone(lab_a, lab_b):
    if lab_a < 3 and lab_b > 12:
        return "olive"
    if lab_a > 5 and lab_b > 15:
        return "warm"
    if lab_a < 5 and lab_b < 15:
        return "cool"
    return "neutral"


def classify_hair(r, g, b):
    brightness = (r + g + b) / 3
    h, s, _ = rgb_to_hsl(r, g, b)

    if brightness < 40:
        return "black"
    if s < 0.12 and brightness > 150:
        return "gray"
    # Wide band; light warm hair is called blonde rather than light brown.
    if brightness >= 120 and 20 <= h <= 70:
        return "blonde"
    if r > g + 10 and r > b + 10 and s > 0.45:
        return "auburn" if brightness < 110 else "red"
    if brightness < 70:
        return "dark-brown"
    return "brown"


def classify_eye(r, g, b):
    brightness = (r + g + b) / 3
    _, s, _ = rgb_to_hsl(r, g, b)

    # Wide band; anything bluish reads as blue.
    if is_bluish(r, g, b):
        return "blue"
    if g > r and g > b and g > 70:
        return "green"
    if s < 0.12 and brightness > 90:
        return "gray"
    if r > 100 and g > 80 and b < 80:
        return "hazel"
    if brightness < 65:
        return "dark-brown"
    return "brown"


def fallback_report() -> FacialFeatureReport:
    return FacialFeatureReport(
        skin_tone=SKIN_FALLBACK,
        hair_color=HAIR_FALLBACK,
        eye_color=EYE_FALLBACK,
        overall_confidence=0.3,
        detected_features=False,
        method="fallback",
    )


def _stack(arrays: Iterable[np.ndarray]) -> np.ndarray:
    arrays = [a for a in arrays if len(a)]
    return np.vstack(arrays) if arrays else np.empty((0, 3))


class FacialFeatureAnalyzer:
    """Detects skin tone, hair colour and eye colour in a face photo."""

    def __init__(self, detector: Optional[LandmarkDetector] = None,
                 settings: Optional[VisionSettings] = None,
                 rng: Optional[np.random.Generator] = None):
        self.detector = detector
        self.settings = settings or VisionSettings()
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.kmeans_seed)
        self.thresholds = self.settings.classifier

    # Entry points

    def analyze(self, source) -> FacialFeatureReport:
        """Load ``source`` (bytes, path or URL) and analyse it."""
        image = load_image(
            source,
            timeout=self.settings.image_load_timeout,
            max_dimension=self.settings.max_image_dimension,
        )
        return self.analyze_image(image)

    def analyze_image(self, image: np.ndarray) -> FacialFeatureReport:
        start = time.time()
        if image.ndim != 3 or image.shape[2] != 4:
            image = to_rgba(image)

        outcome = first_success(self.strategies(), image)
        report = outcome.value if isinstance(outcome, Success) else fallback_report()

        log_event(
            logger,
            logging.INFO,
            "facial_analysis_completed",
            method=report.method,
            overall_confidence=report.overall_confidence,
            skin=report.skin_tone.category,
            hair=report.hair_color.category,
            eyes=report.eye_color.category,
            processing_time=time.time() - start,
        )
        return report

    def analyze_batch(self, sources: List, batch_size: int = 3) -> List[FacialFeatureReport]:
        """Analyse several images; unreadable ones yield the fallback record."""
        reports = []
        for offset in range(0, len(sources), max(1, batch_size)):
            batch = sources[offset:offset + batch_size]
            for source in batch:
                try:
                    reports.append(self.analyze(source))
                except (LoadError, AnalysisTimeout) as exc:
                    logger.warning("Batch item %s failed to load: %s", len(reports), exc)
                    reports.append(fallback_report())
            logger.info("Processed batch %s/%s", len(reports), len(sources))
        return reports

    def strategies(self) -> List[Strategy]:
        return [
            Strategy("landmarks", self._analyze_with_landmarks),
            Strategy("heuristic", self._analyze_heuristic),
            Strategy("fallback", lambda image: fallback_report()),
        ]

    # Landmark path

    def detect_landmarks(self, image) -> Optional[FaceLandmarks]:
        if self.detector is None:
            return None
        try:
            return call_with_timeout(self.detector.detect, self.settings.capability_timeout, image)
        except (CapabilityUnavailable, AnalysisTimeout) as exc:
            logger.warning("Landmark detector unavailable: %s", exc)
            return None

    def _analyze_with_landmarks(self, image):
        landmarks = self.detect_landmarks(image)
        if landmarks is None or not landmarks.is_complete():
            return None

        regions = derive_regions(landmarks)
        skin_zone_points = {name: sample_array(image, region) for name, region in regions.skin.items()}
        skin_points = _stack(skin_zone_points.values())
        hair_points = _stack(sample_array(image, region) for region in regions.hair)
        eye_points = _stack(sample_array(image, region, stride=1) for region in regions.eyes)

        skin = self.skin_tone(skin_points, LANDMARK_CONFIDENCE["skin"])
        hair = self.hair_color(hair_points, LANDMARK_CONFIDENCE["hair"])
        eyes = self.eye_color(eye_points, LANDMARK_CONFIDENCE["eyes"])

        zones = {name: robust_zone_color(image_to_lab(points))
                 for name, points in skin_zone_points.items() if len(points)}
        h, w = image.shape[:2]
        issues = detect_environmental_issues(zones, face_area_ratio(landmarks.points("jaw"), h, w))

        return self._report(skin, hair, eyes, method="landmarks", quality_issues=tuple(issues))

    # Heuristic path

    def _analyze_heuristic(self, image):
        h, w = image.shape[:2]
        profile = analyze_lighting(image, self.settings.lighting)

        skin_region = Rect.fraction(w, h, 0.3, 0.3, 0.7, 0.7)
        hair_region = Rect.fraction(w, h, 0.0, 0.0, 1.0, 0.4)
        eye_regions = [
            Rect.fraction(w, h, 0.25, 0.32, 0.45, 0.38),
            Rect.fraction(w, h, 0.55, 0.32, 0.75, 0.38),
        ]

        skin_points = normalize_samples(sample_array(image, skin_region), profile)
        hair_points = normalize_samples(sample_array(image, hair_region), profile)
        eye_points = normalize_samples(_stack(sample_array(image, r) for r in eye_regions), profile)

        skin = self.skin_tone(skin_points, HEURISTIC_CONFIDENCE["skin"])
        hair = self.hair_color(hair_points, HEURISTIC_CONFIDENCE["hair"])
        eyes = self.eye_color(eye_points, HEURISTIC_CONFIDENCE["eyes"])

        return self._report(skin, hair, eyes, method="heuristic", lighting=profile)

    # Per-feature stages

    def _valid_pixels(self, points, predicate: Callable, feature: str, curve: FeatureConfidence):
        if len(points) == 0:
            raise InsufficientSamples(feature, 0, curve.min_pixels)
        rounded = np.rint(points).astype(int)
        keep = np.array([predicate(r, g, b, self.thresholds) for r, g, b in rounded], dtype=bool)
        valid = points[keep]
        if len(valid) < curve.min_pixels:
            raise InsufficientSamples(feature, len(valid), curve.min_pixels)
        return valid

    def skin_tone(self, points, curve: FeatureConfidence) -> SkinTone:
        try:
            valid = self._valid_pixels(points, is_skin_color, "skin", curve)
        except InsufficientSamples as signal:
            logger.debug("Skin fallback: %s", signal)
            return _floored(SKIN_FALLBACK, curve, signal.count)

        cluster = dominant_color(valid, k=3, space="lab", rng=self.rng)
        lab_l, lab_a, lab_b = cluster.lab
        lightness = classify_skin_lightness(lab_l)
        undertone = classify_undertone(lab_a, lab_b)
        return SkinTone(
            color=cluster.hex,
            category=lightness,
            confidence=clamp_confidence(curve.score(len(valid))),
            description=f"{lightness.replace('-', ' ').title()} skin with {undertone} undertones",
            pixel_count=len(valid),
            lightness=lightness,
            undertone=undertone,
        )

    def hair_color(self, points, curve: FeatureConfidence) -> FeatureColor:
        try:
            valid = self._valid_pixels(points, is_hair_color, "hair", curve)
        except InsufficientSamples as signal:
            logger.debug("Hair fallback: %s", signal)
            return _floored(HAIR_FALLBACK, curve, signal.count)

        cluster = dominant_color(valid, k=3, rng=self.rng)
        category = classify_hair(*cluster.rgb)
        description = HAIR_DESCRIPTIONS[category]
        if category == "blonde" and sum(cluster.rgb) / 3 > 180:
            description = "Light Blonde"
        return FeatureColor(
            color=cluster.hex,
            category=category,
            confidence=clamp_confidence(curve.score(len(valid))),
            description=description,
            pixel_count=len(valid),
        )

    def eye_color(self, points, curve: FeatureConfidence) -> FeatureColor:
        try:
            valid = self._valid_pixels(points, is_eye_color, "eyes", curve)
        except InsufficientSamples as signal:
            logger.debug("Eye fallback: %s", signal)
            return _floored(EYE_FALLBACK, curve, signal.count)

        cluster = dominant_color(valid, k=3, rng=self.rng)
        category = classify_eye(*cluster.rgb)
        return FeatureColor(
            color=cluster.hex,
            category=category,
            confidence=clamp_confidence(curve.score(len(valid))),
            description=EYE_DESCRIPTIONS[category],
            pixel_count=len(valid),
        )

    def _report(self, skin, hair, eyes, method, lighting=None, quality_issues=()):
        overall = float(np.mean([skin.confidence, hair.confidence, eyes.confidence]))
        return FacialFeatureReport(
            skin_tone=skin,
            hair_color=hair,
            eye_color=eyes,
            overall_confidence=round(overall, 3),
            detected_features=True,
            method=method,
            lighting=lighting,
            quality_issues=quality_issues,
        )


def _floored(default, curve: FeatureConfidence, count: int):
    """Default colour for a feature that lacked pixels, at the curve's floor."""
    fields: Dict = default.to_dict()
    fields.update(confidence=clamp_confidence(curve.floor), pixel_count=count)
    return type(default)(**fields)


__all__ = [
    "EYE_CATEGORIES",
    "FacialFeatureAnalyzer",
    "HAIR_CATEGORIES",
    "SKIN_CATEGORIES",
    "classify_eye",
    "classify_hair",
    "classify_skin_lightness",
    "classify_undertone",
    "clamp_confidence",
    "fallback_report",
]
