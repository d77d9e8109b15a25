"""Configuration for the vision service.

Runtime settings come from the environment; the numeric thresholds used by the
pipelines are plain frozen data classes so a single implementation can be
tuned without copying logic.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

DEFAULT_LANDMARK_MODEL = "face_landmarker.task"
LANDMARK_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


@dataclass(frozen=True)
class ClassifierThresholds:
    """Breakpoints for the skin, hair and eye pixel predicates."""

    skin_max_hue: float = 50.0
    skin_min_hue_wrap: float = 340.0
    skin_min_saturation: float = 0.08
    skin_max_saturation: float = 0.8
    skin_channel_slack: int = 10
    skin_min_brightness: float = 30.0
    skin_max_brightness: float = 245.0

    hair_max_brightness: float = 235.0
    hair_max_chroma: int = 110
    # Wide band: blonde hair is over-detected rather than missed.
    blonde_min_hue: float = 20.0
    blonde_max_hue: float = 70.0
    blonde_min_brightness: float = 110.0

    eye_min_brightness: float = 25.0
    eye_max_brightness: float = 210.0
    # Wide band: anything bluish is admitted as an iris pixel.
    blue_eye_min_blue: int = 60
    blue_eye_slack: int = 10


@dataclass(frozen=True)
class FeatureConfidence:
    """Confidence curve ``min(cap, base + valid / divisor)`` for one feature."""

    base: float
    divisor: float
    cap: float
    min_pixels: int
    floor: float

    def score(self, valid_pixels: int) -> float:
        if valid_pixels < self.min_pixels:
            return self.floor
        return min(self.cap, self.base + valid_pixels / self.divisor)


# Heuristic caps sit below landmark bases so landmark results always rank higher.
LANDMARK_CONFIDENCE: Dict[str, FeatureConfidence] = {
    "skin": FeatureConfidence(base=0.6, divisor=400, cap=0.95, min_pixels=50, floor=0.3),
    "hair": FeatureConfidence(base=0.55, divisor=300, cap=0.9, min_pixels=30, floor=0.3),
    "eyes": FeatureConfidence(base=0.5, divisor=60, cap=0.85, min_pixels=8, floor=0.2),
}

HEURISTIC_CONFIDENCE: Dict[str, FeatureConfidence] = {
    "skin": FeatureConfidence(base=0.3, divisor=2000, cap=0.55, min_pixels=50, floor=0.2),
    "hair": FeatureConfidence(base=0.25, divisor=2000, cap=0.5, min_pixels=30, floor=0.15),
    "eyes": FeatureConfidence(base=0.2, divisor=500, cap=0.45, min_pixels=8, floor=0.1),
}


@dataclass(frozen=True)
class LightingThresholds:
    low_light: float = 80.0
    overexposed: float = 200.0
    low_contrast: float = 50.0
    desaturated: float = 0.3
    # Share of warm (or cool) pixels needed before white balance kicks in.
    color_bias: float = 0.65


@dataclass(frozen=True)
class VoteWeights:
    """Weights for the clothing categorizer's signals."""

    filename: float = 0.4
    ai_analysis: float = 0.35
    image_properties: float = 0.15
    context: float = 0.1
    scale: float = 2.5
    min_confidence: float = 0.3
    max_confidence: float = 0.95

    def for_method(self, method: str) -> float:
        return {
            "filename": self.filename,
            "ai-analysis": self.ai_analysis,
            "image-properties": self.image_properties,
            "context": self.context,
        }.get(method, 0.0)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class VisionSettings:
    """Settings shared by the analyzers and the HTTP service."""

    image_load_timeout: float = 10.0
    capability_timeout: float = 8.0
    max_image_dimension: int = 500
    vision_endpoint: Optional[str] = None
    vision_api_key: Optional[str] = None
    landmark_model_path: str = DEFAULT_LANDMARK_MODEL
    enable_landmarks: bool = True
    kmeans_seed: Optional[int] = None
    monitor_cleanup_interval: float = 3600.0
    log_level: str = "INFO"
    log_file: Optional[str] = None
    classifier: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    lighting: LightingThresholds = field(default_factory=LightingThresholds)
    weights: VoteWeights = field(default_factory=VoteWeights)

    @classmethod
    def from_env(cls) -> "VisionSettings":
        """Build settings from ``VISION_*`` and ``LOG_*`` environment variables."""

        seed = os.getenv("VISION_KMEANS_SEED")
        return cls(
            image_load_timeout=float(os.getenv("VISION_IMAGE_TIMEOUT", "10")),
            capability_timeout=float(os.getenv("VISION_CAPABILITY_TIMEOUT", "8")),
            max_image_dimension=int(os.getenv("VISION_MAX_IMAGE_DIMENSION", "500")),
            vision_endpoint=os.getenv("VISION_API_ENDPOINT") or None,
            vision_api_key=os.getenv("VISION_API_KEY") or None,
            landmark_model_path=os.getenv("VISION_LANDMARK_MODEL", DEFAULT_LANDMARK_MODEL),
            enable_landmarks=_env_bool("VISION_ENABLE_LANDMARKS", True),
            kmeans_seed=int(seed) if seed else None,
            monitor_cleanup_interval=float(os.getenv("VISION_MONITOR_CLEANUP_INTERVAL", "3600")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )


__all__ = [
    "ClassifierThresholds",
    "FeatureConfidence",
    "HEURISTIC_CONFIDENCE",
    "LANDMARK_CONFIDENCE",
    "LightingThresholds",
    "VisionSettings",
    "VoteWeights",
]
