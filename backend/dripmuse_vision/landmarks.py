"""Face landmark capability and landmark-relative sampling regions."""

from __future__ import annotations

import logging
import os
import urllib.request
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from .config import DEFAULT_LANDMARK_MODEL, LANDMARK_MODEL_URL
from .errors import CapabilityUnavailable
from .sampler import Polygon, Rect, Region

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# FaceLandmarker mesh indices for each named group, in polygon order.
MEDIAPIPE_GROUPS = {
    "jaw": [234, 93, 132, 58, 172, 136, 150, 149, 176, 148, 152,
            377, 400, 378, 379, 365, 397, 288, 361, 323, 454],
    "left_eyebrow": [70, 63, 105, 66, 107],
    "right_eyebrow": [336, 296, 334, 293, 300],
    "left_eye": [33, 160, 158, 133, 153, 144],
    "right_eye": [362, 385, 387, 263, 373, 380],
    "nose": [168, 6, 197, 195, 5, 4, 1, 19, 94, 2],
    "mouth": [61, 40, 37, 0, 267, 270, 291, 321, 314, 17, 84, 91],
    "left_iris": [469, 470, 471, 472],
    "right_iris": [474, 475, 476, 477],
}

REQUIRED_GROUPS = ("jaw", "left_eyebrow", "right_eyebrow", "left_eye", "right_eye", "nose")


@dataclass(frozen=True)
class FaceLandmarks:
    """Named groups of 2D points in pixel coordinates."""

    groups: Dict[str, Tuple[Point, ...]]

    @classmethod
    def from_points(cls, groups: Dict[str, Sequence[Sequence[float]]]) -> "FaceLandmarks":
        return cls({name: tuple((float(x), float(y)) for x, y in pts) for name, pts in groups.items()})

    def has(self, name: str) -> bool:
        return len(self.groups.get(name, ())) > 0

    def points(self, *names: str) -> np.ndarray:
        pts = [p for name in names for p in self.groups.get(name, ())]
        return np.array(pts, dtype=np.float64).reshape(-1, 2)

    def is_complete(self) -> bool:
        return all(self.has(name) for name in REQUIRED_GROUPS)


class LandmarkDetector(Protocol):
    def detect(self, image: np.ndarray) -> Optional[FaceLandmarks]:
        ...


class MediaPipeLandmarkDetector:
    """FaceLandmarker-backed detector; the model file is downloaded on first use."""

    def __init__(self, model_path: str = DEFAULT_LANDMARK_MODEL, model_url: str = LANDMARK_MODEL_URL):
        try:
            import mediapipe as mp
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as exc:
            raise CapabilityUnavailable("mediapipe is not installed") from exc

        try:
            if not os.path.exists(model_path):
                logger.info("Downloading face landmark model to %s", model_path)
                urllib.request.urlretrieve(model_url, model_path)

            base_options = python.BaseOptions(model_asset_path=model_path)
            options = vision.FaceLandmarkerOptions(
                base_options=base_options,
                output_face_blendshapes=False,
                output_facial_transformation_matrixes=False,
                num_faces=1,
            )
            self.face_landmarker = vision.FaceLandmarker.create_from_options(options)
        except Exception as exc:
            raise CapabilityUnavailable(f"Face landmark model failed to load: {exc}") from exc
        self._mp = mp

    def detect(self, image):
        rgb = np.ascontiguousarray(image[:, :, :3])
        h, w = rgb.shape[:2]
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb)
        result = self.face_landmarker.detect(mp_image)
        if not result.face_landmarks:
            return None

        landmarks = result.face_landmarks[0]
        groups = {}
        for name, indices in MEDIAPIPE_GROUPS.items():
            pts = [(landmarks[i].x * w, landmarks[i].y * h) for i in indices if i < len(landmarks)]
            if pts:
                groups[name] = pts
        return FaceLandmarks.from_points(groups)


@dataclass(frozen=True)
class FaceRegions:
    """Per-feature sampling regions derived from landmarks."""

    skin: Dict[str, Polygon]
    hair: List[Region] = field(default_factory=list)
    eyes: List[Polygon] = field(default_factory=list)


def _shrink(points: np.ndarray, factor: float) -> np.ndarray:
    center = points.mean(axis=0)
    return center + (points - center) * factor


def _box(x0, y0, x1, y1) -> Polygon:
    return Polygon.of([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


def derive_regions(landmarks: FaceLandmarks) -> FaceRegions:
    """Forehead/cheek polygons, hair bands above the brows and iris polygons."""
    brows = landmarks.points("left_eyebrow", "right_eyebrow")
    eyes = landmarks.points("left_eye", "right_eye")
    jaw = landmarks.points("jaw")
    nose = landmarks.points("nose")

    brow_top = brows[:, 1].min()
    brow_y = brows[:, 1].mean()
    gap = max(eyes[:, 1].mean() - brow_y, 4.0)

    # Forehead: band above the eyebrow line, inset from the brow ends
    bx0, bx1 = brows[:, 0].min(), brows[:, 0].max()
    inset = (bx1 - bx0) * 0.15
    forehead = _box(bx0 + inset, brow_top - 2.2 * gap, bx1 - inset, brow_top - 0.4 * gap)

    # Cheeks: below each eye down to the nose tip, outside the nose
    nose_bottom = nose[:, 1].max()
    nose_x0, nose_x1 = nose[:, 0].min(), nose[:, 0].max()
    cheeks = {}
    for name in ("left_eye", "right_eye"):
        eye = landmarks.points(name)
        top = eye[:, 1].max() + 0.8 * gap
        bottom = max(nose_bottom, top + 2 * gap)
        if eye[:, 0].mean() < nose[:, 0].mean():
            x0, x1 = eye[:, 0].min(), min(eye[:, 0].max(), nose_x0)
        else:
            x0, x1 = max(eye[:, 0].min(), nose_x1), eye[:, 0].max()
        cheeks[name.replace("eye", "cheek")] = _box(x0, top, x1, bottom)

    # Hair: crown band and temples extrapolated above the brow line
    jx0, jx1 = jaw[:, 0].min(), jaw[:, 0].max()
    face_w = jx1 - jx0
    face_h = max(jaw[:, 1].max() - brow_top, 1.0)
    hair = [
        Rect(jx0 + 0.1 * face_w, brow_top - 0.75 * face_h, 0.8 * face_w, 0.3 * face_h),
        Rect(jx0 - 0.12 * face_w, brow_top - 0.4 * face_h, 0.14 * face_w, 0.4 * face_h),
        Rect(jx1 - 0.02 * face_w, brow_top - 0.4 * face_h, 0.14 * face_w, 0.4 * face_h),
    ]

    iris_regions = []
    for iris, eye in (("left_iris", "left_eye"), ("right_iris", "right_eye")):
        if len(landmarks.groups.get(iris, ())) >= 3:
            iris_regions.append(Polygon.of(landmarks.points(iris)))
        else:
            iris_regions.append(Polygon.of(_shrink(landmarks.points(eye), 0.5)))

    return FaceRegions(skin={"forehead": forehead, **cheeks}, hair=hair, eyes=iris_regions)


__all__ = [
    "FaceLandmarks",
    "FaceRegions",
    "LandmarkDetector",
    "MEDIAPIPE_GROUPS",
    "MediaPipeLandmarkDetector",
    "derive_regions",
]
