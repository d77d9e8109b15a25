"""Shared synthetic images and fake capabilities for the vision tests."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pytest

from dripmuse_vision.landmarks import FaceLandmarks
from dripmuse_vision.models import ClothingAnalysisResult

SKIN_RGB = (220, 170, 140)
HAIR_RGB = (60, 40, 30)
EYE_RGB = (70, 110, 180)


def solid_image(width: int, height: int, rgb, alpha: int = 255) -> np.ndarray:
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :, :3] = rgb
    image[:, :, 3] = alpha
    return image


def face_image() -> np.ndarray:
    """200x200 portrait: hair band on top, skin below, two blue eye patches."""
    image = solid_image(200, 200, SKIN_RGB)
    image[0:30, :, :3] = HAIR_RGB
    image[82:98, 60:80, :3] = EYE_RGB
    image[82:98, 120:140, :3] = EYE_RGB
    return image


FACE_POINTS = {
    "jaw": [(40, 90), (50, 150), (100, 180), (150, 150), (160, 90)],
    "left_eyebrow": [(55, 75), (70, 72), (85, 75)],
    "right_eyebrow": [(115, 75), (130, 72), (145, 75)],
    "left_eye": [(60, 90), (70, 85), (80, 90), (70, 95)],
    "right_eye": [(120, 90), (130, 85), (140, 90), (130, 95)],
    "nose": [(100, 95), (95, 120), (105, 120)],
}


class FakeLandmarkDetector:
    def __init__(self, landmarks: Optional[FaceLandmarks] = None) -> None:
        self.landmarks = landmarks
        self.calls = 0

    def detect(self, image: np.ndarray) -> Optional[FaceLandmarks]:
        self.calls += 1
        return self.landmarks


class FakeVisionService:
    def __init__(self, result: Optional[ClothingAnalysisResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.calls = []

    def analyze(self, image: np.ndarray, filename: Optional[str] = None) -> Optional[ClothingAnalysisResult]:
        self.calls.append(filename)
        if self.error is not None:
            raise self.error
        return self.result


def vision_result(category: str, confidence: float) -> ClothingAnalysisResult:
    return ClothingAnalysisResult(
        is_clothing=True,
        category=category,
        subcategory=category,
        style="casual",
        colors=["black"],
        occasions=[],
        seasons=[],
        tags=[category],
        confidence=confidence,
        reasoning="fake",
        detection_methods=["ai-analysis"],
    )


@pytest.fixture
def portrait() -> np.ndarray:
    return face_image()


@pytest.fixture
def face_landmarks() -> FaceLandmarks:
    return FaceLandmarks.from_points(FACE_POINTS)


@pytest.fixture
def landmark_detector(face_landmarks: FaceLandmarks) -> FakeLandmarkDetector:
    return FakeLandmarkDetector(face_landmarks)
