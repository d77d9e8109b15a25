"""External image-annotation service used as one clothing vote."""

from __future__ import annotations

import base64
import logging
from typing import Dict, List, Optional, Protocol

import numpy as np
import requests
from pydantic import BaseModel, ValidationError

from .color_classifier import color_name
from .errors import CapabilityUnavailable
from .image_io import encode_jpeg
from .models import ClothingAnalysisResult

logger = logging.getLogger(__name__)

LABEL_CATEGORIES: Dict[str, str] = {
    "shirt": "tops",
    "t-shirt": "tops",
    "blouse": "tops",
    "sweater": "tops",
    "top": "tops",
    "jersey": "tops",
    "jeans": "bottoms",
    "trousers": "bottoms",
    "pants": "bottoms",
    "shorts": "bottoms",
    "skirt": "bottoms",
    "dress": "dresses",
    "gown": "dresses",
    "jacket": "outerwear",
    "coat": "outerwear",
    "blazer": "outerwear",
    "hoodie": "outerwear",
    "shoe": "shoes",
    "sneakers": "shoes",
    "footwear": "shoes",
    "boot": "shoes",
    "sandal": "shoes",
    "handbag": "accessories",
    "bag": "accessories",
    "hat": "accessories",
    "belt": "accessories",
    "scarf": "accessories",
    "jewellery": "accessories",
}

MIN_LABEL_SCORE = 0.5


class _Label(BaseModel):
    description: str
    score: float = 0.0


class _RGB(BaseModel):
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0


class _DominantColor(BaseModel):
    color: _RGB
    score: float = 0.0
    pixelFraction: float = 0.0


class _DominantColors(BaseModel):
    colors: List[_DominantColor] = []


class _ImageProperties(BaseModel):
    dominantColors: _DominantColors = _DominantColors()


class _LocalizedObject(BaseModel):
    name: str
    score: float = 0.0


class AnnotateResponse(BaseModel):
    labelAnnotations: List[_Label] = []
    localizedObjectAnnotations: List[_LocalizedObject] = []
    imagePropertiesAnnotation: _ImageProperties = _ImageProperties()


class _BatchResponse(BaseModel):
    responses: List[AnnotateResponse]


class VisionService(Protocol):
    def analyze(self, image: np.ndarray, filename: Optional[str] = None) -> Optional[ClothingAnalysisResult]:
        ...


def category_for_label(label: str) -> Optional[str]:
    text = label.lower()
    if text in LABEL_CATEGORIES:
        return LABEL_CATEGORIES[text]
    for keyword, category in LABEL_CATEGORIES.items():
        if keyword in text.split():
            return category
    return None


def result_from_annotations(annotations: AnnotateResponse) -> Optional[ClothingAnalysisResult]:
    """Map a validated annotate response to a clothing result, or ``None`` when nothing matched."""
    names = [(l.description, l.score) for l in annotations.labelAnnotations]
    names += [(o.name, o.score) for o in annotations.localizedObjectAnnotations]
    confident = [(name, score) for name, score in names if score > MIN_LABEL_SCORE]

    matched = [(name, score, category_for_label(name)) for name, score in confident]
    matched = [m for m in matched if m[2]]
    if not matched:
        return None

    label, _, category = max(matched, key=lambda m: m[1])
    mean_score = sum(score for _, score in confident) / len(confident)

    colors = []
    for dominant in annotations.imagePropertiesAnnotation.dominantColors.colors:
        name = color_name(dominant.color.red, dominant.color.green, dominant.color.blue)
        if name not in colors:
            colors.append(name)

    return ClothingAnalysisResult(
        is_clothing=True,
        category=category,
        subcategory=label.lower(),
        style="casual",
        colors=colors or ["neutral"],
        occasions=[],
        seasons=[],
        tags=[name.lower() for name, _ in confident],
        confidence=round(min(0.95, max(0.3, mean_score)), 3),
        reasoning=f"Vision labels: {', '.join(name for name, _ in confident)}",
        detection_methods=["ai-analysis"],
    )


class HttpVisionService:
    """Posts a base64 JPEG to an ``images:annotate`` style endpoint."""

    def __init__(self, endpoint: str, api_key: Optional[str] = None, timeout: float = 8.0) -> None:
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout

    def _payload(self, image: np.ndarray) -> dict:
        content = base64.b64encode(encode_jpeg(image)).decode("ascii")
        return {
            "requests": [
                {
                    "image": {"content": content},
                    "features": [
                        {"type": "LABEL_DETECTION", "maxResults": 10},
                        {"type": "OBJECT_LOCALIZATION", "maxResults": 10},
                        {"type": "IMAGE_PROPERTIES", "maxResults": 5},
                    ],
                }
            ]
        }

    def analyze(self, image: np.ndarray, filename: Optional[str] = None) -> Optional[ClothingAnalysisResult]:
        params = {"key": self.api_key} if self.api_key else None
        logger.info("Requesting image annotations for %s", filename or "upload")
        try:
            response = requests.post(self.endpoint, json=self._payload(image), params=params, timeout=self.timeout)
            response.raise_for_status()
            parsed = _BatchResponse.model_validate(response.json())
        except requests.RequestException as exc:
            raise CapabilityUnavailable(f"Vision API unreachable: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise CapabilityUnavailable("Vision API payload failed schema validation") from exc

        if not parsed.responses:
            return None
        return result_from_annotations(parsed.responses[0])


__all__ = [
    "AnnotateResponse",
    "HttpVisionService",
    "LABEL_CATEGORIES",
    "VisionService",
    "category_for_label",
    "result_from_annotations",
]
