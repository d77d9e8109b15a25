"""Image acquisition: bytes, paths and URLs decoded into RGBA arrays."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np
import requests

from .errors import AnalysisTimeout, LoadError
from .strategies import call_with_timeout

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, memoryview, str, Path, np.ndarray]


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (JPEG, PNG, ...) into an RGBA uint8 array."""
    if not data:
        raise LoadError("Empty image payload")
    nparr = np.frombuffer(bytes(data), np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise LoadError("Invalid image file. Please upload a valid JPG or PNG.")
    return to_rgba(img, bgr=True)


def to_rgba(img: np.ndarray, bgr: bool = False) -> np.ndarray:
    """Normalise a decoded array to HxWx4 uint8 RGBA."""
    if img.dtype != np.uint8:
        img = (img.astype(np.float64) / 257.0).clip(0, 255).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    channels = img.shape[2]
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA if bgr else cv2.COLOR_RGB2RGBA)
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA) if bgr else img.copy()
    raise LoadError(f"Unsupported channel count: {channels}")


def _fetch_url(url: str, timeout: Optional[float]) -> bytes:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.Timeout as exc:
        raise AnalysisTimeout(f"Image fetch timed out: {url}") from exc
    except requests.RequestException as exc:
        raise LoadError(f"Image fetch failed: {exc}") from exc
    if response.status_code >= 400:
        raise LoadError(f"Image fetch failed with HTTP {response.status_code}")
    return response.content


def _read_source(source, timeout):
    if isinstance(source, np.ndarray):
        return to_rgba(source)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return decode_image(bytes(source))
    if hasattr(source, "read"):
        return decode_image(source.read())

    text = str(source)
    if text.startswith(("http://", "https://")):
        return decode_image(_fetch_url(text, timeout))
    if text.startswith("data:"):
        try:
            payload = base64.b64decode(text.split(",", 1)[1])
        except (IndexError, ValueError) as exc:
            raise LoadError("Malformed data URL") from exc
        return decode_image(payload)

    try:
        data = Path(text).read_bytes()
    except OSError as exc:
        raise LoadError(f"Could not load image: {text}") from exc
    return decode_image(data)


def downscale(image: np.ndarray, max_dimension: Optional[int]) -> np.ndarray:
    """Shrink so the longest side is at most ``max_dimension``; never upscales."""
    if not max_dimension:
        return image
    h, w = image.shape[:2]
    longest = max(h, w)
    if longest <= max_dimension:
        return image
    scale = max_dimension / float(longest)
    size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)


def load_image(source: ImageSource, timeout: Optional[float] = 10.0,
               max_dimension: Optional[int] = None) -> np.ndarray:
    """Load ``source`` into an RGBA array within ``timeout`` seconds.

    Raises ``LoadError`` when the image cannot be fetched or decoded and
    ``AnalysisTimeout`` when loading exceeds its budget.
    """
    image = call_with_timeout(_read_source, timeout, source, timeout)
    logger.debug("Loaded image %sx%s", image.shape[1], image.shape[0])
    return downscale(image, max_dimension)


def encode_jpeg(image: np.ndarray, quality: int = 90) -> bytes:
    bgr = cv2.cvtColor(image, cv2.COLOR_RGBA2BGR) if image.shape[-1] == 4 else cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
    ok, buffer = cv2.imencode(".jpg", bgr, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise LoadError("Could not encode image")
    return buffer.tobytes()


__all__ = ["decode_image", "downscale", "encode_jpeg", "load_image", "to_rgba"]
