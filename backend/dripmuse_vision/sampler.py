"""Region sampling over decoded RGB(A) image arrays."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .models import ColorSample

DEFAULT_STRIDE = 4
MIN_ALPHA = 128


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def fraction(cls, image_width, image_height, x0, y0, x1, y1) -> "Rect":
        """Rectangle given as fractions of the image size."""
        return cls(x0 * image_width, y0 * image_height,
                   (x1 - x0) * image_width, (y1 - y0) * image_height)

    def mask(self, height: int, width: int) -> Optional[np.ndarray]:
        x0 = max(0, int(math.floor(self.x)))
        y0 = max(0, int(math.floor(self.y)))
        x1 = min(width, int(math.floor(self.x + self.width)))
        y1 = min(height, int(math.floor(self.y + self.height)))
        if x1 <= x0 or y1 <= y0:
            return None
        mask = np.zeros((height, width), dtype=bool)
        mask[y0:y1, x0:x1] = True
        return mask


@dataclass(frozen=True)
class Polygon:
    """Closed polygon; membership by ray casting."""

    points: Tuple[Tuple[float, float], ...]

    @classmethod
    def of(cls, points: Sequence[Sequence[float]]) -> "Polygon":
        return cls(tuple((float(x), float(y)) for x, y in points))

    def contains(self, xs, ys) -> np.ndarray:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        inside = np.zeros(np.broadcast(xs, ys).shape, dtype=bool)
        if len(self.points) < 3:
            return inside

        j = len(self.points) - 1
        for i in range(len(self.points)):
            xi, yi = self.points[i]
            xj, yj = self.points[j]
            crosses = (yi > ys) != (yj > ys)
            with np.errstate(divide="ignore", invalid="ignore"):
                x_cross = (xj - xi) * (ys - yi) / (yj - yi) + xi
            inside ^= crosses & (xs < x_cross)
            j = i
        return inside

    def mask(self, height: int, width: int) -> Optional[np.ndarray]:
        if len(self.points) < 3:
            return None
        pts = np.array(self.points)
        x0 = max(0, int(math.floor(pts[:, 0].min())))
        y0 = max(0, int(math.floor(pts[:, 1].min())))
        x1 = min(width, int(math.ceil(pts[:, 0].max())) + 1)
        y1 = min(height, int(math.ceil(pts[:, 1].max())) + 1)
        if x1 <= x0 or y1 <= y0:
            return None

        ys, xs = np.mgrid[y0:y1, x0:x1]
        inside = self.contains(xs, ys)
        if not inside.any():
            return None
        mask = np.zeros((height, width), dtype=bool)
        mask[y0:y1, x0:x1] = inside
        return mask


Region = Union[Rect, Polygon]


def full_frame(image) -> Rect:
    h, w = image.shape[:2]
    return Rect(0, 0, w, h)


def sample_array(image, region: Region, stride: int = DEFAULT_STRIDE) -> np.ndarray:
    """Sampled pixels as an ``(n, 3)`` float array.

    Pixels inside the region are taken in row-major order, every ``stride``-th
    one is kept and those with alpha below 128 are dropped.
    """
    h, w = image.shape[:2]
    mask = region.mask(h, w)
    if mask is None:
        return np.empty((0, 3), dtype=np.float64)

    pixels = image[mask][::max(1, stride)]
    if pixels.shape[-1] == 4:
        pixels = pixels[pixels[:, 3] >= MIN_ALPHA]
    return pixels[:, :3].astype(np.float64)


def sample_pixels(image, region: Region, stride: int = DEFAULT_STRIDE) -> List[ColorSample]:
    return [ColorSample(int(r), int(g), int(b)) for r, g, b in sample_array(image, region, stride)]


__all__ = [
    "DEFAULT_STRIDE",
    "Polygon",
    "Rect",
    "Region",
    "full_frame",
    "sample_array",
    "sample_pixels",
]
