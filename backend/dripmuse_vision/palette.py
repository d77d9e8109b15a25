"""Dominant whole-image palette."""

import logging

from .clustering import kmeans
from .color_space import rgb_distance
from .image_io import downscale
from .models import ExtractedPalette
from .sampler import full_frame, sample_array

logger = logging.getLogger(__name__)

PALETTE_MAX_DIMENSION = 150
MIN_COLOR_DISTANCE = 30
MAX_PALETTE_COLORS = 12
FALLBACK_PALETTE = ["#8B4513", "#F5DEB3", "#2F4F4F", "#D2B48C", "#696969", "#F5F5DC"]


def fallback_palette() -> ExtractedPalette:
    return ExtractedPalette(colors=list(FALLBACK_PALETTE), confidence=0.3, method="fallback")


def extract_palette(image, color_count: int = 6, rng=None, seed=None) -> ExtractedPalette:
    """Cluster the image in LAB and keep clearly distinct centroids."""
    color_count = max(1, min(int(color_count), MAX_PALETTE_COLORS))
    small = downscale(image, PALETTE_MAX_DIMENSION)
    points = sample_array(small, full_frame(small))
    if len(points) == 0:
        logger.warning("No opaque pixels to build a palette from")
        return fallback_palette()

    clusters = kmeans(points, k=color_count, max_iterations=10, space="lab", rng=rng, seed=seed)

    kept = []
    for cluster in clusters:
        if all(rgb_distance(cluster.rgb, other.rgb) >= MIN_COLOR_DISTANCE for other in kept):
            kept.append(cluster)

    if not kept:
        return fallback_palette()

    confidence = min(0.95, 0.5 + len(kept) / (2 * color_count))
    return ExtractedPalette(
        colors=[c.hex for c in kept],
        confidence=round(confidence, 3),
        method="kmeans-lab",
    )


__all__ = ["FALLBACK_PALETTE", "MAX_PALETTE_COLORS", "extract_palette", "fallback_palette"]
