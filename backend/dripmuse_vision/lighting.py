"""Coarse lighting assessment and per-sample correction."""

from __future__ import annotations

import numpy as np

from .config import LightingThresholds
from .models import LightingProfile
from .sampler import Rect, sample_array

# Warm/cool pixel: red and blue differ by more than this.
CAST_MARGIN = 10


def _saturation(points):
    high = points.max(axis=1) / 255.0
    low = points.min(axis=1) / 255.0
    light = (high + low) / 2.0
    denom = 1.0 - np.abs(2.0 * light - 1.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        sat = np.where(denom > 0, (high - low) / denom, 0.0)
    return np.clip(sat, 0.0, 1.0)


def lighting_regions(image):
    h, w = image.shape[:2]
    return [
        Rect.fraction(w, h, 0.0, 0.0, 0.5, 0.5),
        Rect.fraction(w, h, 0.5, 0.0, 1.0, 0.5),
        Rect.fraction(w, h, 0.0, 0.5, 0.5, 1.0),
        Rect.fraction(w, h, 0.5, 0.5, 1.0, 1.0),
        Rect.fraction(w, h, 0.25, 0.25, 0.75, 0.75),
    ]


def analyze_lighting(image, thresholds: LightingThresholds = LightingThresholds()) -> LightingProfile:
    """Measure brightness, spread, saturation and colour cast over five regions."""
    samples = [sample_array(image, region) for region in lighting_regions(image)]
    samples = [s for s in samples if len(s)]
    if not samples:
        return LightingProfile(0.0, 0.0, 0.0, 0.0, 0.0)

    points = np.vstack(samples)
    region_brightness = [float(s.mean()) for s in samples]
    brightness = points.mean(axis=1)

    avg_brightness = float(np.mean(region_brightness))
    contrast = float(brightness.max() - brightness.min())
    avg_saturation = float(_saturation(points).mean())
    warm_ratio = float(np.mean(points[:, 0] > points[:, 2] + CAST_MARGIN))
    cool_ratio = float(np.mean(points[:, 2] > points[:, 0] + CAST_MARGIN))

    conditions = []
    if avg_brightness < thresholds.low_light:
        conditions.append("low-light")
    elif avg_brightness > thresholds.overexposed:
        conditions.append("overexposed")
    if contrast < thresholds.low_contrast:
        conditions.append("low-contrast")
    if avg_saturation < thresholds.desaturated:
        conditions.append("desaturated")
    if warm_ratio > thresholds.color_bias:
        conditions.append("warm-cast")
    elif cool_ratio > thresholds.color_bias:
        conditions.append("cool-cast")

    return LightingProfile(
        average_brightness=avg_brightness,
        contrast=contrast,
        average_saturation=avg_saturation,
        warm_ratio=warm_ratio,
        cool_ratio=cool_ratio,
        conditions=tuple(conditions),
        average_rgb=tuple(float(v) for v in points.mean(axis=0)),
    )


def normalize_samples(points, profile: LightingProfile):
    """Apply brightness, contrast, white-balance and saturation corrections.

    ``points`` is an ``(n, 3)`` array; a corrected copy is returned.
    """
    out = np.asarray(points, dtype=np.float64).copy()
    if len(out) == 0 or not profile.needs_correction:
        return out

    conditions = set(profile.conditions)
    avg = profile.average_brightness or 1.0

    if "low-light" in conditions:
        out *= min(2.0, 110.0 / avg)
    elif "overexposed" in conditions:
        out *= max(0.6, 180.0 / avg)

    if "low-contrast" in conditions:
        out = (out - 128.0) * 1.3 + 128.0

    avg_r, _, avg_b = profile.average_rgb
    if "warm-cast" in conditions and avg_r > avg_b:
        correction = min((avg_r - avg_b) / 400.0, 0.1)
        out[:, 2] *= 1 + correction * 1.2
        out[:, 0] *= 1 - correction * 0.7
    elif "cool-cast" in conditions and avg_b > avg_r:
        correction = min((avg_b - avg_r) / 400.0, 0.1)
        out[:, 0] *= 1 + correction * 1.2
        out[:, 2] *= 1 - correction * 0.7

    if "desaturated" in conditions:
        gray = out.mean(axis=1, keepdims=True)
        out = gray + (out - gray) * 1.25

    return np.clip(out, 0, 255)


__all__ = ["analyze_lighting", "lighting_regions", "normalize_samples"]
