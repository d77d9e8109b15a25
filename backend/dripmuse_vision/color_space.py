"""Colour-space conversions: RGB, HSL, CIELAB (D65) and hex."""

from __future__ import annotations

import math
import re

import numpy as np
from skimage import color

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def rgb_to_hsl(r, g, b):
    """Return ``(h, s, l)`` with h in [0, 360) and s, l in [0, 1]."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    l = (high + low) / 2.0

    if high == low:
        return 0.0, 0.0, l

    d = high - low
    s = d / (2.0 - high - low) if l > 0.5 else d / (high + low)
    if high == r:
        h = (g - b) / d + (6.0 if g < b else 0.0)
    elif high == g:
        h = (b - r) / d + 2.0
    else:
        h = (r - g) / d + 4.0
    h = (h * 60.0) % 360.0
    return h, s, l


def _hue_to_channel(p, q, t):
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h, s, l):
    """Inverse of :func:`rgb_to_hsl`; returns integer channels in [0, 255]."""
    if s == 0:
        v = int(round(l * 255))
        return v, v, v

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    hk = (h % 360.0) / 360.0
    channels = (
        _hue_to_channel(p, q, hk + 1 / 3),
        _hue_to_channel(p, q, hk),
        _hue_to_channel(p, q, hk - 1 / 3),
    )
    return tuple(int(round(min(1.0, max(0.0, c)) * 255)) for c in channels)


def rgb_to_lab(r, g, b):
    """sRGB -> CIELAB under D65. Returns ``(L, a, b)``."""
    lab = color.rgb2lab(np.array([[[r, g, b]]], dtype=np.float64) / 255.0)[0, 0]
    return float(lab[0]), float(lab[1]), float(lab[2])


def lab_to_rgb(l, a, b):
    """CIELAB -> sRGB, clipped to the displayable gamut."""
    rgb = color.lab2rgb(np.array([[[l, a, b]]], dtype=np.float64))[0, 0]
    return tuple(int(round(c * 255)) for c in np.clip(rgb, 0.0, 1.0))


def _clamp_channel(v):
    return max(0, min(255, int(round(v))))


def rgb_to_hex(r, g, b):
    return "#{:02X}{:02X}{:02X}".format(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def hex_to_rgb(value):
    """Parse ``#RRGGBB`` (case-insensitive, ``#`` optional); malformed input gives black."""
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        return 0, 0, 0
    return tuple(int(part, 16) for part in match.groups())


def normalize_hex(value):
    """Return an uppercase ``#RRGGBB`` string, or ``None`` if ``value`` is not hex."""
    if not isinstance(value, str) or not _HEX_RE.match(value.strip()):
        return None
    return rgb_to_hex(*hex_to_rgb(value))


def hex_to_lab(value):
    return rgb_to_lab(*hex_to_rgb(value))


def lab_distance(lab1, lab2):
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(lab1, lab2)))


def rgb_distance(rgb1, rgb2):
    return math.sqrt(sum((p - q) ** 2 for p, q in zip(rgb1, rgb2)))


def hex_distance(hex1, hex2):
    return rgb_distance(hex_to_rgb(hex1), hex_to_rgb(hex2))


def image_to_lab(image_rgb):
    """Vectorised sRGB -> LAB for an ``(..., 3)`` uint8 or float array in [0, 255]."""
    arr = np.asarray(image_rgb, dtype=np.float64)
    if arr.ndim == 2:
        return color.rgb2lab(arr[np.newaxis, :, :3] / 255.0)[0]
    return color.rgb2lab(arr[..., :3] / 255.0)


__all__ = [
    "hex_distance",
    "hex_to_lab",
    "hex_to_rgb",
    "hsl_to_rgb",
    "image_to_lab",
    "lab_distance",
    "lab_to_rgb",
    "normalize_hex",
    "rgb_distance",
    "rgb_to_hex",
    "rgb_to_hsl",
    "rgb_to_lab",
]
