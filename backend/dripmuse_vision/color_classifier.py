"""Rule-based colour naming and the skin/hair/eye pixel predicates."""

from __future__ import annotations

from .color_space import rgb_to_hsl
from .config import ClassifierThresholds
from .models import ClassifiedColor

DEFAULT_THRESHOLDS = ClassifierThresholds()

NAME_FAMILIES = {
    "black": "neutral",
    "white": "neutral",
    "charcoal": "neutral",
    "gray": "neutral",
    "light-gray": "neutral",
    "cream": "neutral",
    "neutral": "neutral",
    "red": "red",
    "pink": "red",
    "orange": "orange",
    "coral": "orange",
    "yellow": "yellow",
    "green": "green",
    "sage": "green",
    "cyan": "blue",
    "blue": "blue",
    "navy": "blue",
    "purple": "purple",
    "magenta": "purple",
}

WARM_FAMILIES = {"red", "orange", "yellow"}
COOL_FAMILIES = {"blue", "green", "purple"}
BACKGROUND_NAMES = ("white", "light-gray", "gray", "cream", "neutral")


def color_name(r, g, b):
    """Map an RGB triple to a coarse colour name via an HSL cascade."""
    h, s, l = rgb_to_hsl(r, g, b)
    s *= 100
    l *= 100

    if l < 15:
        return "black"
    if l > 85 and s < 20:
        return "white"
    if s < 15:
        if l < 30:
            return "charcoal"
        if l < 70:
            return "gray"
        return "light-gray"

    if h < 15 or h >= 330:
        return "red" if s >= 50 else "pink"
    if h < 45:
        return "orange" if s >= 60 else "coral"
    if h < 75:
        return "yellow" if s >= 40 else "cream"
    if h < 150:
        return "green" if s >= 30 else "sage"
    if h < 190:
        return "cyan"
    if h < 250:
        return "navy" if l < 40 else "blue"
    if h < 290:
        return "purple"
    if h < 330:
        return "magenta"
    return "neutral"


def temperature_of(family):
    if family in WARM_FAMILIES:
        return "warm"
    if family in COOL_FAMILIES:
        return "cool"
    return "neutral"


def intensity_of(lightness):
    """Intensity bucket for an HSL lightness in [0, 1]."""
    if lightness < 0.35:
        return "dark"
    if lightness > 0.7:
        return "light"
    return "medium"


def saturation_of(saturation):
    """Saturation bucket for an HSL saturation in [0, 1]."""
    if saturation < 0.2:
        return "low"
    if saturation > 0.6:
        return "high"
    return "medium"


def classify_color(r, g, b) -> ClassifiedColor:
    name = color_name(r, g, b)
    family = NAME_FAMILIES.get(name, "neutral")
    _, s, l = rgb_to_hsl(r, g, b)
    return ClassifiedColor(
        name=name,
        family=family,
        temperature=temperature_of(family),
        intensity=intensity_of(l),
        saturation=saturation_of(s),
    )


def is_skin_color(r, g, b, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
    """Permissive skin test: warm hue, loosely R >= G >= B, moderate saturation."""
    t = thresholds
    brightness = (r + g + b) / 3
    if not t.skin_min_brightness < brightness < t.skin_max_brightness:
        return False
    if r <= 95 or g <= 40 or b <= 20:
        return False

    h, s, _ = rgb_to_hsl(r, g, b)
    if not (h <= t.skin_max_hue or h >= t.skin_min_hue_wrap):
        return False
    if not t.skin_min_saturation <= s <= t.skin_max_saturation:
        return False

    slack = t.skin_channel_slack
    return r + slack >= g and g + slack >= b and r > b


def in_blonde_band(r, g, b, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
    t = thresholds
    brightness = (r + g + b) / 3
    if brightness < t.blonde_min_brightness:
        return False
    h, _, _ = rgb_to_hsl(r, g, b)
    return t.blonde_min_hue <= h <= t.blonde_max_hue and r >= b


def is_hair_color(r, g, b, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
    t = thresholds
    brightness = (r + g + b) / 3
    chroma = max(r, g, b) - min(r, g, b)
    if brightness >= t.hair_max_brightness or chroma >= t.hair_max_chroma:
        return False
    if is_skin_color(r, g, b, t):
        # Light, warm pixels stay in: blonde is over-detected on purpose.
        return in_blonde_band(r, g, b, t)
    return True


def is_bluish(r, g, b, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
    t = thresholds
    return b >= t.blue_eye_min_blue and b + t.blue_eye_slack >= r and b + t.blue_eye_slack >= g


def is_eye_color(r, g, b, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS):
    t = thresholds
    brightness = (r + g + b) / 3
    if not t.eye_min_brightness < brightness < t.eye_max_brightness:
        return False
    if is_bluish(r, g, b, t):
        return True
    return not is_skin_color(r, g, b, t)


__all__ = [
    "BACKGROUND_NAMES",
    "NAME_FAMILIES",
    "classify_color",
    "color_name",
    "in_blonde_band",
    "intensity_of",
    "is_bluish",
    "is_eye_color",
    "is_hair_color",
    "is_skin_color",
    "saturation_of",
    "temperature_of",
]
