"""Colour season (spring/summer/autumn/winter) from skin, hair and eye colour."""

import numpy as np

from .color_space import hex_to_lab
from .models import FacialFeatureReport, SeasonProfile

SEASONS = ("winter", "summer", "spring", "autumn")

# (label, test on (skin, hair, eye) LAB, score, weight) - first match per group wins
_SKIN_WARMTH = [
    ("skin_very_warm", lambda s, h, e: s[2] > 16, 4, "high"),
    ("skin_warm", lambda s, h, e: s[2] > 12, 3, "medium"),
    ("skin_cool", lambda s, h, e: s[2] < 6, -4, "high"),
    ("skin_slightly_cool", lambda s, h, e: s[2] < 9, -3, "medium"),
]
_SKIN_MODIFIER = [
    ("olive_modifier", lambda s, h, e: s[1] < 2 and s[2] > 8, -2, "medium"),
    ("pink_modifier", lambda s, h, e: s[1] > 8, -1, "low"),
]
_HAIR_WARMTH = [
    ("hair_warm", lambda s, h, e: h[2] > 12, 2, "medium"),
    ("hair_cool", lambda s, h, e: h[2] < 5, -2, "medium"),
]
_EYE_WARMTH = [
    ("eye_warm", lambda s, h, e: e[2] > 10, 1, "low"),
    ("eye_cool", lambda s, h, e: e[2] < 0, -1, "low"),
]

_CONTRAST_BANDS = [
    (70, "High", "high"),
    (55, "Medium-High", "medium"),
    (40, "Medium", "medium"),
    (28, "Medium-Low", "medium"),
]


class SeasonAnalyst:
    """Scores temperature and contrast, then picks a season and subseason."""

    def __init__(self, palettes=None):
        # season -> recommended hex list
        self.palettes = palettes or {}

    def temperature(self, skin_lab, hair_lab, eye_lab):
        factors = []
        for group in (_SKIN_WARMTH, _SKIN_MODIFIER, _HAIR_WARMTH, _EYE_WARMTH):
            for label, test, score, weight in group:
                if test(skin_lab, hair_lab, eye_lab):
                    factors.append((label, score, weight))
                    break
            else:
                if group is _SKIN_WARMTH:
                    factors.append(("skin_neutral", 0, "low"))

        score = sum(f[1] for f in factors)
        strong = sum(1 for f in factors if f[2] == "high")
        confidence = "high" if strong >= 2 else "medium" if strong >= 1 else "low"
        category = "Warm" if score > 2 else "Cool" if score < -2 else "Neutral"
        return {"score": score, "category": category, "confidence": confidence, "factors": factors}

    def contrast(self, skin_lab, hair_lab, eye_lab):
        """Luminance-weighted contrast between skin and the darker features."""
        l_contrast = abs(skin_lab[0] - hair_lab[0]) + abs(skin_lab[0] - eye_lab[0])
        chroma = [float(np.hypot(lab[1], lab[2])) for lab in (skin_lab, hair_lab, eye_lab)]
        chroma_contrast = abs(chroma[0] - chroma[1]) + abs(chroma[0] - chroma[2])
        value = l_contrast * 0.75 + chroma_contrast * 0.25

        for bound, category, confidence in _CONTRAST_BANDS:
            if value > bound:
                break
        else:
            category, confidence = "Low", "high"
        return {
            "category": category,
            "value": float(value),
            "l_contrast": float(l_contrast),
            "chroma_contrast": float(chroma_contrast),
            "confidence": confidence,
        }

    def season(self, temp, contrast, hair_l):
        t = temp["score"]
        c = contrast["value"]
        scores = {s: 0 for s in SEASONS}

        # Temperature
        if t < -3:
            scores["winter"] += 3
            scores["summer"] += 2
        elif t < 0:
            scores["summer"] += 3
            scores["winter"] += 1
        elif t > 3:
            scores["autumn"] += 3
            scores["spring"] += 2
        else:
            scores["spring"] += 3
            scores["autumn"] += 1

        # Depth
        if hair_l < 25:
            scores["winter"] += 2
            scores["autumn"] += 2
        elif hair_l < 35:
            scores["winter"] += 1
            scores["autumn"] += 1
            if t <= 1:
                scores["summer"] += 2
        elif hair_l > 65:
            scores["summer"] += 2
            scores["spring"] += 2
        elif hair_l > 50:
            scores["summer"] += 1
            scores["spring"] += 1

        # Contrast
        if c > 65:
            scores["winter"] += 2
            scores["spring"] += 1
        elif c < 35:
            scores["summer"] += 2
            scores["autumn"] += 1

        ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
        winner, best = ranked[0]
        gap = best - ranked[1][1]
        confidence = "high" if gap >= 3 else "medium" if gap >= 2 else "low"
        if "low" in (temp["confidence"], contrast["confidence"]):
            confidence = {"high": "medium", "medium": "low"}.get(confidence, confidence)

        return winner, self._subseason(winner, t, c, hair_l), confidence, scores

    @staticmethod
    def _subseason(season, t, c, hair_l):
        if season == "winter":
            if t > -2:
                return "Deep Winter"
            return "Bright Winter" if c > 70 else "True Winter"
        if season == "summer":
            if hair_l < 30:
                return "True Summer" if c >= 35 else "Soft Summer"
            if hair_l > 60:
                return "Light Summer"
            return "Soft Summer" if c < 40 else "True Summer"
        if season == "spring":
            if c > 65:
                return "Bright Spring"
            return "Light Spring" if hair_l > 65 else "True Spring"
        if t < 2:
            return "Deep Autumn"
        return "Soft Autumn" if c < 40 else "True Autumn"

    def analyze(self, skin_lab, hair_lab, eye_lab) -> SeasonProfile:
        temp = self.temperature(skin_lab, hair_lab, eye_lab)
        contrast = self.contrast(skin_lab, hair_lab, eye_lab)
        season, subseason, confidence, scores = self.season(temp, contrast, hair_lab[0])
        return SeasonProfile(
            season=season,
            subseason=subseason,
            temperature=temp["category"],
            temperature_score=temp["score"],
            contrast=contrast["category"],
            contrast_value=round(contrast["value"], 2),
            confidence=confidence,
            season_scores=scores,
            temperature_factors=temp["factors"],
            recommended_colors=list(self.palettes.get(season, [])),
            temperature_confidence=temp["confidence"],
            contrast_confidence=contrast["confidence"],
        )

    def analyze_report(self, report: FacialFeatureReport) -> SeasonProfile:
        return self.analyze(
            hex_to_lab(report.skin_tone.color),
            hex_to_lab(report.hair_color.color),
            hex_to_lab(report.eye_color.color),
        )


__all__ = ["SEASONS", "SeasonAnalyst"]
