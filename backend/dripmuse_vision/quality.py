"""Image quality checks and confidence messaging."""

from typing import Dict, Iterable, List

import numpy as np

from .models import QualityIssue


def robust_zone_color(lab_points):
    """Median LAB colour after trimming the 15th-85th L percentile band."""
    pixels = np.asarray(lab_points, dtype=np.float64).reshape(-1, 3)
    if len(pixels) == 0:
        return np.array([50.0, 0.0, 0.0])

    l_channel = pixels[:, 0]
    lower_pc = np.percentile(l_channel, 15)
    upper_pc = np.percentile(l_channel, 85)
    robust_pixels = pixels[(l_channel >= lower_pc) & (l_channel <= upper_pc)]

    if len(robust_pixels) == 0:
        return np.median(pixels, axis=0)
    return np.median(robust_pixels, axis=0)


def detect_environmental_issues(skin_zones: Dict[str, Iterable[float]], face_area_ratio=None) -> List[QualityIssue]:
    """Lighting, colour-cast, makeup and framing checks over per-zone skin LAB values."""
    issues = []
    if not skin_zones:
        return issues

    samples = {name: np.asarray(lab, dtype=np.float64) for name, lab in skin_zones.items()}
    values = np.array(list(samples.values()))

    # 1. Lighting level and uniformity
    avg_l = float(values[:, 0].mean())
    std_l = float(values[:, 0].std())

    if avg_l < 25:
        issues.append(QualityIssue("CRITICAL", "Image is too dark. Please use better lighting."))
    elif avg_l < 35:
        issues.append(QualityIssue("WARNING", "Lighting is somewhat dark. Results may be less accurate."))
    elif avg_l > 85:
        issues.append(QualityIssue("WARNING", "Image is overexposed. Results may be less accurate."))

    if std_l > 12:
        issues.append(QualityIssue("WARNING", "Uneven lighting detected across face."))

    # 2. Colour cast
    avg_a = float(values[:, 1].mean())
    avg_b = float(values[:, 2].mean())
    if abs(avg_a) > 15 or abs(avg_b) > 20:
        issues.append(QualityIssue("WARNING", "Strong color cast detected in image. Try neutral lighting."))

    # 3. Makeup: cheeks redder than forehead
    forehead = [v for k, v in samples.items() if "forehead" in k]
    cheeks = [v for k, v in samples.items() if "cheek" in k]
    if forehead and cheeks:
        forehead_a = np.mean([s[1] for s in forehead])
        cheek_a = np.mean([s[1] for s in cheeks])
        if cheek_a > forehead_a + 8:
            issues.append(QualityIssue("WARNING", "Heavy blush detected. Consider removing makeup for best accuracy."))
        elif cheek_a > forehead_a + 5:
            issues.append(QualityIssue("INFO", "Possible light makeup detected. May slightly affect accuracy."))

    # 4. Framing
    if face_area_ratio is not None and face_area_ratio < 0.15:
        issues.append(QualityIssue("WARNING", "Face appears small in frame. Move closer to camera."))

    return issues


def face_area_ratio(jaw_points, height, width):
    """Share of the image covered by the jaw outline's bounding box."""
    pts = np.asarray(jaw_points, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0 or height <= 0 or width <= 0:
        return 0.0
    box_w = np.clip(pts[:, 0].max(), 0, width) - np.clip(pts[:, 0].min(), 0, width)
    box_h = np.clip(pts[:, 1].max(), 0, height) - np.clip(pts[:, 1].min(), 0, height)
    return float(box_w * box_h / (height * width))


def calculate_overall_confidence(temp_confidence, contrast_confidence, issues):
    """Score out of 100 for a season result, reduced by weak factors and issues."""
    confidence_score = 100

    if temp_confidence == "low":
        confidence_score -= 25
    elif temp_confidence == "medium":
        confidence_score -= 10

    if contrast_confidence == "low":
        confidence_score -= 15
    elif contrast_confidence == "medium":
        confidence_score -= 5

    for issue in issues:
        if issue.severity == "CRITICAL":
            confidence_score -= 30
        elif issue.severity == "WARNING":
            confidence_score -= 15
        elif issue.severity == "INFO":
            confidence_score -= 5

    level = "High" if confidence_score >= 75 else "Medium" if confidence_score >= 50 else "Low"
    return {
        "score": max(0, confidence_score),
        "level": level,
        "recommendation": generate_confidence_message(confidence_score),
    }


def generate_confidence_message(score):
    if score >= 85:
        return "Analysis confidence is very high. Results are highly reliable."
    elif score >= 75:
        return "Analysis confidence is high. Results are reliable."
    elif score >= 60:
        return "Analysis confidence is good. Results should be reasonably accurate."
    elif score >= 50:
        return "Analysis confidence is moderate. Consider retaking photo with better lighting."
    else:
        return "Analysis confidence is low. Please retake photo with better lighting and minimal makeup."


def accuracy_description(confidence):
    """User-facing wording for a feature confidence in [0, 1]."""
    if confidence >= 0.9:
        return "Excellent accuracy"
    if confidence >= 0.8:
        return "Very good accuracy"
    if confidence >= 0.7:
        return "Good accuracy"
    if confidence >= 0.6:
        return "Fair accuracy"
    if confidence >= 0.5:
        return "Moderate accuracy"
    return "Low accuracy - consider retaking photo"


def is_well_detected(confidence):
    return confidence >= 0.7


def summarize_issues(issues):
    """One-line note led by the most severe issue class."""
    for severity, label in (("CRITICAL", "CRITICAL"), ("WARNING", "WARNING"), ("INFO", "INFO")):
        messages = [issue.message for issue in issues if issue.severity == severity]
        if messages:
            return f"{label}: " + " | ".join(messages)
    return "No issues detected - excellent image quality"
