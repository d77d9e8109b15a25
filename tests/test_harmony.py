"""Colour harmony rules, seasonal palettes and colour resolution."""

from __future__ import annotations

import datetime

import pytest

from dripmuse_vision.harmony import HarmonyEngine, resolve_color, season_for_month


def _engine(month: int = 1) -> HarmonyEngine:
    return HarmonyEngine(today=lambda: datetime.date(2025, month, 10))


def test_neutral_wins_ties_against_weaker_rules() -> None:
    result = _engine().analyze_harmony(["black"], ["coral"])
    assert result.harmony_type == "neutral"
    assert result.confidence >= 0.85
    assert result.is_harmonious


def test_neutrals_on_both_sides_score_higher() -> None:
    result = _engine().analyze_harmony(["white"], ["black"])
    assert result.harmony_type == "neutral"
    assert result.confidence == pytest.approx(0.95)


@pytest.mark.parametrize(
    "colors_a, colors_b, harmony_type, confidence",
    [
        (["gold"], ["navy"], "complementary", 0.8),
        (["powder-blue"], ["navy"], "modern-monochromatic", 0.9),
        (["navy"], ["tan"], "modern-complementary", 0.9),
        (["navy"], ["coral", "mint"], "triadic", 0.7),
    ],
)
def test_stronger_rules_outrank_neutral(colors_a, colors_b, harmony_type, confidence) -> None:
    result = _engine().analyze_harmony(colors_a, colors_b)
    assert result.harmony_type == harmony_type
    assert result.confidence == pytest.approx(confidence)


def test_modern_combination_beats_plain_complementary() -> None:
    result = _engine().analyze_harmony(["red"], ["green"])
    assert result.harmony_type == "modern-triadic"
    assert result.confidence == pytest.approx(0.9)


def test_complementary_pair() -> None:
    result = _engine().analyze_harmony(["coral"], ["teal"])
    assert result.harmony_type == "complementary"
    assert result.confidence == pytest.approx(0.8)


def test_seasonal_rule_follows_injected_clock() -> None:
    summer = _engine(month=7).analyze_harmony(["lavender"], ["mauve"])
    winter = _engine(month=1).analyze_harmony(["lavender"], ["mauve"])

    assert summer.harmony_type == "seasonal"
    assert summer.confidence == pytest.approx(0.8)
    assert winter.harmony_type == "monochromatic"
    assert winter.confidence == pytest.approx(0.7)


def test_explicit_season_overrides_clock() -> None:
    result = _engine(month=1).analyze_harmony(["lavender"], ["mauve"], season="summer")
    assert result.harmony_type == "seasonal"


def test_unknown_colors_have_no_harmony() -> None:
    result = _engine().analyze_harmony(["sparkly"], ["glittery"])
    assert result.harmony_type == "none"
    assert result.confidence == pytest.approx(0.1)
    assert not result.is_harmonious


def test_single_color_outfit() -> None:
    result = _engine().find_best_harmony(["coral"])
    assert result.harmony_type == "single-color"
    assert result.confidence == 1.0


def test_outfit_with_two_neutrals() -> None:
    result = _engine().find_best_harmony(["white", "black", "red"])
    assert result.harmony_type == "neutral"
    assert result.confidence == pytest.approx(0.95)


def test_outfit_needs_distinct_colors_for_pair_rules() -> None:
    result = _engine().find_best_harmony(["coral", "coral"])
    assert result.harmony_type != "complementary"


def test_resolve_color_variants() -> None:
    assert resolve_color("Dark Green").name == "green"
    assert resolve_color("light grey").name == "light-gray"
    assert resolve_color("#000080").name == "navy"
    unknown = resolve_color("sparkly")
    assert unknown.family == "unknown"
    assert unknown.hex == "#808080"


def test_season_for_month() -> None:
    assert season_for_month(4) == "spring"
    assert season_for_month(8) == "summer"
    assert season_for_month(10) == "autumn"
    assert season_for_month(12) == "winter"


def test_generated_colors() -> None:
    engine = _engine()
    assert len(engine.generate_harmonious_colors("red", "triadic")) == 2
    assert len(engine.generate_harmonious_colors("#336699", "analogous")) == 3
    complement = engine.generate_harmonious_colors("#FF0000")
    assert len(complement) == 1 and complement[0].startswith("#")


def test_analyze_color_reports_family() -> None:
    analysis = _engine().analyze_color("navy")
    assert analysis.color_family == "blue"
    assert analysis.hex_value == "#000080"
    assert analysis.temperature == "cool"
