"""Colour conversions, naming rules and the pixel predicates."""

from __future__ import annotations

import numpy as np
import pytest

from dripmuse_vision.color_classifier import (
    classify_color,
    color_name,
    is_bluish,
    is_eye_color,
    is_hair_color,
    is_skin_color,
)
from dripmuse_vision.color_space import (
    hex_distance,
    hex_to_lab,
    hex_to_rgb,
    hsl_to_rgb,
    image_to_lab,
    lab_to_rgb,
    normalize_hex,
    rgb_to_hex,
    rgb_to_hsl,
    rgb_to_lab,
)


def test_hex_parsing_accepts_case_and_missing_hash() -> None:
    assert hex_to_rgb("#ff8000") == (255, 128, 0)
    assert hex_to_rgb("FF8000") == (255, 128, 0)
    assert normalize_hex("ff8000") == "#FF8000"
    assert normalize_hex("navy") is None


def test_malformed_hex_reads_as_black() -> None:
    assert hex_to_rgb("#12") == (0, 0, 0)
    assert hex_to_rgb(None) == (0, 0, 0)


def test_rgb_to_hex_clamps_channels() -> None:
    assert rgb_to_hex(300, -4, 127.6) == "#FF0080"


def _random_rgb(count, seed=20251019):
    return [tuple(int(v) for v in row) for row in np.random.default_rng(seed).integers(0, 256, size=(count, 3))]


def test_hsl_round_trip_stays_within_one_level() -> None:
    for rgb in [(220, 170, 140), (10, 200, 90), (128, 128, 128), (0, 0, 0), (255, 255, 255)] + _random_rgb(5000):
        back = hsl_to_rgb(*rgb_to_hsl(*rgb))
        assert all(abs(a - b) <= 1 for a, b in zip(rgb, back)), rgb


def test_hex_round_trip_over_random_colors() -> None:
    for rgb in _random_rgb(2000, seed=7):
        value = rgb_to_hex(*rgb)
        assert hex_to_rgb(value) == rgb
        assert normalize_hex(value.lower()) == value


def test_scalar_and_array_lab_agree_and_invert() -> None:
    colors = _random_rgb(300, seed=11)
    lab_array = image_to_lab(np.array(colors))
    for rgb, expected in zip(colors, lab_array):
        lab = rgb_to_lab(*rgb)
        assert lab == pytest.approx(tuple(expected), abs=1e-9)
        assert all(abs(a - b) <= 1 for a, b in zip(lab_to_rgb(*lab), rgb)), rgb


def test_lab_reference_points() -> None:
    l_white, a_white, b_white = rgb_to_lab(255, 255, 255)
    assert l_white == pytest.approx(100, abs=0.1)
    assert abs(a_white) < 0.5 and abs(b_white) < 0.5
    assert rgb_to_lab(0, 0, 0)[0] == pytest.approx(0, abs=0.1)
    assert hex_to_lab("#FF0000")[1] > 60


def test_hex_distance_is_euclidean_rgb() -> None:
    assert hex_distance("#000000", "#030400") == pytest.approx(5.0)


@pytest.mark.parametrize(
    "rgb, name",
    [
        ((10, 10, 10), "black"),
        ((250, 250, 250), "white"),
        ((128, 128, 128), "gray"),
        ((230, 30, 30), "red"),
        ((30, 60, 150), "navy"),
        ((30, 200, 60), "green"),
    ],
)
def test_color_name_cascade(rgb, name) -> None:
    assert color_name(*rgb) == name


def test_classify_color_reports_family_and_temperature() -> None:
    classified = classify_color(230, 30, 30)
    assert classified.family == "red"
    assert classified.temperature == "warm"
    assert classify_color(30, 60, 150).temperature == "cool"


def test_skin_predicate() -> None:
    assert is_skin_color(220, 170, 140)
    assert not is_skin_color(70, 110, 180)
    assert not is_skin_color(250, 250, 250)


def test_hair_predicate_keeps_light_warm_pixels() -> None:
    assert is_hair_color(60, 40, 30)
    # Skin-like but in the blonde band: admitted as hair.
    assert is_hair_color(220, 170, 140)
    assert not is_hair_color(250, 250, 250)


def test_eye_predicate_admits_anything_bluish() -> None:
    assert is_bluish(70, 110, 180)
    assert is_eye_color(70, 110, 180)
    assert not is_eye_color(220, 170, 140)
    assert not is_eye_color(5, 5, 5)
