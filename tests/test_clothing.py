"""Clothing categorization: filename, shape, vision-service and hint votes."""

from __future__ import annotations

import datetime

import pytest

from conftest import FakeVisionService, solid_image, vision_result
from dripmuse_vision.clothing import (
    ClothingCategorizer,
    analyze_filename,
    aspect_bucket,
    extract_colors,
    filter_background_colors,
    size_bucket,
    texture_features,
    tokenize_filename,
)
from dripmuse_vision.errors import CapabilityUnavailable
from dripmuse_vision.models import CLOTHING_CATEGORIES, NOT_CLOTHING


def _categorizer(**kwargs) -> ClothingCategorizer:
    return ClothingCategorizer(today=lambda: datetime.date(2025, 1, 15), **kwargs)


def test_tokenize_drops_extensions_digits_and_fragments() -> None:
    assert tokenize_filename("IMG_0231.JPG") == ["img"]
    assert tokenize_filename("Blue-Denim_Jeans v2.png") == ["blue", "denim", "jeans"]


def test_filename_scores_exact_primary_keywords_highest() -> None:
    info = analyze_filename("blue_denim_jeans.jpg")
    assert info.scores["bottoms"] == pytest.approx(1.0)
    assert info.keywords["bottoms"] == ("denim", "jeans")
    assert not info.non_clothing


@pytest.mark.parametrize(
    "filename, scores",
    [
        ("bootcut.jpg", {"bottoms": 0.5}),
        ("capri.jpg", {"bottoms": 0.5}),
        ("tshirts.jpg", {"tops": 0.6}),
    ],
)
def test_exact_keywords_take_priority_over_substrings(filename, scores) -> None:
    assert analyze_filename(filename).scores == pytest.approx(scores)


def test_capri_filename_is_bottoms() -> None:
    assert _categorizer().categorize(filename="capri.jpg").category == "bottoms"


def test_non_clothing_only_without_clothing_keywords() -> None:
    assert analyze_filename("my_dog_at_the_beach.jpg").non_clothing
    assert not analyze_filename("dog_print_shirt.jpg").non_clothing


def test_jeans_filename_alone() -> None:
    result = _categorizer().categorize(filename="blue_denim_jeans.jpg")

    assert result.is_clothing
    assert result.category == "bottoms"
    assert result.subcategory == "jeans"
    assert result.confidence == pytest.approx(0.8)
    assert result.colors == ["blue"]
    assert result.materials == ["denim"]
    assert result.detection_methods == ["filename"]


def test_meaningless_filename_leans_on_image_shape() -> None:
    image = solid_image(400, 150, (30, 60, 150))
    result = _categorizer().categorize(image, filename="img_0231.jpg")

    assert result.category == "shoes"
    assert result.confidence == pytest.approx(0.3)
    assert result.detection_methods == ["image-properties"]
    assert result.colors == ["navy"]
    assert result.patterns == ["solid"]


def test_size_bucket_uses_the_original_dimensions() -> None:
    image = solid_image(240, 240, (30, 60, 150))
    categorizer = _categorizer()

    assert "squarish/small" in categorizer.image_vote(image).reasoning
    assert "squarish/large" in categorizer.image_vote(image, source_size=(1200, 1200)).reasoning


def test_non_clothing_filename_short_circuits() -> None:
    vision = FakeVisionService(vision_result("tops", 0.9))
    result = _categorizer(vision=vision).categorize(solid_image(50, 50, (200, 30, 30)), filename="cat_photo.png")

    assert result.is_clothing is False
    assert result.category == NOT_CLOTHING
    assert result.confidence == pytest.approx(0.8)
    assert vision.calls == []


def test_vision_service_outvotes_shape() -> None:
    vision = FakeVisionService(vision_result("dresses", 0.9))
    result = _categorizer(vision=vision).categorize(solid_image(300, 300, (20, 20, 20)))

    assert result.category == "dresses"
    assert result.detection_methods == ["ai-analysis"]
    assert result.confidence == pytest.approx(0.7875, abs=1e-3)
    assert vision.calls == [None]


def test_vision_failure_is_just_a_missing_vote() -> None:
    vision = FakeVisionService(error=CapabilityUnavailable("schema mismatch"))
    result = _categorizer(vision=vision).categorize(solid_image(300, 300, (20, 20, 20)), filename="red_hoodie.jpg")

    assert result.category == "tops"
    assert "ai-analysis" not in result.detection_methods


def test_context_hint_votes() -> None:
    result = _categorizer().categorize(context_hint="Evening dress for a wedding")
    assert result.category == "dresses"
    assert result.detection_methods == ["context"]
    assert result.style == "elegant"


def test_nothing_to_go_on_returns_default() -> None:
    result = _categorizer().categorize()

    assert result.category == "tops"
    assert result.subcategory == "t-shirt"
    assert result.confidence == pytest.approx(0.3)
    assert result.colors == ["blue"]
    assert result.seasons[:2] == ["winter", "spring"]


@pytest.mark.parametrize(
    "filename",
    ["running_sneakers.png", "silk_blouse.jpg", "winter_parka.jpg", "leather_belt.jpg", "maxi_dress.jpg", "x.jpg"],
)
def test_results_stay_inside_the_category_set(filename) -> None:
    image = solid_image(120, 200, (180, 40, 40))
    result = _categorizer().categorize(image, filename=filename)

    assert result.category in CLOTHING_CATEGORIES
    assert 0.3 <= result.confidence <= 0.95
    assert result.colors
    assert result.seasons


def test_filter_background_colors_is_idempotent() -> None:
    once = filter_background_colors(["white", "red", "gray", "navy"])
    assert once == ["red", "navy"]
    assert filter_background_colors(once) == once
    assert filter_background_colors(["white", "cream"]) == ["white"]
    assert filter_background_colors([]) == ["neutral"]


def test_extract_colors_ignores_white_backdrop() -> None:
    image = solid_image(100, 100, (250, 250, 250))
    image[20:80, 20:80, :3] = (200, 20, 20)
    assert extract_colors(image)[0] == "red"


def test_shape_buckets() -> None:
    assert aspect_bucket(400, 150) == "very-wide"
    assert aspect_bucket(300, 200) == "wide"
    assert aspect_bucket(200, 200) == "squarish"
    assert aspect_bucket(120, 200) == "tall"
    assert aspect_bucket(80, 200) == "very-tall"
    assert size_bucket(400, 400) == "small"
    assert size_bucket(800, 800) == "medium"
    assert size_bucket(1200, 1000) == "large"


def test_texture_features_on_stripes() -> None:
    image = solid_image(100, 100, (255, 255, 255))
    image[::10, :, :3] = 0
    features = texture_features(image)
    assert features.horizontal_ratio > 1.3
    assert features.edge_density > 0
    assert 0.0 <= features.symmetry <= 1.0
