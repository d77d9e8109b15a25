"""Region sampling, k-means and lighting correction."""

from __future__ import annotations

import numpy as np
import pytest

from conftest import solid_image
from dripmuse_vision.clustering import dominant_color, farthest_point_centroids, kmeans
from dripmuse_vision.lighting import analyze_lighting, normalize_samples
from dripmuse_vision.models import ColorSample, LightingProfile
from dripmuse_vision.sampler import Polygon, Rect, full_frame, sample_array, sample_pixels


def test_rect_sampling_uses_stride_and_clips_to_image() -> None:
    image = solid_image(10, 10, (1, 2, 3))
    points = sample_array(image, Rect(-5, -5, 10, 10), stride=1)
    assert points.shape == (25, 3)
    assert len(sample_array(image, Rect(0, 0, 10, 10))) == 25


def test_transparent_pixels_are_dropped() -> None:
    image = solid_image(8, 8, (200, 100, 50))
    image[:4, :, 3] = 0
    points = sample_array(image, full_frame(image), stride=1)
    assert len(points) == 32


def test_region_outside_image_yields_no_samples() -> None:
    image = solid_image(8, 8, (200, 100, 50))
    assert len(sample_array(image, Rect(20, 20, 5, 5))) == 0
    assert sample_pixels(image, Polygon.of([(1, 1), (2, 2)])) == []


def test_polygon_membership() -> None:
    square = Polygon.of([(0, 0), (10, 0), (10, 10), (0, 10)])
    inside = square.contains(np.array([5.0, 15.0]), np.array([5.0, 5.0]))
    assert inside.tolist() == [True, False]


def test_uniform_samples_cluster_to_the_exact_color() -> None:
    samples = [ColorSample(120, 80, 40)] * 50
    cluster = dominant_color(samples, k=3, seed=7)
    assert cluster.rgb == (120, 80, 40)
    assert cluster.mass == 50


def test_no_samples_gives_no_cluster() -> None:
    assert dominant_color([], k=3) is None
    assert kmeans(np.empty((0, 3)), k=3) == []


def test_clusters_are_ordered_by_mass() -> None:
    points = np.array([[250, 10, 10]] * 30 + [[10, 10, 250]] * 10, dtype=np.float64)
    clusters = kmeans(points, k=2, init="farthest")
    assert [c.rgb for c in clusters] == [(250, 10, 10), (10, 10, 250)]
    assert clusters[0].mass == 30


def test_seeded_runs_are_reproducible() -> None:
    rng = np.random.default_rng(0)
    points = rng.integers(0, 256, size=(200, 3)).astype(np.float64)
    first = kmeans(points, k=4, space="lab", seed=11)
    second = kmeans(points, k=4, space="lab", seed=11)
    assert [c.rgb for c in first] == [c.rgb for c in second]


def test_farthest_seeding_stops_on_duplicates() -> None:
    points = np.array([[1.0, 1.0, 1.0]] * 5)
    assert len(farthest_point_centroids(points, 3)) == 1


def test_unknown_space_is_rejected() -> None:
    with pytest.raises(ValueError):
        kmeans([ColorSample(1, 2, 3)], space="hsv")


def test_dark_frame_is_flagged_and_brightened() -> None:
    image = solid_image(40, 40, (40, 30, 20))
    image[:20, :, :3] = (10, 10, 10)
    profile = analyze_lighting(image)
    assert "low-light" in profile.conditions

    corrected = normalize_samples(np.array([[40.0, 30.0, 20.0]]), profile)
    assert corrected[0, 0] > 40


def test_samples_pass_through_without_conditions() -> None:
    profile = LightingProfile(150.0, 120.0, 0.5, 0.2, 0.2)
    points = np.array([[10.0, 20.0, 30.0]])
    assert np.array_equal(normalize_samples(points, profile), points)


def test_warm_cast_correction_is_gentle() -> None:
    profile = LightingProfile(150.0, 120.0, 0.5, 0.9, 0.0, ("warm-cast",), (200.0, 150.0, 100.0))
    corrected = normalize_samples(np.array([[200.0, 150.0, 100.0]]), profile)
    assert corrected[0, 0] == pytest.approx(186.0)
    assert corrected[0, 2] == pytest.approx(112.0)
