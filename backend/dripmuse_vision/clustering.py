"""Small k-means over RGB or CIELAB colour samples."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .color_space import image_to_lab, lab_to_rgb
from .models import ColorCluster

logger = logging.getLogger(__name__)

SPACES = ("rgb", "lab")


def _as_arrays(samples):
    """Return ``(points, weights)`` for a list of samples or an ``(n, 3|4)`` array."""
    if isinstance(samples, np.ndarray):
        arr = samples.astype(np.float64, copy=False)
        if arr.size == 0:
            return np.empty((0, 3)), np.empty(0)
        weights = arr[:, 3] if arr.shape[1] > 3 else np.ones(len(arr))
        return arr[:, :3], weights

    samples = list(samples)
    if not samples:
        return np.empty((0, 3)), np.empty(0)
    points = np.array([[s.r, s.g, s.b] for s in samples], dtype=np.float64)
    weights = np.array([getattr(s, "weight", 1.0) for s in samples], dtype=np.float64)
    return points, weights


def farthest_point_centroids(points, k):
    """Deterministic seeding: start at the first point, then repeatedly take the farthest."""
    chosen = [0]
    distances = np.linalg.norm(points - points[0], axis=1)
    while len(chosen) < min(k, len(points)):
        idx = int(np.argmax(distances))
        if distances[idx] == 0:
            break
        chosen.append(idx)
        distances = np.minimum(distances, np.linalg.norm(points - points[idx], axis=1))
    return points[chosen].copy()


def _random_centroids(points, k, rng):
    indices = rng.choice(len(points), size=min(k, len(points)), replace=False)
    return points[indices].copy()


def kmeans(samples, k: int = 3, max_iterations: int = 10, space: str = "rgb",
           weighted: bool = False, rng: Optional[np.random.Generator] = None,
           seed: Optional[int] = None, init: str = "random") -> List[ColorCluster]:
    """Cluster colour samples and return clusters ordered by descending mass.

    Always runs ``max_iterations`` rounds. Empty clusters are dropped from the
    result. ``rng`` (or ``seed``) controls the random initialisation; pass
    ``init="farthest"`` for a fully deterministic run.
    """
    if space not in SPACES:
        raise ValueError(f"Unknown colour space: {space}")

    points_rgb, weights = _as_arrays(samples)
    if len(points_rgb) == 0 or k <= 0:
        return []
    if not weighted:
        weights = np.ones(len(points_rgb))

    points = image_to_lab(points_rgb) if space == "lab" else points_rgb

    if init == "farthest":
        centroids = farthest_point_centroids(points, k)
    else:
        rng = rng if rng is not None else np.random.default_rng(seed)
        centroids = _random_centroids(points, k, rng)

    labels = np.zeros(len(points), dtype=int)
    for _ in range(max_iterations):
        distances = np.linalg.norm(points[:, np.newaxis, :] - centroids[np.newaxis, :, :], axis=2)
        labels = np.argmin(distances, axis=1)
        for j in range(len(centroids)):
            members = labels == j
            mass = weights[members].sum()
            if mass > 0:
                centroids[j] = np.average(points[members], axis=0, weights=weights[members])

    clusters = []
    for j in range(len(centroids)):
        members = labels == j
        mass = float(weights[members].sum())
        if mass <= 0:
            continue
        if space == "lab":
            lab = tuple(float(v) for v in centroids[j])
            r, g, b = lab_to_rgb(*lab)
        else:
            mean_rgb = np.average(points_rgb[members], axis=0, weights=weights[members])
            r, g, b = (int(round(v)) for v in mean_rgb)
            lab = tuple(float(v) for v in image_to_lab(np.array([[r, g, b]]))[0])
        clusters.append(ColorCluster(r=r, g=g, b=b, mass=mass, lab=lab))

    clusters.sort(key=lambda c: c.mass, reverse=True)
    return clusters


def dominant_color(samples, k: int = 3, **kwargs) -> Optional[ColorCluster]:
    """Centroid of the heaviest cluster, or ``None`` for no samples."""
    clusters = kmeans(samples, k=k, **kwargs)
    return clusters[0] if clusters else None


__all__ = ["dominant_color", "farthest_point_centroids", "kmeans"]
