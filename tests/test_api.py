"""HTTP surface exercised through FastAPI's test client."""

from __future__ import annotations

import cv2
import pytest
from fastapi.testclient import TestClient

from conftest import solid_image
from dripmuse_vision.api import create_app
from dripmuse_vision.config import VisionSettings
from dripmuse_vision.metrics import AnalysisMonitor
from dripmuse_vision.models import CLOTHING_CATEGORIES


def _png(image) -> bytes:
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA))
    assert ok
    return buffer.tobytes()


@pytest.fixture
def monitor() -> AnalysisMonitor:
    return AnalysisMonitor()


@pytest.fixture
def client(landmark_detector, monitor) -> TestClient:
    settings = VisionSettings(enable_landmarks=False, kmeans_seed=1)
    return TestClient(create_app(settings, detector=landmark_detector, monitor=monitor))


def test_root_and_health(client) -> None:
    assert client.get("/").json()["status"] == "operational"
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["components"]["landmark_detector"] == "FakeLandmarkDetector"
    assert health["components"]["vision_service"] == "unavailable"


def test_face_analysis(client, portrait, monitor) -> None:
    response = client.post("/analyze/face", files={"file": ("me.png", _png(portrait), "image/png")})
    assert response.status_code == 200

    body = response.json()
    assert body["status"] == "success"
    assert body["features"]["method"] == "landmarks"
    assert body["features"]["eye_color"]["category"] == "blue"
    assert body["season"]["season"] in {"winter", "summer", "spring", "autumn"}
    assert body["profile"]["recommended_palette"]
    assert 0 <= body["confidence"]["score"] <= 100
    assert body["metadata"]["correlation_id"]
    assert len(monitor) == 1


def test_face_analysis_rejects_undecodable_upload(client) -> None:
    response = client.post("/analyze/face", files={"file": ("me.png", b"junk", "image/png")})
    assert response.status_code == 400


def test_clothing_analysis(client) -> None:
    image = solid_image(120, 240, (30, 60, 150))
    response = client.post(
        "/analyze/clothing",
        files={"file": ("blue_denim_jeans.png", _png(image), "image/png")},
        data={"context_hint": "weekend"},
    )
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["category"] == "bottoms"
    assert result["category"] in CLOTHING_CATEGORIES
    assert result["colors"]


def test_palette(client) -> None:
    image = solid_image(60, 60, (230, 30, 30))
    image[:, 30:, :3] = (20, 40, 200)
    response = client.post(
        "/analyze/palette",
        files={"file": ("swatch.png", _png(image), "image/png")},
        data={"color_count": "3"},
    )
    assert response.status_code == 200
    palette = response.json()["palette"]
    assert palette["method"] == "kmeans-lab"
    assert len(palette["colors"]) == 2


def test_harmony_endpoint(client) -> None:
    pair = client.post("/harmony", json={"colors_a": ["black"], "colors_b": ["coral"]}).json()
    assert pair["harmony"]["harmony_type"] == "neutral"

    outfit = client.post("/harmony", json={"colors": ["coral"]}).json()
    assert outfit["harmony"]["harmony_type"] == "single-color"

    assert client.post("/harmony", json={"colors_a": ["black"]}).status_code == 422


def test_stats_reflect_recorded_analyses(client) -> None:
    image = solid_image(120, 240, (30, 60, 150))
    client.post("/analyze/clothing", files={"file": ("red_shirt.png", _png(image), "image/png")})

    stats = client.get("/stats").json()
    assert stats["overall"]["total_analyses"] == 1
    assert stats["clothing"]["category_distribution"] == {"tops": 1}
    assert stats["face"]["total_analyses"] == 0


def test_lifespan_starts_and_stops_monitor_cleanup(landmark_detector, monitor) -> None:
    settings = VisionSettings(enable_landmarks=False, monitor_cleanup_interval=3600)
    with TestClient(create_app(settings, detector=landmark_detector, monitor=monitor)) as client:
        assert client.get("/health").json()["total_analyses"] == 0


def test_clothing_size_comes_from_the_uploaded_image(client) -> None:
    image = solid_image(1200, 1200, (30, 60, 150))
    response = client.post("/analyze/clothing", files={"file": ("img_0231.png", _png(image), "image/png")})
    assert response.status_code == 200
    result = response.json()["result"]
    assert "squarish/large" in result["reasoning"]
    assert result["category"] == "accessories"


@pytest.mark.parametrize("color_count", ["0", "13", "5625"])
def test_palette_rejects_out_of_range_color_count(client, color_count) -> None:
    image = solid_image(60, 60, (230, 30, 30))
    response = client.post(
        "/analyze/palette",
        files={"file": ("swatch.png", _png(image), "image/png")},
        data={"color_count": color_count},
    )
    assert response.status_code == 422
