"""Palette extraction and the HTTP image-annotation client."""

from __future__ import annotations

import logging

import numpy as np
import pytest
import requests

from conftest import solid_image
from dripmuse_vision import vision_service
from dripmuse_vision.errors import CapabilityUnavailable
from dripmuse_vision.palette import FALLBACK_PALETTE, MAX_PALETTE_COLORS, extract_palette
from dripmuse_vision.vision_service import (
    AnnotateResponse,
    HttpVisionService,
    category_for_label,
    result_from_annotations,
)


class _FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


GOOD_PAYLOAD = {
    "responses": [
        {
            "labelAnnotations": [
                {"description": "Jeans", "score": 0.93},
                {"description": "Denim", "score": 0.88},
                {"description": "Sky", "score": 0.2},
            ],
            "imagePropertiesAnnotation": {
                "dominantColors": {"colors": [{"color": {"red": 30, "green": 60, "blue": 150}, "score": 0.7}]}
            },
        }
    ]
}


def test_two_color_image_yields_two_palette_entries() -> None:
    image = solid_image(60, 60, (230, 30, 30))
    image[:, 30:, :3] = (20, 40, 200)
    palette = extract_palette(image, color_count=4, seed=5)

    assert palette.method == "kmeans-lab"
    assert len(palette.colors) == 2
    assert palette.confidence == pytest.approx(0.75)


def test_color_count_is_capped() -> None:
    image = solid_image(60, 60, (230, 30, 30))
    image[:, 30:, :3] = (20, 40, 200)
    palette = extract_palette(image, color_count=5000, seed=5)

    assert 1 <= len(palette.colors) <= 2
    expected = 0.5 + len(palette.colors) / (2 * MAX_PALETTE_COLORS)
    assert palette.confidence == pytest.approx(round(expected, 3))


def test_fully_transparent_image_uses_fallback_palette() -> None:
    image = solid_image(20, 20, (100, 100, 100), alpha=0)
    palette = extract_palette(image)
    assert palette.method == "fallback"
    assert palette.colors == FALLBACK_PALETTE
    assert palette.confidence == pytest.approx(0.3)


def test_label_mapping() -> None:
    assert category_for_label("Jeans") == "bottoms"
    assert category_for_label("Leather jacket") == "outerwear"
    assert category_for_label("Sky") is None


def test_annotations_map_to_result() -> None:
    result = result_from_annotations(AnnotateResponse.model_validate(GOOD_PAYLOAD["responses"][0]))
    assert result.category == "bottoms"
    assert result.subcategory == "jeans"
    assert result.colors == ["navy"]
    assert result.confidence == pytest.approx(0.905)


def test_http_client_parses_payload(monkeypatch) -> None:
    seen = {}

    def fake_post(url, json=None, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout, features=json["requests"][0]["features"])
        return _FakeResponse(GOOD_PAYLOAD)

    monkeypatch.setattr(vision_service.requests, "post", fake_post)
    client = HttpVisionService("https://vision.test/v1/images:annotate", api_key="k", timeout=3.0)
    result = client.analyze(solid_image(32, 32, (30, 60, 150)), "jeans.jpg")

    assert result.category == "bottoms"
    assert seen["params"] == {"key": "k"}
    assert seen["timeout"] == 3.0
    assert len(seen["features"]) == 3


@pytest.mark.parametrize(
    "payload",
    [
        {"responses": [{"labelAnnotations": [{"score": "high"}]}]},
        {"unexpected": True},
        ValueError("not json"),
    ],
)
def test_http_client_rejects_malformed_payloads(monkeypatch, payload) -> None:
    monkeypatch.setattr(vision_service.requests, "post", lambda *a, **k: _FakeResponse(payload))
    client = HttpVisionService("https://vision.test/v1/images:annotate")
    with pytest.raises(CapabilityUnavailable):
        client.analyze(np.zeros((8, 8, 4), dtype=np.uint8))


def test_http_client_wraps_transport_errors(monkeypatch) -> None:
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(vision_service.requests, "post", fake_post)
    with pytest.raises(CapabilityUnavailable):
        HttpVisionService("https://vision.test").analyze(np.zeros((8, 8, 4), dtype=np.uint8))


def test_http_client_returns_none_for_empty_batch(monkeypatch) -> None:
    monkeypatch.setattr(vision_service.requests, "post", lambda *a, **k: _FakeResponse({"responses": []}))
    assert HttpVisionService("https://vision.test").analyze(np.zeros((8, 8, 4), dtype=np.uint8)) is None


def test_http_client_logs_through_module_logger(monkeypatch, caplog) -> None:
    monkeypatch.setattr(vision_service.requests, "post", lambda *a, **k: _FakeResponse(GOOD_PAYLOAD))
    with caplog.at_level(logging.INFO, logger="dripmuse_vision.vision_service"):
        HttpVisionService("https://vision.test").analyze(solid_image(16, 16, (30, 60, 150)), "jeans.jpg")

    assert vision_service.logger.name == "dripmuse_vision.vision_service"
    assert any(r.getMessage() == "Requesting image annotations for jeans.jpg" for r in caplog.records)
