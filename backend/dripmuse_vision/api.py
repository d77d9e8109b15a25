"""FastAPI service exposing the face, clothing, palette and harmony analyzers."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import numpy as np
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .clothing import ClothingCategorizer
from .color_profile import ColorProfileBuilder
from .config import VisionSettings
from .errors import AnalysisTimeout, CapabilityUnavailable, LoadError
from .facial_analysis import FacialFeatureAnalyzer
from .harmony import HarmonyEngine
from .image_io import downscale, load_image
from .landmarks import LandmarkDetector, MediaPipeLandmarkDetector
from .logging_config import configure_logging, log_event, operation_context
from .metrics import AnalysisMonitor
from .palette import MAX_PALETTE_COLORS, extract_palette
from .quality import calculate_overall_confidence, summarize_issues
from .vision_service import HttpVisionService, VisionService

logger = logging.getLogger(__name__)

VERSION = "1.0"


class HarmonyRequest(BaseModel):
    colors_a: Optional[List[str]] = Field(None, description="First colour set (names or hex)")
    colors_b: Optional[List[str]] = Field(None, description="Second colour set")
    colors: Optional[List[str]] = Field(None, description="A single outfit's colours, checked together")
    season: Optional[str] = Field(None, description="Override the calendar season")


def build_detector(settings: VisionSettings) -> Optional[LandmarkDetector]:
    if not settings.enable_landmarks:
        return None
    try:
        return MediaPipeLandmarkDetector(settings.landmark_model_path)
    except CapabilityUnavailable as exc:
        logger.warning("Landmark detection disabled: %s", exc)
        return None


def build_vision_service(settings: VisionSettings) -> Optional[VisionService]:
    if not settings.vision_endpoint:
        return None
    return HttpVisionService(settings.vision_endpoint, settings.vision_api_key, settings.capability_timeout)


async def run_monitor_cleanup(monitor: AnalysisMonitor, interval: float) -> None:
    """Prune expired monitor records every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        removed = monitor.cleanup()
        if removed:
            logger.info("Dropped %d expired analysis records", removed)


def _error_response(exc: Exception, detail: str) -> JSONResponse:
    logger.error("Analysis error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": str(exc), "detail": detail},
    )


def create_app(settings: Optional[VisionSettings] = None,
               detector: Optional[LandmarkDetector] = None,
               vision: Optional[VisionService] = None,
               monitor: Optional[AnalysisMonitor] = None) -> FastAPI:
    """Wire analyzers, monitor and routes. Capabilities not passed in are built from ``settings``."""
    settings = settings or VisionSettings.from_env()
    if detector is None:
        detector = build_detector(settings)
    if vision is None:
        vision = build_vision_service(settings)

    rng = np.random.default_rng(settings.kmeans_seed)
    face_analyzer = FacialFeatureAnalyzer(detector=detector, settings=settings, rng=rng)
    categorizer = ClothingCategorizer(vision=vision, settings=settings)
    harmony = HarmonyEngine()
    profiles = ColorProfileBuilder(harmony)
    if monitor is None:
        monitor = AnalysisMonitor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cleanup_task = asyncio.create_task(run_monitor_cleanup(monitor, settings.monitor_cleanup_interval))
        try:
            yield
        finally:
            cleanup_task.cancel()

    app = FastAPI(
        title="DripMuse Vision API",
        description="Facial colour analysis, clothing categorization and colour harmony",
        version=VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.state.monitor = monitor
    app.state.settings = settings

    async def _load(file: UploadFile, max_dimension: Optional[int] = settings.max_image_dimension) -> np.ndarray:
        contents = await file.read()
        try:
            return load_image(contents, timeout=settings.image_load_timeout, max_dimension=max_dimension)
        except LoadError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except AnalysisTimeout as exc:
            raise HTTPException(status_code=504, detail=str(exc)) from exc

    @app.get("/")
    async def root():
        return {
            "service": "DripMuse Vision API",
            "version": VERSION,
            "status": "operational",
            "endpoints": {
                "/analyze/face": "POST - Skin, hair and eye colours with season and palette",
                "/analyze/clothing": "POST - Clothing category, colours and style",
                "/analyze/palette": "POST - Dominant colour palette",
                "/harmony": "POST - Colour harmony between colour sets",
                "/health": "GET - Component status",
                "/stats": "GET - Analysis statistics",
            },
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": VERSION,
            "timestamp": datetime.now().isoformat(),
            "components": {
                "landmark_detector": type(detector).__name__ if detector else "unavailable",
                "vision_service": type(vision).__name__ if vision else "unavailable",
                "face_analysis": "landmarks+heuristic" if detector else "heuristic",
            },
            "total_analyses": len(monitor),
        }

    @app.get("/stats")
    async def get_statistics():
        return {
            "overall": monitor.get_metrics(),
            "face": monitor.get_metrics("face"),
            "clothing": monitor.get_metrics("clothing"),
            "recent": monitor.recent_performance(60),
            "recommendations": monitor.optimization_recommendations(),
        }

    @app.post("/analyze/face")
    async def analyze_face(file: UploadFile = File(...)):
        start_time = time.time()
        with operation_context("analyze_face") as correlation_id:
            image = await _load(file)
            try:
                report = face_analyzer.analyze_image(image)
                profile = profiles.build(report)
                season = profile.season
                confidence = calculate_overall_confidence(
                    season.temperature_confidence, season.contrast_confidence, report.quality_issues
                )
                processing_time = time.time() - start_time
                monitor.record("face", season.subseason, report.overall_confidence, processing_time,
                               success=report.detected_features)
                log_event(
                    logger,
                    logging.INFO,
                    "face_analysis_served",
                    filename=file.filename,
                    subseason=season.subseason,
                    method=report.method,
                    processing_time=processing_time,
                )
                return {
                    "status": "success",
                    "features": report.to_dict(),
                    "season": season.to_dict(),
                    "profile": profile.to_dict(),
                    "confidence": confidence,
                    "validation_note": summarize_issues(report.quality_issues),
                    "metadata": {
                        "version": VERSION,
                        "timestamp": datetime.now().isoformat(),
                        "correlation_id": correlation_id,
                        "processing_time_seconds": round(processing_time, 3),
                    },
                }
            except Exception as exc:
                monitor.record("face", "error", 0.0, time.time() - start_time, success=False)
                return _error_response(exc, "Analysis failed. Please use a clear, well-lit, front-facing photo.")

    @app.post("/analyze/clothing")
    async def analyze_clothing(file: UploadFile = File(...), context_hint: Optional[str] = Form(None)):
        start_time = time.time()
        with operation_context("analyze_clothing") as correlation_id:
            original = await _load(file, max_dimension=None)
            source_size = (original.shape[1], original.shape[0])
            image = downscale(original, settings.max_image_dimension)
            try:
                result = categorizer.categorize(image, filename=file.filename, context_hint=context_hint,
                                                source_size=source_size)
                processing_time = time.time() - start_time
                monitor.record("clothing", result.category, result.confidence, processing_time)
                return {
                    "status": "success",
                    "result": result.to_dict(),
                    "metadata": {
                        "correlation_id": correlation_id,
                        "processing_time_seconds": round(processing_time, 3),
                    },
                }
            except Exception as exc:
                monitor.record("clothing", "error", 0.0, time.time() - start_time, success=False)
                return _error_response(exc, "Clothing analysis failed.")

    @app.post("/analyze/palette")
    async def analyze_palette(file: UploadFile = File(...),
                              color_count: int = Form(6, ge=1, le=MAX_PALETTE_COLORS)):
        image = await _load(file)
        try:
            palette = extract_palette(image, color_count=color_count, rng=rng)
        except Exception as exc:
            return _error_response(exc, "Palette extraction failed.")
        return {"status": "success", "palette": palette.to_dict()}

    @app.post("/harmony")
    async def analyze_harmony(request: HarmonyRequest):
        if request.colors is not None:
            result = harmony.find_best_harmony(request.colors, season=request.season)
        elif request.colors_a and request.colors_b:
            result = harmony.analyze_harmony(request.colors_a, request.colors_b, season=request.season)
        else:
            raise HTTPException(status_code=422, detail="Provide either colors or both colors_a and colors_b")
        return {"status": "success", "harmony": result.to_dict()}

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = VisionSettings.from_env()
    configure_logging(_settings.log_level, _settings.log_file)
    logger.info("Starting DripMuse Vision API on http://localhost:8000 (docs at /docs)")
    uvicorn.run(create_app(_settings), host="0.0.0.0", port=8000)
