"""Analysis monitor and structured logging helpers."""

from __future__ import annotations

import asyncio
import logging

import pytest

from dripmuse_vision.api import run_monitor_cleanup
from dripmuse_vision.logging_config import CORRELATION_ID, log_event, operation_context
from dripmuse_vision.metrics import ONE_WEEK, AnalysisMonitor


class _Clock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_monitor_keeps_only_the_most_recent_records() -> None:
    monitor = AnalysisMonitor(capacity=1000)
    for _ in range(1005):
        monitor.record("face", "True Winter", 0.8, 0.1)
    assert len(monitor) == 1000


def test_metrics_summarize_by_kind() -> None:
    monitor = AnalysisMonitor(clock=_Clock())
    monitor.record("face", "True Winter", 0.9, 1.0)
    monitor.record("face", "error", 0.0, 3.0, success=False)
    monitor.record("clothing", "tops", 0.6, 2.0)

    face = monitor.get_metrics("face")
    assert face["total_analyses"] == 2
    assert face["success_rate"] == pytest.approx(0.5)
    assert face["average_confidence"] == pytest.approx(0.9)
    assert face["average_processing_time"] == pytest.approx(2.0)
    assert monitor.get_metrics()["category_distribution"] == {"True Winter": 1, "error": 1, "tops": 1}


def test_empty_monitor_has_no_recommendations() -> None:
    monitor = AnalysisMonitor()
    assert monitor.get_metrics()["total_analyses"] == 0
    assert monitor.optimization_recommendations() == []


def test_recommendations_flag_slow_and_failing_runs() -> None:
    monitor = AnalysisMonitor()
    monitor.record("clothing", "tops", 0.4, 9.0)
    monitor.record("clothing", "error", 0.0, 9.0, success=False)
    recommendations = monitor.optimization_recommendations()
    assert len(recommendations) == 3


def test_recent_performance_and_cleanup_follow_the_clock() -> None:
    clock = _Clock()
    monitor = AnalysisMonitor(clock=clock)
    monitor.record("face", "Soft Summer", 0.7, 0.5)

    clock.now += 2 * 60 * 60
    monitor.record("face", "Soft Summer", 0.9, 0.5)
    assert monitor.recent_performance(60)["analyses_in_period"] == 1

    clock.now += ONE_WEEK - 60 * 60
    assert monitor.cleanup() == 1
    assert len(monitor) == 1


def test_scheduled_cleanup_prunes_expired_records() -> None:
    clock = _Clock()
    monitor = AnalysisMonitor(clock=clock)
    monitor.record("clothing", "tops", 0.6, 0.2)
    clock.now += ONE_WEEK + 1

    async def run_briefly() -> None:
        task = asyncio.create_task(run_monitor_cleanup(monitor, 0.01))
        await asyncio.sleep(0.1)
        task.cancel()

    asyncio.run(run_briefly())
    assert len(monitor) == 0


def test_operation_context_scopes_correlation_id() -> None:
    with operation_context("analyze_face", correlation_id="abc123") as correlation_id:
        assert correlation_id == "abc123"
        assert CORRELATION_ID.get() == "abc123"
    assert CORRELATION_ID.get() != "abc123"


def test_log_event_formats_fields(caplog) -> None:
    logger = logging.getLogger("dripmuse_vision.test")
    with caplog.at_level(logging.INFO, logger="dripmuse_vision.test"):
        with operation_context("test", correlation_id="cid-1"):
            log_event(logger, logging.INFO, "clothing_categorized", category="tops", confidence=0.81234)

    record = caplog.records[-1]
    assert record.getMessage() == "clothing_categorized category=tops confidence=0.812"
    assert record.event == "clothing_categorized"
    assert record.correlation_id == "cid-1"
