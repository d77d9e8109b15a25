"""In-process record of recent analyses for the ``/stats`` endpoint."""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

ONE_WEEK = 7 * 24 * 60 * 60


@dataclass(frozen=True)
class AnalysisRecord:
    timestamp: float
    kind: str
    category: str
    confidence: float
    processing_time: float
    success: bool


class AnalysisMonitor:
    """Thread-safe ring buffer of the last ``capacity`` analyses."""

    def __init__(self, capacity: int = 1000, max_age: float = ONE_WEEK,
                 clock: Callable[[], float] = time.time):
        self._records = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self.max_age = max_age
        self.clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def record(self, kind: str, category: str, confidence: float, processing_time: float,
               success: bool = True) -> AnalysisRecord:
        entry = AnalysisRecord(self.clock(), kind, category, float(confidence), float(processing_time), success)
        with self._lock:
            self._records.append(entry)
        return entry

    def _snapshot(self, kind: Optional[str] = None) -> List[AnalysisRecord]:
        with self._lock:
            records = list(self._records)
        if kind is not None:
            records = [r for r in records if r.kind == kind]
        return records

    def get_metrics(self, kind: Optional[str] = None) -> Dict[str, object]:
        records = self._snapshot(kind)
        successful = [r for r in records if r.success]
        total = len(records)
        return {
            "total_analyses": total,
            "success_rate": len(successful) / total if total else 0.0,
            "average_confidence": (
                sum(r.confidence for r in successful) / len(successful) if successful else 0.0
            ),
            "category_distribution": dict(Counter(r.category for r in records).most_common()),
            "average_processing_time": sum(r.processing_time for r in records) / total if total else 0.0,
        }

    def recent_performance(self, minutes: float = 60) -> Dict[str, object]:
        cutoff = self.clock() - minutes * 60
        recent = [r for r in self._snapshot() if r.timestamp > cutoff]
        successful = [r for r in recent if r.success]
        return {
            "analyses_in_period": len(recent),
            "average_confidence": (
                sum(r.confidence for r in successful) / len(successful) if successful else 0.0
            ),
            "success_rate": len(successful) / len(recent) if recent else 0.0,
        }

    def optimization_recommendations(self) -> List[str]:
        stats = self.get_metrics()
        if not stats["total_analyses"]:
            return []

        recommendations = []
        if stats["average_processing_time"] > 5.0:
            recommendations.append("Analysis taking longer than expected - check image sizes and network")
        if stats["success_rate"] < 0.8:
            recommendations.append("High failure rate detected - review image quality requirements")
        if stats["average_confidence"] < 0.6:
            recommendations.append("Low confidence scores - encourage clearer, well-lit photos")
        return recommendations

    def cleanup(self) -> int:
        """Drop records older than ``max_age``; returns how many were removed."""
        cutoff = self.clock() - self.max_age
        with self._lock:
            kept = [r for r in self._records if r.timestamp > cutoff]
            removed = len(self._records) - len(kept)
            self._records.clear()
            self._records.extend(kept)
        return removed


__all__ = ["AnalysisMonitor", "AnalysisRecord"]
