"""Ordered fallback strategies and timeout wrapping for capability calls."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

from .errors import AnalysisTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    strategy: str
    value: T


@dataclass(frozen=True)
class Failure:
    strategy: str
    reason: str
    error: Optional[BaseException] = None


Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class Strategy:
    """A named step in a fallback chain.

    ``fn`` may return a plain value (success), ``None`` (failure) or an
    explicit :class:`Success`/:class:`Failure`. Exceptions become failures.
    """

    name: str
    fn: Callable[..., Any]

    def attempt(self, *args, **kwargs) -> Outcome:
        try:
            result = self.fn(*args, **kwargs)
        except Exception as exc:
            logger.warning("Strategy %s failed: %s", self.name, exc, exc_info=True)
            return Failure(self.name, str(exc) or type(exc).__name__, exc)

        if isinstance(result, (Success, Failure)):
            return result
        if result is None:
            return Failure(self.name, "no result")
        return Success(self.name, result)


def first_success(strategies: Sequence[Strategy], *args, **kwargs) -> Outcome:
    """Run strategies in order and return the first success, else the last failure."""
    outcome: Outcome = Failure("none", "no strategies configured")
    for strategy in strategies:
        outcome = strategy.attempt(*args, **kwargs)
        if isinstance(outcome, Success):
            return outcome
        logger.info("Falling back after %s: %s", outcome.strategy, outcome.reason)
    return outcome


def call_with_timeout(fn: Callable[..., T], timeout: Optional[float], *args, **kwargs) -> T:
    """Run ``fn`` and raise :class:`AnalysisTimeout` if it exceeds ``timeout`` seconds.

    The worker thread is abandoned on timeout; the call itself cannot be
    interrupted.
    """
    if timeout is None:
        return fn(*args, **kwargs)

    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(fn, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeout:
        future.cancel()
        name = getattr(fn, "__name__", repr(fn))
        raise AnalysisTimeout(f"{name} exceeded {timeout:.1f}s") from None
    finally:
        executor.shutdown(wait=False)


__all__ = ["Failure", "Outcome", "Strategy", "Success", "call_with_timeout", "first_success"]
