"""Call timing for service operations, switched on by ``--verbose``.

A traced call that runs inside another traced call (``BatchService.replay``
placing orders through ``OrderService``) is recorded as a child span, so
the outermost result carries the whole call tree in
``meta["telemetry"]``. When telemetry is off the decorator costs one
ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from pcorder.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active_span", default=None)

log = structlog.get_logger("pcorder.telemetry")


@dataclass
class Span:
    name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    children: list[Span] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _open_span(name: str) -> Iterator[Span]:
    span = Span(name=name)
    parent = _active.get()
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.end_time = time.perf_counter()
        _active.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time *func*; attach the span to its ServiceResult when it is the outermost call."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        outermost = _active.get() is None
        try:
            with _open_span(func.__qualname__) as span:
                result = func(*args, **kwargs)
        except Exception:
            log.debug("span.failed", span_name=func.__qualname__)
            raise

        ok = not isinstance(result, ServiceResult) or result.ok
        log.debug("span.complete", span_name=span.name, duration_ms=round(span.duration_ms, 2), ok=ok)

        if outermost and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn on span recording for the current context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
