"""
Step timing for dispatch logs.

``log_step`` wraps a block in a span: nested log lines carry its
``span_id``, and one ``<event>.end`` (or ``<event>.error``) line reports the
duration. ``timed_block`` only measures.

    with log_step("operation.run", operation="roadmap-sync") as span:
        results = await operation.run(ctx)
        span.add_metric("tasks_run", len(results))

    DEBUG operation.run.start span_id=1f2e3d4c operation=roadmap-sync
    INFO  operation.run.end   span_id=1f2e3d4c duration_ms=12.4 tasks_run=2

Both are plain context managers. Wrapping ``await`` is fine: the span
lives in a contextvar, so concurrent operations keep separate spans.
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from opsbot.framework.logging.context import get_context, get_logger, push_context


@dataclass
class TimingResult:
    """Measured span: start/stop clock, metrics, and the error that ended it."""

    step: str
    parent_span_id: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    started_at: float = field(default_factory=time.perf_counter)
    ended_at: float | None = None
    error: BaseException | None = None

    def stop(self) -> "TimingResult":
        if self.ended_at is None:
            self.ended_at = time.perf_counter()
        return self

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; still running spans report time so far."""
        end = self.ended_at if self.ended_at is not None else time.perf_counter()
        return (end - self.started_at) * 1000

    def add_metric(self, key: str, value: Any) -> "TimingResult":
        self.metrics[key] = value
        return self

    def log_fields(self) -> dict[str, Any]:
        """Key/value pairs for the closing log line."""
        fields: dict[str, Any] = {"span_id": self.span_id, "duration_ms": round(self.duration_ms, 2)}
        if self.parent_span_id:
            fields["parent_span_id"] = self.parent_span_id
        fields.update(self.metrics)
        if self.error is not None:
            fields["status"] = "error"
            fields["error_type"] = type(self.error).__name__
            fields["error_message"] = str(self.error)
        return fields


@contextmanager
def timed_block(step: str = "unnamed") -> Iterator[TimingResult]:
    """Measure a block without logging or opening a span."""
    timer = TimingResult(step=step, parent_span_id=get_context().span_id)
    try:
        yield timer
    finally:
        timer.stop()


@contextmanager
def log_step(event: str, log_start: bool = True, level: str = "info", **metrics: Any) -> Iterator[TimingResult]:
    """
    Open a span around a block and log its outcome.

    Logs ``<event>.start`` at DEBUG, then ``<event>.end`` at ``level`` or
    ``<event>.error`` at ERROR. Exceptions are re-raised.
    """
    log = get_logger("opsbot.timing")
    timer = TimingResult(step=event, parent_span_id=get_context().span_id, metrics=dict(metrics))
    token = push_context(span_id=timer.span_id, parent_span_id=timer.parent_span_id, step=event)

    try:
        if log_start:
            log.debug(f"{event}.start", span_id=timer.span_id, **metrics)
        yield timer
    except Exception as e:
        timer.error = e
        timer.stop()
        log.error(f"{event}.error", **timer.log_fields())
        raise
    finally:
        timer.stop()
        token.restore()

    getattr(log, level)(f"{event}.end", **timer.log_fields())
