"""Asyncio circuit breaker implementing CircuitBreakerPort.

State machine:
    CLOSED     -> OPEN       when failures inside the rolling window reach max_failures
    OPEN       -> HALF_OPEN  once reset_timeout has elapsed since opening
    HALF_OPEN  -> CLOSED     when the single trial call succeeds
    HALF_OPEN  -> OPEN       when the trial call fails or times out

An operation that outlives the timeout is not cancelled; it is left to finish and
its result and notifications are ignored.
"""
from __future__ import annotations

import asyncio
import time
from collections import deque
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from rest_request.constants import SERVICE_NAME
from rest_request.domain.models import CircuitParameters
from rest_request.ports.circuit_breaker import (
    BreakerError,
    BreakerErrorKind,
    CircuitBreakerPort,
    Invocation,
)

R = TypeVar("R")


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class _BreakerInvocation:
    """Invocation handle bound to one protected call."""

    def __init__(self, breaker: "CircuitBreaker") -> None:
        self._breaker = breaker
        self.completed = False

    def notify_success(self) -> None:
        if self.completed:
            return
        self.completed = True
        self._breaker._record_success()

    def notify_failure(self) -> None:
        if self.completed:
            return
        self.completed = True
        self._breaker._record_failure()

    def abandon(self) -> None:
        self.completed = True


class CircuitBreaker(CircuitBreakerPort):
    def __init__(
        self,
        parameters: CircuitParameters,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fallback = parameters.fallback
        self._timeout_seconds = parameters.timeout_ms / 1000.0
        self._reset_timeout_seconds = parameters.reset_timeout_ms / 1000.0
        self._rolling_window_seconds = parameters.rolling_window_ms / 1000.0
        self._max_failures = parameters.max_failures
        self._semaphore = (
            asyncio.Semaphore(parameters.bulkhead_size) if parameters.bulkhead_size > 0 else None
        )
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failures: deque[float] = deque()
        self._opened_at: float | None = None
        self._trial_in_flight = False
        # late operations abandoned after a timeout; referenced until they finish
        self._abandoned: set[asyncio.Future[Any]] = set()

    @property
    def state(self) -> CircuitState:
        self._refresh_state()
        return self._state

    @property
    def failure_count(self) -> int:
        self._prune_failures(self._clock())
        return len(self._failures)

    def force_open(self) -> None:
        self._open("forced")

    async def invoke(
        self,
        operation: Callable[[Invocation], Awaitable[R]],
        fallback_context: Any,
    ) -> R:
        if self._semaphore is None:
            return await self._run(operation, fallback_context)
        async with self._semaphore:
            return await self._run(operation, fallback_context)

    async def _run(self, operation: Callable[[Invocation], Awaitable[R]], fallback_context: Any) -> R:
        self._refresh_state()
        if self._state is CircuitState.OPEN or (
            self._state is CircuitState.HALF_OPEN and self._trial_in_flight
        ):
            _log("circuit_short_circuited", state=self._state.value)
            raise self._reject(BreakerErrorKind.FAST_FAIL, fallback_context)

        if self._state is CircuitState.HALF_OPEN:
            self._trial_in_flight = True

        invocation = _BreakerInvocation(self)
        task = asyncio.ensure_future(operation(invocation))
        done, _ = await asyncio.wait({task}, timeout=self._timeout_seconds)

        if task not in done:
            invocation.abandon()
            self._abandoned.add(task)
            task.add_done_callback(self._discard_abandoned)
            _log("circuit_timeout", timeout_seconds=self._timeout_seconds)
            self._record_failure()
            raise self._reject(BreakerErrorKind.TIMEOUT, fallback_context)

        try:
            result = task.result()
        except Exception:
            invocation.notify_failure()
            raise
        if not invocation.completed:
            invocation.notify_success()
        return result

    def _reject(self, kind: BreakerErrorKind, fallback_context: Any) -> BreakerError:
        error = BreakerError(kind)
        try:
            self._fallback(error, fallback_context)
        except Exception as exc:
            logger.exception("circuit fallback failed: {}", exc)
        return error

    def _discard_abandoned(self, task: asyncio.Future[Any]) -> None:
        self._abandoned.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("abandoned operation failed: {}", task.exception())

    def _prune_failures(self, now: float) -> None:
        horizon = now - self._rolling_window_seconds
        while self._failures and self._failures[0] <= horizon:
            self._failures.popleft()

    def _refresh_state(self) -> None:
        if self._state is CircuitState.OPEN and self._opened_at is not None:
            if self._clock() - self._opened_at >= self._reset_timeout_seconds:
                self._state = CircuitState.HALF_OPEN
                self._trial_in_flight = False
                _log("circuit_half_open")

    def _record_success(self) -> None:
        if self._state is CircuitState.HALF_OPEN:
            self._close("trial call succeeded")

    def _record_failure(self) -> None:
        now = self._clock()
        self._failures.append(now)
        self._prune_failures(now)
        if self._state is CircuitState.HALF_OPEN:
            self._open("trial call failed")
        elif self._state is CircuitState.CLOSED and len(self._failures) >= self._max_failures:
            self._open(f"{len(self._failures)} failures in rolling window")

    def _open(self, reason: str) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._trial_in_flight = False
        _log("circuit_opened", reason=reason)

    def _close(self, reason: str) -> None:
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._trial_in_flight = False
        self._failures.clear()
        _log("circuit_closed", reason=reason)
