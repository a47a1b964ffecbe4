"""Circuit gate: routes dispatches through the breaker when one is configured.

Only transport-level errors count as breaker failures. HTTP error statuses are
successful dispatches as far as the breaker is concerned.
"""
from __future__ import annotations

from typing import Any, Callable

from rest_request.constants import CIRCUIT_OPEN_CONTEXT
from rest_request.domain.dispatcher import DispatchOutcome, Dispatcher
from rest_request.domain.models import Request
from rest_request.ports.circuit_breaker import BreakerError, CircuitBreakerPort, Invocation


class CircuitGate:
    def __init__(
        self,
        dispatcher: Dispatcher,
        breaker: CircuitBreakerPort | None = None,
        *,
        fallback_context: Any = CIRCUIT_OPEN_CONTEXT,
    ) -> None:
        self._dispatcher = dispatcher
        self._breaker = breaker
        self._fallback_context = fallback_context

    @property
    def breaker(self) -> CircuitBreakerPort | None:
        return self._breaker

    async def dispatch(self, current_request: Callable[[], Request]) -> DispatchOutcome:
        """Dispatch the request returned by current_request at the moment the send starts.

        A short-circuited or timed-out call yields an outcome whose error is the
        BreakerError; the breaker has already handed it to the fallback.
        """
        if self._breaker is None:
            return await self._dispatcher.send(current_request())

        async def _protected(invocation: Invocation) -> DispatchOutcome:
            outcome = await self._dispatcher.send(current_request())
            if outcome.failed:
                invocation.notify_failure()
            else:
                invocation.notify_success()
            return outcome

        try:
            return await self._breaker.invoke(_protected, self._fallback_context)
        except BreakerError as exc:
            return DispatchOutcome(data=None, response=None, error=exc)
