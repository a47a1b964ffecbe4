"""Circuit breaker port: the protected-invoke primitive consumed by the circuit gate."""
from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

R = TypeVar("R")


class BreakerErrorKind(str, Enum):
    TIMEOUT = "timeout"
    FAST_FAIL = "fast_fail"


class BreakerError(Exception):
    """Why the breaker did not deliver an operation result."""

    def __init__(self, kind: BreakerErrorKind) -> None:
        super().__init__(f"circuit breaker {kind.value}")
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BreakerError):
            return NotImplemented
        return self.kind is other.kind

    def __hash__(self) -> int:
        return hash(self.kind)


@runtime_checkable
class Invocation(Protocol):
    """Handle an operation uses to report its outcome. Only the first report counts."""

    def notify_success(self) -> None: ...

    def notify_failure(self) -> None: ...


@runtime_checkable
class CircuitBreakerPort(Protocol):
    """Port: run an operation zero or one times depending on breaker state."""

    async def invoke(
        self,
        operation: Callable[[Invocation], Awaitable[R]],
        fallback_context: Any,
    ) -> R:
        """Return the operation's result.

        When the operation is not run (open circuit) or does not finish in time, the
        configured fallback is called with (BreakerError, fallback_context) and the
        same BreakerError is then raised.
        """
        ...
