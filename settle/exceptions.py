"""Custom exception hierarchy for settle.

All settle-specific exceptions inherit from SettleError, enabling
callers to catch every waiter failure with a single except clause.
Errors raised while a wait is running carry the last observed state
and, where one exists, the last observed resource snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from settle.types import SubError


class SettleError(Exception):
    """Base exception for all settle errors."""


class ConfigurationError(SettleError):
    """Raised for an invalid wait spec, outcome policy or config file."""


class ResourceNotFoundError(SettleError):
    """Raised by a status probe when the polled resource does not exist."""


class ProbeError(SettleError):
    """Raised when the status probe itself fails.

    The original error is chained as ``__cause__``.
    """

    def __init__(self, description: str, state: str | None = None) -> None:
        self.description = description
        self.state = state
        super().__init__(f"Status probe for {description} failed (last state: {state or 'none'})")


class WaitTimeoutError(SettleError, TimeoutError):
    """Raised when the deadline passes while the resource is still pending."""

    def __init__(
        self,
        description: str,
        timeout: float,
        state: str | None = None,
        last: Any = None,
    ) -> None:
        self.description = description
        self.timeout = timeout
        self.state = state
        self.last = last
        super().__init__(
            f"Timeout waiting for {description} after {timeout:.1f}s "
            f"(last state: {state or 'none'})"
        )


class UnexpectedStateError(SettleError):
    """Raised when the probe reports a state outside the pending and target sets."""

    def __init__(
        self,
        description: str,
        state: str,
        expected: Iterable[str] = (),
        last: Any = None,
    ) -> None:
        self.description = description
        self.state = state
        self.expected = tuple(sorted(expected))
        self.last = last
        super().__init__(
            f"Unexpected state '{state}' for {description}, "
            f"wanted one of: {', '.join(self.expected) or 'none'}"
        )


class AggregatedFailureError(SettleError):
    """Raised when a terminal state is the designated failure state.

    Carries every sub-error reported in the resource payload, in encounter order.
    """

    def __init__(
        self,
        context: str,
        state: str,
        errors: Iterable[SubError] = (),
        last: Any = None,
    ) -> None:
        from settle.classify import render_errors

        self.context = context
        self.state = state
        self.errors = tuple(errors)
        self.last = last
        super().__init__(f"{context}: Errors:\n{render_errors(self.errors)}")


class WaitCancelledError(SettleError):
    """Raised when a wait observes its external cancellation signal."""

    def __init__(self, description: str, state: str | None = None) -> None:
        self.description = description
        self.state = state
        super().__init__(f"Wait for {description} cancelled (last state: {state or 'none'})")
