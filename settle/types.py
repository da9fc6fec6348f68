"""Core value types shared by the waiter engine and the outcome classifier.

PollResult is what a probe returns on every cycle, WaitSpec is the
immutable per-call configuration, and WaitOutcome is what a completed
wait hands back to its caller.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from settle.exceptions import ConfigurationError, ResourceNotFoundError

type NotFoundPolicy = Callable[[BaseException], bool]


@dataclass(frozen=True, slots=True)
class PollResult[T]:
    """One probe observation: the opaque resource snapshot and its state."""

    value: T
    state: str


type Probe[T] = Callable[[], Awaitable[PollResult[T]]]


@dataclass(frozen=True, slots=True)
class SubError:
    """A single code/message pair embedded in a failed resource payload."""

    code: str | None
    message: str | None


def is_resource_not_found(exc: BaseException) -> bool:
    return isinstance(exc, ResourceNotFoundError)


def _states(values: Iterable[str]) -> frozenset[str]:
    if isinstance(values, str):
        return frozenset((values,))
    return frozenset(values)


@dataclass(frozen=True, slots=True)
class WaitSpec[T]:
    """Immutable configuration for a single wait.

    Args:
        probe: Zero-argument coroutine function returning the current
            PollResult. Raises when the lookup fails or the resource is gone.
        pending: States that keep the wait polling.
        target: States that end the wait successfully. Empty means the
            resource disappearing is the success condition.
        timeout: Maximum time to wait in seconds.
        delay: Time to wait before the first probe.
        interval: Base time between polls in seconds.
        max_interval: Upper bound for the backed-off interval.
        backoff: Multiplier applied to the interval after each pending poll.
        jitter: Maximum random seconds added to each sleep.
        not_found: Predicate deciding whether a probe error means the
            resource does not exist.
        description: Human-readable name used in logs and error messages.
    """

    probe: Probe[T]
    pending: frozenset[str]
    target: frozenset[str]
    timeout: float
    delay: float = 0.0
    interval: float = 5.0
    max_interval: float = 10.0
    backoff: float = 1.0
    jitter: float = 0.0
    not_found: NotFoundPolicy = field(default=is_resource_not_found)
    description: str = "resource"

    def __post_init__(self) -> None:
        object.__setattr__(self, "pending", _states(self.pending))
        object.__setattr__(self, "target", _states(self.target))

        if overlap := self.pending & self.target:
            raise ConfigurationError(
                f"Pending and target states overlap for {self.description}: "
                f"{', '.join(sorted(overlap))}"
            )
        if not self.timeout > 0 or math.isinf(self.timeout):
            raise ConfigurationError(f"Timeout must be a positive finite number, got {self.timeout}")
        for name in ("delay", "interval", "max_interval", "jitter"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if self.max_interval < self.interval:
            raise ConfigurationError(
                f"max_interval ({self.max_interval}) must not be below interval ({self.interval})"
            )
        if self.backoff < 1:
            raise ConfigurationError(f"backoff must be >= 1, got {self.backoff}")

    @property
    def expects_disappearance(self) -> bool:
        return not self.target


@dataclass(frozen=True, slots=True)
class WaitOutcome[T]:
    """Result of a completed wait.

    Attributes:
        value: Last observed resource snapshot, or None when the resource
            disappeared (or a classifier discarded it).
        state: Last observed state, or None when the resource disappeared.
        attempts: Number of probe invocations.
        elapsed: Seconds spent waiting.
    """

    value: T | None
    state: str | None
    attempts: int = 0
    elapsed: float = 0.0

    @property
    def gone(self) -> bool:
        return self.value is None and self.state is None
