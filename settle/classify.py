"""Outcome classification for waits that stop on success and failure states.

A wait whose target set contains both the success and the failure
discriminators returns promptly on either one. The policy for the
resource kind then decides what the terminal state means: failure
states are turned into one AggregatedFailureError listing every
sub-error from the payload, success states pass through.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace

from settle.exceptions import AggregatedFailureError, ConfigurationError
from settle.types import SubError, WaitOutcome

type ErrorExtractor[T] = Callable[[T], Iterable[SubError]]
type ContextRenderer[T] = Callable[[T, str], str]


def render_errors(errors: Sequence[SubError]) -> str:
    """Render sub-errors one per line, 1-indexed, in the order given."""
    return "\n".join(
        f"Error {i}: Code: {e.code} / Message: {e.message}"
        for i, e in enumerate(errors, start=1)
    )


def _no_errors(_: object) -> Iterable[SubError]:
    return ()


@dataclass(frozen=True, slots=True)
class OutcomePolicy[T]:
    """How to interpret the terminal states of one resource kind.

    Args:
        kind: Resource kind, used in the default message prefix.
        success: States that mean the operation succeeded.
        failure: States that mean the operation failed or was cancelled.
        errors: Extracts the ordered sub-errors from a failed payload.
        context: Renders the message prefix from the payload and the
            observed state. Defaults to "<kind> not successful (<state>)".
        discard_on_success: Return a bare success (value=None) instead of
            the payload when the operation succeeded.
    """

    kind: str
    success: frozenset[str]
    failure: frozenset[str]
    errors: ErrorExtractor[T] = field(default=_no_errors)
    context: ContextRenderer[T] | None = None
    discard_on_success: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "success", frozenset(self.success))
        object.__setattr__(self, "failure", frozenset(self.failure))
        if overlap := self.success & self.failure:
            raise ConfigurationError(
                f"{self.kind}: states cannot be both success and failure: "
                f"{', '.join(sorted(overlap))}"
            )

    def describe(self, value: T, state: str) -> str:
        if self.context is None:
            return f"{self.kind} not successful ({state})"
        return self.context(value, state)


def classify[T](outcome: WaitOutcome[T], policy: OutcomePolicy[T]) -> WaitOutcome[T]:
    """Interpret a completed wait according to the resource kind's policy.

    Returns:
        The outcome unchanged, or without its value when the policy
        discards successful payloads.

    Raises:
        AggregatedFailureError: If the outcome state is a failure state.
        TypeError: If a failure state carries no payload to report.
    """
    match outcome:
        case WaitOutcome(value=value, state=state) if state in policy.failure:
            if value is None:
                raise TypeError(
                    f"{policy.kind}: failure state {state} reported without a resource payload"
                )
            errors = tuple(policy.errors(value))
            raise AggregatedFailureError(
                policy.describe(value, state),
                state,
                errors,
                last=value,
            )
        case WaitOutcome(state=state) if state in policy.success and policy.discard_on_success:
            return replace(outcome, value=None)
        case _:
            return outcome
