"""The waiter engine: poll a resource until its state settles.

One generic loop serves every resource kind. The caller describes the
wait with a WaitSpec (probe, pending/target states, timeout, backoff) and
the engine polls the probe, sleeping between pending observations, until
a target state is seen, the resource disappears (for delete-style waits),
an unexpected state shows up, the deadline passes, or the caller cancels.

Example:
    from settle import PollResult, WaitSpec, wait

    async def probe() -> PollResult[dict]:
        cluster = (await eks.describe_cluster(name="prod"))["cluster"]
        return PollResult(cluster, cluster["status"])

    outcome = await wait(WaitSpec(
        probe=probe,
        pending={"CREATING"},
        target={"ACTIVE"},
        timeout=1800,
    ))
"""

from __future__ import annotations

import asyncio
import contextlib

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    wait_exponential,
    wait_random,
)
from tenacity.wait import wait_base

from settle.exceptions import (
    ProbeError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)
from settle.types import PollResult, WaitOutcome, WaitSpec


class _StillPending(Exception):
    """Resource is in a pending state - poll again."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"still {state}")


def _backoff(spec: WaitSpec[object]) -> wait_base:
    strategy: wait_base = wait_exponential(
        multiplier=spec.interval,
        exp_base=spec.backoff,
        max=spec.max_interval,
    )
    if spec.jitter:
        strategy = strategy + wait_random(0, spec.jitter)
    return strategy


async def _pause(seconds: float, cancel: asyncio.Event | None) -> None:
    """Sleep for ``seconds``, returning early once ``cancel`` is set."""
    if cancel is None:
        await asyncio.sleep(seconds)
        return
    with contextlib.suppress(TimeoutError):
        await asyncio.wait_for(cancel.wait(), timeout=seconds)


async def wait[T](spec: WaitSpec[T], *, cancel: asyncio.Event | None = None) -> WaitOutcome[T]:
    """Poll ``spec.probe`` until the resource settles.

    Args:
        spec: What to poll and which states to wait for.
        cancel: Optional event; once set, the wait stops at the next poll
            or sleep boundary without probing again.

    Returns:
        The outcome holding the last observed snapshot, or an outcome with
        no value and no state when a delete-style wait saw the resource
        disappear.

    Raises:
        ProbeError: If the probe fails (other than not-found on a delete-style wait).
        UnexpectedStateError: If the probe reports a state that is neither pending nor target.
        WaitTimeoutError: If the deadline passes while the resource is pending
            or while a probe call is still outstanding.
        WaitCancelledError: If ``cancel`` is set before the resource settles.
    """
    loop = asyncio.get_running_loop()
    started = loop.time()
    deadline = started + spec.timeout
    log = logger.bind(waiter=spec.description)

    last: PollResult[T] | None = None
    attempts = 0

    def outcome(value: T | None, state: str | None) -> WaitOutcome[T]:
        return WaitOutcome(value, state, attempts=attempts, elapsed=loop.time() - started)

    async def sleep(seconds: float) -> None:
        await _pause(max(0.0, min(seconds, deadline - loop.time())), cancel)

    def timed_out() -> WaitTimeoutError:
        state = last.state if last else None
        log.warning(f"Timed out after {spec.timeout:.1f}s waiting for {spec.description}, last state: {state}")
        return WaitTimeoutError(spec.description, spec.timeout, state, last.value if last else None)

    def ensure_open() -> None:
        if cancel is not None and cancel.is_set():
            state = last.state if last else None
            log.debug(f"Wait for {spec.description} cancelled in state {state}")
            raise WaitCancelledError(spec.description, state)
        if loop.time() >= deadline:
            raise timed_out()

    async def poll_once() -> WaitOutcome[T]:
        nonlocal last, attempts

        ensure_open()
        attempts += 1

        # A probe that hangs past the deadline is abandoned.
        window = asyncio.timeout_at(deadline)
        try:
            async with window:
                result = await spec.probe()
        except Exception as e:
            if window.expired():
                raise timed_out() from e
            if spec.expects_disappearance and spec.not_found(e):
                log.debug(f"{spec.description} no longer exists after {attempts} probe(s)")
                return outcome(None, None)
            raise ProbeError(spec.description, last.state if last else None) from e

        last = result
        state = result.state

        if state in spec.target:
            log.debug(f"{spec.description} reached {state} after {attempts} probe(s)")
            return outcome(result.value, state)

        if state in spec.pending:
            raise _StillPending(state)

        if spec.expects_disappearance:
            log.debug(f"{spec.description} settled in non-pending state {state}")
            return outcome(result.value, state)

        log.warning(f"{spec.description} reported unexpected state {state}")
        raise UnexpectedStateError(
            spec.description,
            state,
            expected=spec.pending | spec.target,
            last=result.value,
        )

    def before_sleep(retry_state: RetryCallState) -> None:
        wait_for = retry_state.next_action.sleep if retry_state.next_action else 0.0
        log.trace(
            f"{spec.description} still {last.state if last else 'unknown'}, "
            f"polling again in {wait_for:.2f}s"
        )

    if spec.delay:
        await sleep(spec.delay)

    retrying = AsyncRetrying(
        sleep=sleep,
        wait=_backoff(spec),
        retry=retry_if_exception_type(_StillPending),
        before_sleep=before_sleep,
        reraise=True,
    )
    return await retrying(poll_once)


def wait_blocking[T](spec: WaitSpec[T]) -> WaitOutcome[T]:
    """Run :func:`wait` to completion from synchronous code."""
    return asyncio.run(wait(spec))
