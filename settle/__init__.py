"""settle - wait for eventually-consistent cloud resources to settle.

Example:

    from settle import PollResult, WaitSpec, wait

    async def probe() -> PollResult[dict]:
        nodegroup = (await eks.describe_nodegroup(
            clusterName="prod", nodegroupName="workers",
        ))["nodegroup"]
        return PollResult(nodegroup, nodegroup["status"])

    outcome = await wait(WaitSpec(
        probe=probe,
        pending={"CREATING"},
        target={"ACTIVE"},
        timeout=1800,
    ))
"""

from settle.classify import OutcomePolicy, classify, render_errors
from settle.config import Timing, load_config, resolve_timing
from settle.exceptions import (
    AggregatedFailureError,
    ConfigurationError,
    ProbeError,
    ResourceNotFoundError,
    SettleError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)
from settle.logging import LogConfig, setup_logging, teardown_logging
from settle.types import PollResult, Probe, SubError, WaitOutcome, WaitSpec
from settle.waiter import wait, wait_blocking

__all__ = [
    # Engine
    "wait",
    "wait_blocking",
    # Types
    "PollResult",
    "Probe",
    "SubError",
    "WaitOutcome",
    "WaitSpec",
    # Classification
    "OutcomePolicy",
    "classify",
    "render_errors",
    # Configuration
    "LogConfig",
    "Timing",
    "load_config",
    "resolve_timing",
    "setup_logging",
    "teardown_logging",
    # Exceptions
    "AggregatedFailureError",
    "ConfigurationError",
    "ProbeError",
    "ResourceNotFoundError",
    "SettleError",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitTimeoutError",
]
