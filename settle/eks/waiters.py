"""Waiters for EKS clusters, node groups, Fargate profiles and add-ons.

Every waiter here is the generic engine instantiated with resource-specific
states, probe and timing. Waiters for operations that can end in a
failure state (add-on creation, updates) put the failure states in the
target set so the wait returns promptly, then let the outcome policy turn
the failure into an AggregatedFailureError listing the reported errors.
Delete waiters succeed only when the resource disappears; a resource that
settles in any other state (DELETE_FAILED, FAILED, ...) fails the same way.

Add-on waiters take their timeout from the explicit argument, then from
the given Timing, then from the add-on default for the operation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from settle.classify import ErrorExtractor, OutcomePolicy, classify
from settle.config import Timing
from settle.eks.constants import (
    ADDON_CREATED_TIMEOUT,
    ADDON_DELETED_TIMEOUT,
    ADDON_UPDATED_TIMEOUT,
    DEFAULT_TIMING,
    AddonStatus,
    ClusterStatus,
    FargateProfileStatus,
    NodegroupStatus,
    UpdateStatus,
)
from settle.eks.status import (
    Resource,
    addon_status,
    addon_update_status,
    cluster_status,
    cluster_update_status,
    fargate_profile_status,
    nodegroup_status,
    nodegroup_update_status,
)
from settle.types import Probe, SubError, WaitSpec
from settle.waiter import wait

if TYPE_CHECKING:
    from types_aiobotocore_eks import EKSClient


# =============================================================================
# Sub-error extraction
# =============================================================================


def update_errors(update: Resource) -> Iterable[SubError]:
    for e in update.get("errors") or ():
        yield SubError(e.get("errorCode"), e.get("errorMessage"))


def health_issues(resource: Resource) -> Iterable[SubError]:
    for issue in (resource.get("health") or {}).get("issues") or ():
        yield SubError(issue.get("code"), issue.get("message"))


# =============================================================================
# Outcome policies
# =============================================================================

_UPDATE_TERMINAL = frozenset({UpdateStatus.CANCELLED, UpdateStatus.FAILED, UpdateStatus.SUCCESSFUL})


def update_policy(subject: str, update_id: str, *, discard_on_success: bool = False) -> OutcomePolicy[Resource]:
    return OutcomePolicy(
        kind="update",
        success=frozenset({UpdateStatus.SUCCESSFUL}),
        failure=frozenset({UpdateStatus.CANCELLED, UpdateStatus.FAILED}),
        errors=update_errors,
        context=lambda _, state: f"{subject} update ({update_id}) not successful ({state})",
        discard_on_success=discard_on_success,
    )


def addon_creation_policy(cluster_name: str, addon_name: str) -> OutcomePolicy[Resource]:
    return OutcomePolicy(
        kind="addon",
        success=frozenset({AddonStatus.ACTIVE}),
        failure=frozenset({AddonStatus.CREATE_FAILED}),
        errors=health_issues,
        context=lambda _, state: (
            f"EKS add-on ({cluster_name}:{addon_name}) creation not successful ({state})"
        ),
    )


def deletion_policy(
    subject: str,
    statuses: Iterable[str],
    pending: Iterable[str],
    *,
    errors: ErrorExtractor[Resource] | None = None,
) -> OutcomePolicy[Resource]:
    """Treat every state outside ``pending`` as a failed deletion.

    Disappearance is the only success of a delete wait, so ``success``
    stays empty and a gone outcome passes through unchanged.
    """
    return OutcomePolicy(
        kind="deletion",
        success=frozenset(),
        failure=frozenset(statuses) - frozenset(pending),
        errors=errors or (lambda _: ()),
        context=lambda _, state: f"{subject} deletion not successful ({state})",
    )


# =============================================================================
# Helpers
# =============================================================================


async def _await_state(
    probe: Probe[Resource],
    *,
    pending: Iterable[str],
    target: Iterable[str],
    description: str,
    timeout: float | None,
    timing: Timing | None,
    cancel: asyncio.Event | None,
    policy: OutcomePolicy[Resource] | None = None,
    default_timeout: float | None = None,
) -> Resource | None:
    if timeout is None:
        timeout = timing.timeout if timing is not None else default_timeout
    spec = WaitSpec(
        probe=probe,
        pending=frozenset(pending),
        target=frozenset(target),
        description=description,
        **(timing or DEFAULT_TIMING).with_timeout(timeout).as_kwargs(),
    )
    outcome = await wait(spec, cancel=cancel)
    if policy is not None:
        outcome = classify(outcome, policy)
    return outcome.value


# =============================================================================
# Clusters
# =============================================================================


async def cluster_created(
    eks: EKSClient,
    name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    """Wait for a cluster to go from CREATING to ACTIVE."""
    return await _await_state(
        cluster_status(eks, name),
        pending={ClusterStatus.CREATING},
        target={ClusterStatus.ACTIVE},
        description=f"EKS Cluster ({name}) creation",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
    )


async def cluster_deleted(
    eks: EKSClient,
    name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    """Wait for a cluster to disappear. Returns None once it is gone.

    A cluster that settles in a state other than ACTIVE or DELETING raises
    AggregatedFailureError.
    """
    return await _await_state(
        cluster_status(eks, name),
        pending={ClusterStatus.ACTIVE, ClusterStatus.DELETING},
        target=(),
        description=f"EKS Cluster ({name}) deletion",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=deletion_policy(
            f"EKS Cluster ({name})",
            ClusterStatus,
            {ClusterStatus.ACTIVE, ClusterStatus.DELETING},
            errors=health_issues,
        ),
    )


async def cluster_update_successful(
    eks: EKSClient,
    name: str,
    update_id: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    """Wait for a cluster update to finish; Cancelled/Failed raise AggregatedFailureError."""
    return await _await_state(
        cluster_update_status(eks, name, update_id),
        pending={UpdateStatus.IN_PROGRESS},
        target=_UPDATE_TERMINAL,
        description=f"EKS Cluster ({name}) update ({update_id})",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=update_policy(f"EKS Cluster ({name})", update_id),
    )


# =============================================================================
# Fargate profiles
# =============================================================================


async def fargate_profile_created(
    eks: EKSClient,
    cluster_name: str,
    profile_name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    return await _await_state(
        fargate_profile_status(eks, cluster_name, profile_name),
        pending={FargateProfileStatus.CREATING},
        target={FargateProfileStatus.ACTIVE},
        description=f"EKS Fargate Profile ({cluster_name}:{profile_name}) creation",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
    )


async def fargate_profile_deleted(
    eks: EKSClient,
    cluster_name: str,
    profile_name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    return await _await_state(
        fargate_profile_status(eks, cluster_name, profile_name),
        pending={FargateProfileStatus.ACTIVE, FargateProfileStatus.DELETING},
        target=(),
        description=f"EKS Fargate Profile ({cluster_name}:{profile_name}) deletion",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=deletion_policy(
            f"EKS Fargate Profile ({cluster_name}:{profile_name})",
            FargateProfileStatus,
            {FargateProfileStatus.ACTIVE, FargateProfileStatus.DELETING},
        ),
    )


# =============================================================================
# Node groups
# =============================================================================


async def nodegroup_created(
    eks: EKSClient,
    cluster_name: str,
    nodegroup_name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    return await _await_state(
        nodegroup_status(eks, cluster_name, nodegroup_name),
        pending={NodegroupStatus.CREATING},
        target={NodegroupStatus.ACTIVE},
        description=f"EKS Node Group ({cluster_name}:{nodegroup_name}) creation",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
    )


async def nodegroup_deleted(
    eks: EKSClient,
    cluster_name: str,
    nodegroup_name: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    return await _await_state(
        nodegroup_status(eks, cluster_name, nodegroup_name),
        pending={NodegroupStatus.ACTIVE, NodegroupStatus.DELETING},
        target=(),
        description=f"EKS Node Group ({cluster_name}:{nodegroup_name}) deletion",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=deletion_policy(
            f"EKS Node Group ({cluster_name}:{nodegroup_name})",
            NodegroupStatus,
            {NodegroupStatus.ACTIVE, NodegroupStatus.DELETING},
            errors=health_issues,
        ),
    )


async def nodegroup_update_successful(
    eks: EKSClient,
    cluster_name: str,
    nodegroup_name: str,
    update_id: str,
    timeout: float,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    return await _await_state(
        nodegroup_update_status(eks, cluster_name, nodegroup_name, update_id),
        pending={UpdateStatus.IN_PROGRESS},
        target=_UPDATE_TERMINAL,
        description=f"EKS Node Group ({cluster_name}:{nodegroup_name}) update ({update_id})",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=update_policy(f"EKS Node Group ({cluster_name}:{nodegroup_name})", update_id),
    )


# =============================================================================
# Add-ons
# =============================================================================


async def addon_created(
    eks: EKSClient,
    cluster_name: str,
    addon_name: str,
    timeout: float | None = None,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    """Wait for an add-on to become ACTIVE.

    CREATE_FAILED ends the wait with an AggregatedFailureError listing
    the add-on's health issues.
    """
    return await _await_state(
        addon_status(eks, cluster_name, addon_name),
        pending={AddonStatus.CREATING},
        target={AddonStatus.ACTIVE, AddonStatus.CREATE_FAILED},
        description=f"EKS add-on ({cluster_name}:{addon_name}) creation",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=addon_creation_policy(cluster_name, addon_name),
        default_timeout=ADDON_CREATED_TIMEOUT,
    )


async def addon_deleted(
    eks: EKSClient,
    cluster_name: str,
    addon_name: str,
    timeout: float | None = None,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> Resource | None:
    """Wait for an add-on to be deleted. Returns None once it is gone.

    DELETE_FAILED (or any other settled state) raises AggregatedFailureError
    listing the add-on's health issues.
    """
    return await _await_state(
        addon_status(eks, cluster_name, addon_name),
        pending={AddonStatus.ACTIVE, AddonStatus.DELETING},
        target=(),
        description=f"EKS add-on ({cluster_name}:{addon_name}) deletion",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=deletion_policy(
            f"EKS add-on ({cluster_name}:{addon_name})",
            AddonStatus,
            {AddonStatus.ACTIVE, AddonStatus.DELETING},
            errors=health_issues,
        ),
        default_timeout=ADDON_DELETED_TIMEOUT,
    )


async def addon_update_successful(
    eks: EKSClient,
    cluster_name: str,
    addon_name: str,
    update_id: str,
    timeout: float | None = None,
    *,
    timing: Timing | None = None,
    cancel: asyncio.Event | None = None,
) -> None:
    """Wait for an add-on update to succeed.

    Returns None on success; Cancelled/Failed raise AggregatedFailureError.
    """
    await _await_state(
        addon_update_status(eks, cluster_name, addon_name, update_id),
        pending={UpdateStatus.IN_PROGRESS},
        target=_UPDATE_TERMINAL,
        description=f"EKS add-on ({cluster_name}:{addon_name}) update ({update_id})",
        timeout=timeout,
        timing=timing,
        cancel=cancel,
        policy=update_policy(
            f"EKS add-on ({cluster_name}:{addon_name})",
            update_id,
            discard_on_success=True,
        ),
        default_timeout=ADDON_UPDATED_TIMEOUT,
    )
