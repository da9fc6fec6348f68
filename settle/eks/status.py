"""Status probes for EKS resources.

Each factory takes an open async EKS client (aioboto3) plus the resource
identifiers and returns a zero-argument probe for the waiter engine.
A probe issues one describe call per invocation, retrying only
throttling and connection hiccups, and maps ResourceNotFoundException
to ResourceNotFoundError so delete-style waits can treat it as success.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from settle.eks.constants import RESOURCE_NOT_FOUND
from settle.exceptions import ResourceNotFoundError
from settle.retry import error_code, retry, transient
from settle.types import PollResult, Probe

if TYPE_CHECKING:
    from types_aiobotocore_eks import EKSClient

type Resource = dict[str, Any]


def _describe(
    call: Callable[..., Awaitable[Resource]],
    key: str,
    what: str,
    **params: str,
) -> Probe[Resource]:
    @retry(on=transient, max_attempts=4, base_delay=1.0)
    async def describe() -> Resource:
        return await call(**params)

    async def probe() -> PollResult[Resource]:
        try:
            response = await describe()
        except ClientError as e:
            if error_code(e) == RESOURCE_NOT_FOUND:
                raise ResourceNotFoundError(f"{what} not found") from e
            raise

        resource = response.get(key)
        if resource is None:
            raise ResourceNotFoundError(f"{what} not found (empty response)")
        return PollResult(resource, resource.get("status") or "")

    return probe


def cluster_status(eks: EKSClient, name: str) -> Probe[Resource]:
    return _describe(eks.describe_cluster, "cluster", f"EKS Cluster ({name})", name=name)


def nodegroup_status(eks: EKSClient, cluster_name: str, nodegroup_name: str) -> Probe[Resource]:
    return _describe(
        eks.describe_nodegroup,
        "nodegroup",
        f"EKS Node Group ({cluster_name}:{nodegroup_name})",
        clusterName=cluster_name,
        nodegroupName=nodegroup_name,
    )


def fargate_profile_status(eks: EKSClient, cluster_name: str, profile_name: str) -> Probe[Resource]:
    return _describe(
        eks.describe_fargate_profile,
        "fargateProfile",
        f"EKS Fargate Profile ({cluster_name}:{profile_name})",
        clusterName=cluster_name,
        fargateProfileName=profile_name,
    )


def addon_status(eks: EKSClient, cluster_name: str, addon_name: str) -> Probe[Resource]:
    return _describe(
        eks.describe_addon,
        "addon",
        f"EKS add-on ({cluster_name}:{addon_name})",
        clusterName=cluster_name,
        addonName=addon_name,
    )


def cluster_update_status(eks: EKSClient, name: str, update_id: str) -> Probe[Resource]:
    return _describe(
        eks.describe_update,
        "update",
        f"EKS Cluster ({name}) update ({update_id})",
        name=name,
        updateId=update_id,
    )


def nodegroup_update_status(
    eks: EKSClient, cluster_name: str, nodegroup_name: str, update_id: str
) -> Probe[Resource]:
    return _describe(
        eks.describe_update,
        "update",
        f"EKS Node Group ({cluster_name}:{nodegroup_name}) update ({update_id})",
        name=cluster_name,
        nodegroupName=nodegroup_name,
        updateId=update_id,
    )


def addon_update_status(
    eks: EKSClient, cluster_name: str, addon_name: str, update_id: str
) -> Probe[Resource]:
    return _describe(
        eks.describe_update,
        "update",
        f"EKS add-on ({cluster_name}:{addon_name}) update ({update_id})",
        name=cluster_name,
        addonName=addon_name,
        updateId=update_id,
    )
