"""EKS waiters built on the generic settle engine.

Example:
    from settle.eks import addon_created, cluster_created

    async with session.client("eks") as eks:
        await cluster_created(eks, "prod", timeout=1800)
        addon = await addon_created(eks, "prod", "vpc-cni")
"""

from settle.eks.clients import EKSClientFactory, EKSConfig, EKSModule
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
from settle.eks.waiters import (
    addon_created,
    addon_deleted,
    addon_update_successful,
    cluster_created,
    cluster_deleted,
    cluster_update_successful,
    fargate_profile_created,
    fargate_profile_deleted,
    nodegroup_created,
    nodegroup_deleted,
    nodegroup_update_successful,
)

__all__ = [
    "ADDON_CREATED_TIMEOUT",
    "ADDON_DELETED_TIMEOUT",
    "ADDON_UPDATED_TIMEOUT",
    "DEFAULT_TIMING",
    "AddonStatus",
    "ClusterStatus",
    "EKSClientFactory",
    "EKSConfig",
    "EKSModule",
    "FargateProfileStatus",
    "NodegroupStatus",
    "UpdateStatus",
    "addon_created",
    "addon_deleted",
    "addon_update_successful",
    "cluster_created",
    "cluster_deleted",
    "cluster_update_successful",
    "fargate_profile_created",
    "fargate_profile_deleted",
    "nodegroup_created",
    "nodegroup_deleted",
    "nodegroup_update_successful",
]
