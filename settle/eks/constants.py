"""EKS resource states, error codes and default waiter timings."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from settle.config import Timing

# =============================================================================
# Resource States
# =============================================================================


class ClusterStatus(StrEnum):
    """EKS cluster status values."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    DELETING = "DELETING"
    FAILED = "FAILED"
    UPDATING = "UPDATING"
    PENDING = "PENDING"


class NodegroupStatus(StrEnum):
    """EKS managed node group status values."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    CREATE_FAILED = "CREATE_FAILED"
    DELETE_FAILED = "DELETE_FAILED"
    DEGRADED = "DEGRADED"


class FargateProfileStatus(StrEnum):
    """EKS Fargate profile status values."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    DELETING = "DELETING"
    CREATE_FAILED = "CREATE_FAILED"
    DELETE_FAILED = "DELETE_FAILED"


class AddonStatus(StrEnum):
    """EKS add-on status values."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    CREATE_FAILED = "CREATE_FAILED"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    DELETE_FAILED = "DELETE_FAILED"
    DEGRADED = "DEGRADED"
    UPDATE_FAILED = "UPDATE_FAILED"


class UpdateStatus(StrEnum):
    """EKS update status values (cluster, node group and add-on updates)."""

    IN_PROGRESS = "InProgress"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    SUCCESSFUL = "Successful"


# =============================================================================
# Error Codes
# =============================================================================

RESOURCE_NOT_FOUND: Final = "ResourceNotFoundException"


# =============================================================================
# Timings (in seconds)
# =============================================================================

ADDON_CREATED_TIMEOUT: Final = 20 * 60
ADDON_UPDATED_TIMEOUT: Final = 20 * 60
ADDON_DELETED_TIMEOUT: Final = 40 * 60

# Start fast, double each pending poll, settle at 10s between polls
DEFAULT_TIMING: Final = Timing(
    timeout=30 * 60,
    delay=0.0,
    interval=0.5,
    max_interval=10.0,
    backoff=2.0,
    jitter=0.0,
)
