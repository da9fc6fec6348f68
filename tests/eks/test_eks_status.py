from __future__ import annotations

from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError

from settle.eks.status import (
    addon_status,
    addon_update_status,
    cluster_status,
    cluster_update_status,
    fargate_profile_status,
    nodegroup_status,
    nodegroup_update_status,
)
from settle.exceptions import ResourceNotFoundError

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


@pytest.fixture
def no_retry_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr("settle.retry.asyncio", SimpleNamespace(sleep=sleep))
    return delays


class TestProbes:
    @pytest.mark.asyncio
    async def test_cluster_status_reads_status(self, fake_eks):
        eks = fake_eks(describe_cluster=[{"name": "prod", "status": "CREATING"}])

        result = await cluster_status(eks, "prod")()

        assert result.state == "CREATING"
        assert result.value == {"name": "prod", "status": "CREATING"}
        assert eks.calls == [("describe_cluster", {"name": "prod"})]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("factory", "args", "operation", "expected_params"),
        [
            (
                nodegroup_status,
                ("prod", "workers"),
                "describe_nodegroup",
                {"clusterName": "prod", "nodegroupName": "workers"},
            ),
            (
                fargate_profile_status,
                ("prod", "default"),
                "describe_fargate_profile",
                {"clusterName": "prod", "fargateProfileName": "default"},
            ),
            (
                addon_status,
                ("prod", "vpc-cni"),
                "describe_addon",
                {"clusterName": "prod", "addonName": "vpc-cni"},
            ),
            (
                cluster_update_status,
                ("prod", "u-1"),
                "describe_update",
                {"name": "prod", "updateId": "u-1"},
            ),
            (
                nodegroup_update_status,
                ("prod", "workers", "u-2"),
                "describe_update",
                {"name": "prod", "nodegroupName": "workers", "updateId": "u-2"},
            ),
            (
                addon_update_status,
                ("prod", "vpc-cni", "u-3"),
                "describe_update",
                {"name": "prod", "addonName": "vpc-cni", "updateId": "u-3"},
            ),
        ],
    )
    async def test_describe_parameters(self, fake_eks, factory, args, operation, expected_params):
        eks = fake_eks(**{operation: [{"status": "ACTIVE"}]})

        result = await factory(eks, *args)()

        assert result.state == "ACTIVE"
        assert eks.calls == [(operation, expected_params)]

    @pytest.mark.asyncio
    async def test_missing_status_is_empty_state(self, fake_eks):
        eks = fake_eks(describe_cluster=[{"name": "prod"}])
        assert (await cluster_status(eks, "prod")()).state == ""


class TestErrors:
    @pytest.mark.asyncio
    async def test_resource_not_found_is_mapped(self, fake_eks, make_client_error):
        eks = fake_eks(describe_addon=[make_client_error("ResourceNotFoundException", "DescribeAddon")])

        with pytest.raises(ResourceNotFoundError, match=r"EKS add-on \(prod:vpc-cni\) not found") as exc_info:
            await addon_status(eks, "prod", "vpc-cni")()

        assert isinstance(exc_info.value.__cause__, ClientError)

    @pytest.mark.asyncio
    async def test_empty_response_is_not_found(self, fake_eks):
        eks = fake_eks(describe_cluster=[None])

        with pytest.raises(ResourceNotFoundError):
            await cluster_status(eks, "prod")()

    @pytest.mark.asyncio
    async def test_other_client_errors_propagate(self, fake_eks, make_client_error):
        eks = fake_eks(describe_cluster=[make_client_error("AccessDeniedException")])

        with pytest.raises(ClientError):
            await cluster_status(eks, "prod")()

        assert len(eks.calls) == 1

    @pytest.mark.asyncio
    async def test_throttling_is_retried(self, fake_eks, make_client_error, no_retry_sleep):
        eks = fake_eks(describe_cluster=[
            make_client_error("ThrottlingException"),
            make_client_error("TooManyRequestsException"),
            {"status": "ACTIVE"},
        ])

        result = await cluster_status(eks, "prod")()

        assert result.state == "ACTIVE"
        assert len(eks.calls) == 3
        assert len(no_retry_sleep) == 2

    @pytest.mark.asyncio
    async def test_throttling_gives_up_eventually(self, fake_eks, make_client_error, no_retry_sleep):
        eks = fake_eks(describe_cluster=[make_client_error("ThrottlingException")])

        with pytest.raises(ClientError):
            await cluster_status(eks, "prod")()

        assert len(eks.calls) == 4
