"""EKS client factory with dependency injection.

Waiters take an already-open client; this module is the optional glue
that opens one from an aioboto3 session.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import aioboto3
from injector import Module, provider, singleton

if TYPE_CHECKING:
    from types_aiobotocore_eks import EKSClient


@dataclass(frozen=True, slots=True)
class EKSConfig:
    """Where to reach the EKS API.

    Args:
        region: AWS region of the clusters being polled.
        endpoint_url: Override the EKS endpoint (e.g. a local stub).
    """

    region: str = "us-east-1"
    endpoint_url: str | None = None


class EKSClientFactory:
    """Callable returning an async context manager for an EKS client.

    Usage:
        >>> from injector import Injector
        >>> injector = Injector([EKSModule(EKSConfig(region="eu-west-1"))])
        >>> eks = injector.get(EKSClientFactory)
        >>> async with eks() as client:
        ...     await cluster_created(client, "prod", timeout=1800)
    """

    def __init__(self, factory: Callable[[], AbstractAsyncContextManager[Any]]) -> None:
        self._factory = factory

    def __call__(self) -> AbstractAsyncContextManager[EKSClient]:
        return self._factory()


class EKSModule(Module):
    """DI module that provides the aioboto3 session and EKS client factory."""

    def __init__(self, config: EKSConfig | None = None) -> None:
        self._config = config or EKSConfig()

    @singleton
    @provider
    def provide_config(self) -> EKSConfig:
        return self._config

    @singleton
    @provider
    def provide_session(self) -> aioboto3.Session:
        """Provide singleton aioboto3 session."""
        return aioboto3.Session()

    @singleton
    @provider
    def provide_eks(self, session: aioboto3.Session, config: EKSConfig) -> EKSClientFactory:
        """Provide EKS client factory."""

        @asynccontextmanager
        async def factory() -> AsyncIterator[Any]:
            async with session.client(
                "eks",
                region_name=config.region,
                endpoint_url=config.endpoint_url,
            ) as client:
                yield client

        return EKSClientFactory(factory)


__all__ = [
    "EKSClientFactory",
    "EKSConfig",
    "EKSModule",
]
