from __future__ import annotations

import aioboto3
import pytest
from injector import Injector

from settle.eks import EKSClientFactory, EKSConfig, EKSModule

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


class TestEKSModule:
    def test_provides_config(self):
        injector = Injector([EKSModule(EKSConfig(region="eu-west-1"))])
        assert injector.get(EKSConfig).region == "eu-west-1"

    def test_default_config(self):
        assert Injector([EKSModule()]).get(EKSConfig) == EKSConfig()

    def test_session_and_factory_are_singletons(self):
        injector = Injector([EKSModule()])

        assert isinstance(injector.get(aioboto3.Session), aioboto3.Session)
        assert injector.get(aioboto3.Session) is injector.get(aioboto3.Session)
        assert injector.get(EKSClientFactory) is injector.get(EKSClientFactory)

    @pytest.mark.asyncio
    async def test_factory_opens_client_in_configured_region(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        injector = Injector([EKSModule(EKSConfig(region="ap-southeast-2", endpoint_url="http://localhost:4566"))])
        factory = injector.get(EKSClientFactory)

        async with factory() as client:
            assert client.meta.region_name == "ap-southeast-2"
            assert client.meta.endpoint_url == "http://localhost:4566"
