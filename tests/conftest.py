from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from botocore.exceptions import ClientError

from settle.types import PollResult


def client_error(code: str, operation: str = "DescribeCluster", message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class ScriptedProbe:
    """Probe that replays a script of states and exceptions, repeating the last step."""

    def __init__(self, *steps: str | BaseException | PollResult[Any]) -> None:
        self._steps = steps
        self.calls = 0

    async def __call__(self) -> PollResult[Any]:
        step = self._steps[min(self.calls, len(self._steps) - 1)]
        self.calls += 1
        match step:
            case BaseException():
                raise step
            case PollResult():
                return step
            case str():
                return PollResult({"status": step, "seq": self.calls}, step)
        raise AssertionError(f"bad step {step!r}")


class FakeEKS:
    """In-memory stand-in for an aioboto3 EKS client.

    Each describe method replays its own list of responses; a response is
    either a resource dict (wrapped under the operation's key) or an
    exception to raise. The last response repeats.
    """

    _KEYS = {
        "describe_cluster": "cluster",
        "describe_nodegroup": "nodegroup",
        "describe_fargate_profile": "fargateProfile",
        "describe_addon": "addon",
        "describe_update": "update",
    }

    def __init__(self, **responses: list[dict[str, Any] | BaseException]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _replay(self, operation: str) -> Callable[..., Any]:
        async def call(**kwargs: Any) -> dict[str, Any]:
            script = self._responses[operation]
            count = sum(1 for op, _ in self.calls if op == operation)
            self.calls.append((operation, kwargs))
            step = script[min(count, len(script) - 1)]
            if isinstance(step, BaseException):
                raise step
            return {self._KEYS[operation]: step}

        return call

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name in self._KEYS:
            return self._replay(name)
        raise AttributeError(name)


@pytest.fixture
def scripted() -> type[ScriptedProbe]:
    return ScriptedProbe


@pytest.fixture
def fake_eks() -> type[FakeEKS]:
    return FakeEKS


@pytest.fixture
def make_client_error() -> Callable[..., ClientError]:
    return client_error


@pytest.fixture
def recorded_pauses(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace the engine's inter-poll sleep with a recorder that returns at once."""
    pauses: list[float] = []

    async def pause(seconds: float, cancel: object) -> None:
        pauses.append(seconds)

    monkeypatch.setattr("settle.waiter._pause", pause)
    return pauses
