from __future__ import annotations

from pathlib import Path

import pytest

from settle import LogConfig, WaitSpec, setup_logging, teardown_logging, wait

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


class TestLogConfig:
    def test_defaults(self):
        config = LogConfig()
        assert config.level == "INFO"
        assert config.file is None
        assert config.console is True

    def test_console_only_adds_one_handler(self):
        handler_ids = setup_logging(LogConfig(console=True))
        try:
            assert len(handler_ids) == 1
        finally:
            teardown_logging(handler_ids)

    def test_nothing_enabled_adds_no_handler(self):
        handler_ids = setup_logging(LogConfig(console=False))
        teardown_logging(handler_ids)
        assert handler_ids == []


class TestFileSink:
    @pytest.mark.asyncio
    async def test_wait_transitions_are_written_to_file(self, tmp_path: Path, scripted):
        log_file = tmp_path / "settle.log"
        handler_ids = setup_logging(LogConfig(console=False, file=str(log_file)))
        try:
            await wait(WaitSpec(
                probe=scripted("CREATING", "ACTIVE"),
                pending=frozenset({"CREATING"}),
                target=frozenset({"ACTIVE"}),
                timeout=5,
                interval=0.0,
                max_interval=0.0,
                description="EKS Cluster (logs) creation",
            ))
        finally:
            teardown_logging(handler_ids)

        content = log_file.read_text()
        assert "EKS Cluster (logs) creation reached ACTIVE after 2 probe(s)" in content
        assert "still CREATING" in content
