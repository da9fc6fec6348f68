"""TOML-based timing configuration.

Loads ~/.settle/defaults.toml (global) and settle.toml (project), merges
them, and resolves the polling timing for a resource kind.

Example settle.toml:

    [timing]
    interval = 10
    max_interval = 30

    [timing.addon]
    timeout = 2400
    backoff = 1.5
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from settle.exceptions import ConfigurationError

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".settle" / "defaults.toml"
PROJECT_CONFIG_NAME = "settle.toml"


@dataclass(frozen=True, slots=True)
class Timing:
    """Polling timing for one kind of wait.

    Args:
        timeout: Maximum time to wait in seconds.
        delay: Time to wait before the first probe.
        interval: Base time between polls.
        max_interval: Upper bound for the backed-off interval.
        backoff: Interval multiplier applied after each pending poll.
        jitter: Maximum random seconds added to each sleep.
    """

    timeout: float = 1800.0
    delay: float = 0.0
    interval: float = 5.0
    max_interval: float = 10.0
    backoff: float = 1.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.max_interval < self.interval:
            raise ConfigurationError(
                f"max_interval ({self.max_interval}) must not be below interval ({self.interval})"
            )

    def with_timeout(self, timeout: float | None) -> Timing:
        return self if timeout is None else replace(self, timeout=timeout)

    def as_kwargs(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_TIMING_KEYS = frozenset(f.name for f in fields(Timing))


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("timing", {})
    return merged


def _timing_values(section: RawConfig, where: str) -> dict[str, float]:
    values = {k: v for k, v in section.items() if not isinstance(v, dict)}
    if unknown := set(values) - _TIMING_KEYS:
        raise ConfigurationError(
            f"Unknown timing keys in {where}: {', '.join(sorted(unknown))}. "
            f"Valid: {', '.join(sorted(_TIMING_KEYS))}"
        )
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ConfigurationError(f"{where}.{key} must be a number, got {value!r}")
    return {k: float(v) for k, v in values.items()}


def resolve_timing(
    kind: str,
    *,
    default: Timing | None = None,
    config: RawConfig | None = None,
) -> Timing:
    """Resolve timing for ``kind``: defaults, then [timing], then [timing.<kind>].

    Args:
        kind: Resource kind, e.g. "cluster" or "addon".
        default: Built-in timing for the kind.
        config: Already-loaded config. Loaded from disk when None.
    """
    raw = config if config is not None else load_config()
    section = raw.get("timing", {})

    overrides = _timing_values(section, "timing")

    per_kind = section.get(kind)
    if per_kind is not None:
        if not isinstance(per_kind, dict):
            raise ConfigurationError(f"timing.{kind} must be a table")
        overrides |= _timing_values(per_kind, f"timing.{kind}")

    return replace(default or Timing(), **overrides)
