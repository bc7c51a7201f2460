"""YAML configuration loading and convenience plan/run API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from host_provisioner.config.loader import ConfigError, load_config
from host_provisioner.config.registry import default_registry
from host_provisioner.config.schema import Config, HostSettings
from host_provisioner.core.host import Host
from host_provisioner.engine.engine import ProgressCallback, ProvisionEngine

if TYPE_CHECKING:
    from pathlib import Path

    from host_provisioner.engine.types import Plan, RunResult

__all__ = [
    "Config",
    "ConfigError",
    "HostSettings",
    "engine_from_config",
    "load",
    "load_config",
    "plan",
    "run",
    "validate",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def engine_from_config(config: Config, *, host: Host | None = None) -> ProvisionEngine:
    """Build a ``ProvisionEngine`` from a ``Config`` instance."""
    if host is None:
        host = Host(
            shell=config.settings.shell,
            http_timeout=config.settings.http_timeout,
            command_timeout=config.settings.command_timeout,
        )
    return ProvisionEngine(
        host=host,
        registry=default_registry(),
        environment=config.environment,
        base_dir=config.config_dir,
    )


def validate(config: Config) -> None:
    """Validate resources and notifications without touching the host."""
    engine_from_config(config).validate(config.resources)


def plan(config: Config) -> Plan:
    """Evaluate every guard and report what a run would do."""
    return engine_from_config(config).plan(config.resources)


def run(config: Config, *, progress: ProgressCallback | None = None) -> RunResult:
    """Evaluate and apply every resource once, in declaration order."""
    return engine_from_config(config).run(config.resources, progress=progress)
