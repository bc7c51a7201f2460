"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import ValidationError

from host_provisioner.config.includes import IncludeError, expand_recipe, read_yaml
from host_provisioner.config.schema import Config

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from host_provisioner.resources.base import Resource


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_SETTINGS_ENV_MAP: dict[str, str] = {
    "shell": "PROVISION_SHELL",
    "http_timeout": "PROVISION_HTTP_TIMEOUT",
    "command_timeout": "PROVISION_COMMAND_TIMEOUT",
}


def _read_dotenv(config_dir: Path) -> dict[str, str]:
    env_file = config_dir / ".env"
    if not env_file.is_file():
        return {}
    values = dotenv_values(env_file, encoding="utf-8-sig")
    return {k: v for k, v in values.items() if v is not None}


def _resolve_settings(raw_settings: Any, dotenv_vals: Mapping[str, str]) -> dict[str, Any]:
    """Resolve settings fields from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    if raw_settings is None:
        raw_settings = {}
    if not isinstance(raw_settings, dict):
        raise ConfigError("'settings' must be a mapping")

    resolved: dict[str, Any] = dict(raw_settings)
    for field, env_key in _SETTINGS_ENV_MAP.items():
        val = raw_settings.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            resolved[field] = val
    return resolved


def _environment_snapshot(dotenv_vals: Mapping[str, str]) -> dict[str, str]:
    """``.env`` values overlaid by the process environment."""
    return {**dotenv_vals, **os.environ}


def _validate_unique_addresses(resources: list[Resource]) -> list[str]:
    """Check that no two resources share an address."""
    counts = Counter(r.address for r in resources)
    return [
        f"Duplicate resource address '{address}' (declared {n} times)"
        for address, n in counts.items()
        if n > 1
    ]


def load_config(path: Path | str) -> Config:
    """Load a YAML recipe (and everything it includes) into a ``Config``.

    Raises:
        ConfigError: On YAML parse errors, bad includes, or validation failures.
    """
    path = Path(path)
    config_dir = path.parent

    try:
        raw = read_yaml(path)
        entries = expand_recipe(path, raw)
    except IncludeError as exc:
        raise ConfigError(str(exc)) from exc

    unknown = set(raw) - {"settings", "include", "resources"}
    if unknown:
        raise ConfigError(f"{path}: unsupported top-level key(s): {', '.join(sorted(unknown))}")

    dotenv_vals = _read_dotenv(config_dir)
    try:
        config = Config.model_validate(
            {
                "settings": _resolve_settings(raw.get("settings"), dotenv_vals),
                "resources": entries,
                "config_dir": config_dir,
            }
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    errors = _validate_unique_addresses(config.resources)
    if errors:
        raise ConfigError("\n".join(errors))

    config._environment = _environment_snapshot(dotenv_vals)

    logger.info("Loaded config from %s (%d resources)", path, len(config.resources))
    return config
