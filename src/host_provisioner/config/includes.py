"""Recipe includes: compose a run from several YAML recipe files.

A recipe file may list other recipe files under ``include``. Included files
are expanded depth-first, in order, before the including file's own
``resources``::

    # site.yaml
    include:
      - cookbooks/alp/default.yaml
      - cookbooks/notify_slack/default.yaml
    resources:
      - type: package
        name: unzip
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

logger = logging.getLogger(__name__)

_RECIPE_KEYS = frozenset({"include", "resources"})


class IncludeError(Exception):
    """Raised when an include cannot be read or resolved."""


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from *path* (an empty file reads as ``{}``)."""
    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise IncludeError(f"Failed to read {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise IncludeError(f"{path}: expected a mapping at the top level")
    return raw


def _anchor_sources(resources: list[Any], recipe_dir: Path) -> list[Any]:
    """Make relative template ``source`` paths relative to the declaring file."""
    anchored: list[Any] = []
    for entry in resources:
        if isinstance(entry, dict) and entry.get("type") == "template":
            source = entry.get("source")
            if isinstance(source, str) and not Path(source).is_absolute():
                entry = {**entry, "source": str(recipe_dir / source)}
        anchored.append(entry)
    return anchored


def _as_list(value: Any, key: str, path: Path) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise IncludeError(f"{path}: '{key}' must be a list")
    return value


def expand_recipe(
    path: Path, raw: dict[str, Any], *, _stack: tuple[Path, ...] = ()
) -> list[Any]:
    """Return the raw resource entries of *raw* (read from *path*) with includes expanded."""
    path = path.resolve()
    stack = (*_stack, path)
    recipe_dir = path.parent

    entries: list[Any] = []
    for include in _as_list(raw.get("include"), "include", path):
        include_path = (recipe_dir / str(include)).resolve()
        if include_path in stack:
            chain = " -> ".join(str(p) for p in (*stack, include_path))
            raise IncludeError(f"Include cycle: {chain}")
        if not include_path.is_file():
            raise IncludeError(f"{path}: included recipe not found: {include_path}")

        included = read_yaml(include_path)
        unknown = set(included) - _RECIPE_KEYS
        if unknown:
            raise IncludeError(
                f"{include_path}: unsupported key(s) in included recipe: "
                f"{', '.join(sorted(unknown))}"
            )
        logger.debug("Including %s", include_path)
        entries.extend(expand_recipe(include_path, included, _stack=stack))

    entries.extend(_anchor_sources(_as_list(raw.get("resources"), "resources", path), recipe_dir))
    return entries
