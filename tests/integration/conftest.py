"""Pytest fixtures for integration tests.

These run real shell commands, confined to a temporary directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_provision_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("PROVISION_SHELL", "PROVISION_HTTP_TIMEOUT", "PROVISION_COMMAND_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_recipe(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a recipe file under tmp_path; ``{root}`` expands to tmp_path."""

    def _write(relpath: str, text: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text.replace("{root}", str(tmp_path)))
        return path

    return _write
