"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from host_provisioner.config import load
from host_provisioner.core.command import CommandError, CommandResult, format_command
from host_provisioner.core.host import Host

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from pathlib import Path

    from host_provisioner.config.schema import Config

_PROVISION_ENV_VARS = (
    "PROVISION_SHELL",
    "PROVISION_HTTP_TIMEOUT",
    "PROVISION_COMMAND_TIMEOUT",
    "PROVISION_LOG",
    "SLACK_TOKEN",
    "SLACK_WEBHOOK",
    "NOTIFY_SLACK_SNNIPET_CHANNEL",
)


@pytest.fixture(autouse=True)
def _clean_provision_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove PROVISION_* and recipe env vars so unit tests don't leak host config."""
    for var in _PROVISION_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make


class FakeRunner:
    """In-memory stand-in for ``CommandRunner``.

    Every command exits 0 unless configured. ``dpkg-query`` and ``apt-get
    install`` are answered from ``packages``.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.envs: list[Mapping[str, str] | None] = []
        self.cwds: list[str | None] = []
        self.returncodes: dict[str, int] = {}
        self.effects: dict[str, Callable[[], None]] = {}
        self.errors: dict[str, Exception] = {}
        self.packages: set[str] = set()

    def _package_command(self, argv: Sequence[str]) -> tuple[int, str] | None:
        if argv[0] == "dpkg-query":
            installed = argv[-1] in self.packages
            return (0, "install ok installed") if installed else (1, "")
        if list(argv[:3]) == ["apt-get", "install", "-y"]:
            self.packages.add(argv[-1].split("=", 1)[0])
            return (0, "")
        return None

    def run(
        self,
        command: str | Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        display = format_command(command)
        self.calls.append(display)
        self.cwds.append(cwd)
        self.envs.append(env)
        if display in self.errors:
            raise self.errors[display]

        returncode, stdout = self.returncodes.get(display, 0), ""
        if not isinstance(command, str) and display not in self.returncodes:
            answered = self._package_command(command)
            if answered is not None:
                returncode, stdout = answered
        if returncode == 0 and display in self.effects:
            self.effects[display]()
        if check and returncode != 0:
            raise CommandError(display, f"exit {returncode}", returncode=returncode)
        return CommandResult(command=display, returncode=returncode, stdout=stdout, stderr="")

    def ran(self, command: str) -> bool:
        return command in self.calls


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def host(fake_runner: FakeRunner) -> Host:
    return Host.from_runner(fake_runner)  # type: ignore[arg-type]
