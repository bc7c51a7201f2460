"""System package manager access (Debian/Ubuntu ``dpkg`` + ``apt-get``)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from host_provisioner.core.command import CommandRunner

logger = logging.getLogger(__name__)

_INSTALLED_STATUS = "install ok installed"
_APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class AptPackageManager:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def is_installed(self, name: str) -> bool:
        """Check the package database.

        ``dpkg --list`` also matches removed packages whose config files remain,
        so the status field is queried instead.
        """
        result = self._runner.run(
            ["dpkg-query", "--show", "--showformat=${Status}", name], check=False
        )
        installed = result.ok and result.stdout.strip() == _INSTALLED_STATUS
        logger.debug("Package %s installed=%s", name, installed)
        return installed

    def install(
        self, name: str, *, version: str | None = None, options: Sequence[str] = ()
    ) -> None:
        pin = f"{name}={version}" if version else name
        self._runner.run(["apt-get", "install", "-y", *options, pin], env=_APT_ENV)
