from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from host_provisioner.core.command import CommandResult
from host_provisioner.core.host import Host
from host_provisioner.core.packages import AptPackageManager
from host_provisioner.engine.errors import ActionError
from host_provisioner.engine.handlers import EngineContext
from host_provisioner.engine.package_handler import PackageHandler
from host_provisioner.resources import PackageResource


class TestAptPackageManager:
    @pytest.mark.parametrize(
        ("returncode", "stdout", "expected"),
        [
            (0, "install ok installed", True),
            (0, "deinstall ok config-files", False),
            (1, "", False),
        ],
    )
    def test_is_installed(self, returncode: int, stdout: str, expected: bool) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult("dpkg-query", returncode, stdout, "")

        assert AptPackageManager(runner).is_installed("curl") is expected
        runner.run.assert_called_once_with(
            ["dpkg-query", "--show", "--showformat=${Status}", "curl"], check=False
        )

    def test_install_command(self) -> None:
        runner = MagicMock()

        AptPackageManager(runner).install(
            "openresty", version="1.21.4.1-1", options=["--no-install-recommends"]
        )

        runner.run.assert_called_once_with(
            ["apt-get", "install", "-y", "--no-install-recommends", "openresty=1.21.4.1-1"],
            env={"DEBIAN_FRONTEND": "noninteractive"},
        )


class TestPackageHandler:
    def test_check_reflects_package_database(self, host: Host, fake_runner: Any) -> None:
        r = PackageResource(name="software-properties-common")
        ctx = EngineContext(host=host)

        assert PackageHandler().check(ctx, r) is False
        fake_runner.packages.add("software-properties-common")
        assert PackageHandler().check(ctx, r) is True

    def test_run_installs(self, host: Host, fake_runner: Any) -> None:
        PackageHandler().run(EngineContext(host=host), PackageResource(name="unzip"))

        assert "unzip" in fake_runner.packages
        assert fake_runner.calls[-1] == "apt-get install -y unzip"

    def test_install_failure(self, host: Host, fake_runner: Any) -> None:
        fake_runner.returncodes["apt-get install -y nosuchpkg"] = 100
        r = PackageResource(name="nosuchpkg")

        with pytest.raises(ActionError, match=r"package\[nosuchpkg\]"):
            PackageHandler().run(EngineContext(host=host), r)

        assert "nosuchpkg" not in fake_runner.packages
