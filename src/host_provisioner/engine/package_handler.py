"""System package handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from host_provisioner.core.command import CommandError
from host_provisioner.engine.errors import ActionError
from host_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext
    from host_provisioner.resources.package import PackageResource


class PackageHandler(ResourceHandler["PackageResource"]):
    """Installs through the host package manager; satisfied once installed.

    An installed package is never upgraded, even if ``version`` differs.
    """

    def check(self, ctx: EngineContext, desired: PackageResource) -> bool:
        return ctx.host.packages.is_installed(desired.name)

    def run(self, ctx: EngineContext, desired: PackageResource) -> None:
        try:
            ctx.host.packages.install(
                desired.name, version=desired.version, options=desired.options
            )
        except CommandError as exc:
            raise ActionError(desired.address, str(exc)) from exc
