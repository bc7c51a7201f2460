"""Shell command handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from host_provisioner.core.command import CommandError
from host_provisioner.engine.errors import ActionError
from host_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext
    from host_provisioner.resources.execute import ExecuteResource


class ExecuteHandler(ResourceHandler["ExecuteResource"]):
    def run(self, ctx: EngineContext, desired: ExecuteResource) -> None:
        try:
            ctx.host.runner.run(desired.command, cwd=desired.cwd, env=desired.environment)
        except CommandError as exc:
            raise ActionError(desired.address, str(exc)) from exc
