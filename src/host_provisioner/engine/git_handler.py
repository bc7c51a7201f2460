"""Git checkout handler."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from host_provisioner.core.command import CommandError
from host_provisioner.engine.errors import ActionError
from host_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext
    from host_provisioner.resources.git import GitResource

logger = logging.getLogger(__name__)


def _is_checkout(destination: str) -> bool:
    return (Path(destination) / ".git").is_dir()


class GitHandler(ResourceHandler["GitResource"]):
    """Clones once; with ``revision`` set, keeps the checkout at that revision."""

    def _rev_parse(self, ctx: EngineContext, destination: str, rev: str) -> str | None:
        result = ctx.host.runner.run(
            ["git", "-C", destination, "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"],
            check=False,
        )
        return result.stdout.strip() if result.ok else None

    def check(self, ctx: EngineContext, desired: GitResource) -> bool:
        if not _is_checkout(desired.destination):
            return False
        if desired.revision is None:
            return True
        head = self._rev_parse(ctx, desired.destination, "HEAD")
        wanted = self._rev_parse(ctx, desired.destination, desired.revision)
        logger.debug("%s: HEAD=%s %s=%s", desired.address, head, desired.revision, wanted)
        return head is not None and head == wanted

    def run(self, ctx: EngineContext, desired: GitResource) -> None:
        runner = ctx.host.runner
        dest = desired.destination
        try:
            if not _is_checkout(dest):
                depth = ["--depth", str(desired.depth)] if desired.depth else []
                runner.run(["git", "clone", *depth, desired.repository, dest])
            elif desired.revision is not None:
                runner.run(["git", "-C", dest, "fetch", "origin"])
            if desired.revision is not None:
                runner.run(["git", "-C", dest, "checkout", "--quiet", desired.revision])
        except CommandError as exc:
            raise ActionError(desired.address, str(exc)) from exc
