"""Guard predicate evaluation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from host_provisioner.resources.guards import CommandGuard, PackageGuard, PathGuard

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext

logger = logging.getLogger(__name__)


def _check_path(guard: PathGuard) -> bool:
    path = Path(guard.path)
    match guard.check:
        case "exists":
            return path.exists()
        case "file":
            return path.is_file()
        case "directory":
            return path.is_dir()
        case "executable":
            return path.is_file() and os.access(path, os.X_OK)
        case _:
            raise ValueError(f"Unknown path check: {guard.check}")


def evaluate_guard(ctx: EngineContext, guard: CommandGuard | PathGuard | PackageGuard) -> bool:
    """Return whether *guard* holds on the host.

    A command guard holds when the command exits 0; any other exit status is a
    plain "does not hold". Failing to run the check at all raises.

    Raises:
        OSError: A filesystem check could not be performed.
        CommandError: The command could not be started or timed out.
    """
    if isinstance(guard, PathGuard):
        result = _check_path(guard)
    elif isinstance(guard, PackageGuard):
        result = ctx.host.packages.is_installed(guard.package)
    elif isinstance(guard, CommandGuard):
        result = ctx.host.runner.run(guard.command, cwd=guard.cwd, check=False).ok
    else:
        raise TypeError(f"Unsupported guard: {type(guard).__name__}")
    logger.debug("Guard '%s' -> %s", guard.describe(), result)
    return result

