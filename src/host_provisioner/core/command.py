"""Shell command execution with consistent logging."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when a command cannot be started, times out, or exits non-zero."""

    def __init__(self, command: str, message: str, *, returncode: int | None = None) -> None:
        super().__init__(f"Command failed ({message}): {command}")
        self.command = command
        self.returncode = returncode


@dataclass(frozen=True)
class CommandResult:
    command: str
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(command: str | Sequence[str]) -> str:
    if isinstance(command, str):
        return command
    return " ".join(shlex.quote(a) for a in command)


class CommandRunner:
    """Runs commands on the local host.

    A string command goes through ``<shell> -c``; a sequence is executed as argv.
    """

    def __init__(self, *, shell: str = "/bin/sh", timeout: float | None = None) -> None:
        self._shell = shell
        self._timeout = timeout

    def run(
        self,
        command: str | Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run *command* and capture its output.

        Raises:
            CommandError: If the command cannot be started, exceeds the timeout,
                or (with ``check=True``) exits non-zero.
        """
        argv = [self._shell, "-c", command] if isinstance(command, str) else list(command)
        display = format_command(command)
        logger.info("CMD %s%s", display, f" (cwd={cwd})" if cwd else "")

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                cwd=cwd,
                env=dict(os.environ, **(env or {})),
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(display, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise CommandError(display, exc.strerror or str(exc)) from exc

        if completed.stdout:
            logger.debug("STDOUT %s", completed.stdout.strip())
        if completed.stderr:
            logger.debug("STDERR %s", completed.stderr.strip())

        result = CommandResult(
            command=display,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
        if check and not result.ok:
            msg = f"exit {result.returncode}"
            stderr = result.stderr.strip()
            if stderr:
                msg += f": {stderr}"
            raise CommandError(display, msg, returncode=result.returncode)
        return result
