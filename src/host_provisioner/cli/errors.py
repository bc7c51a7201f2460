"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from host_provisioner.config.loader import ConfigError
    from host_provisioner.engine.errors import (
        NotificationCycleError,
        RunCanceled,
        RunError,
        ValidationError,
    )

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, ValidationError):
        _err("Validation failed:", fg=fg)
        for e in exc.errors:
            _err(f"  - {e}", fg=fg)
    elif isinstance(exc, NotificationCycleError):
        _err(f"Validation failed: {exc}", fg=fg)
    elif isinstance(exc, RunError):
        _err(f"Run failed: {exc}", fg=fg)
        cause = exc.__cause__
        if cause is not None:
            _err(f"  Cause: {type(cause).__name__}", fg=fg)
        s = exc.result.summary()
        parts = [
            f"{n} {verb}"
            for n, verb in ((s["run"], "run"), (s["trigger"], "triggered"), (s["skip"], "skipped"))
            if n
        ]
        if parts:
            _err(f"  Completed before failure: {', '.join(parts)}.", fg=fg)
    elif isinstance(exc, RunCanceled):
        _err("Run canceled.", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
