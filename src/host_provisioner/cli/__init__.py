"""CLI application for host-provisioner."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

import typer

from host_provisioner import __version__

app = typer.Typer(
    name="host-provisioner",
    no_args_is_help=True,
    add_completion=False,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_VERBOSITY = {1: logging.INFO, 2: logging.DEBUG}


@dataclass(frozen=True)
class CliState:
    """Options shared by every command, set once by the root callback."""

    color: bool = True


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"host-provisioner {__version__}")
        raise typer.Exit


def _configure_logging(verbose: int) -> None:
    """Send ``host_provisioner`` logs to stderr.

    ``PROVISION_LOG`` (a level name) wins over ``-v``/``-vv``. With neither,
    logging stays unconfigured and the CLI is silent.
    """
    requested = os.environ.get("PROVISION_LOG", "").upper()
    if requested:
        level = logging.getLevelName(requested)
    elif verbose:
        level = _VERBOSITY[min(verbose, 2)]
    else:
        return

    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr, force=True)
    pkg_logger = logging.getLogger("host_provisioner")
    if isinstance(level, int):
        pkg_logger.setLevel(level)
    else:
        pkg_logger.setLevel(logging.INFO)
        pkg_logger.warning("Unknown PROVISION_LOG level %r; logging at INFO", requested)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Log progress to stderr (-v info, -vv debug).",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output (also honoured: NO_COLOR).",
    ),
) -> None:
    """Apply idempotent provisioning recipes to this host."""
    _ = version
    _configure_logging(verbose)
    ctx.obj = CliState(color=not (no_color or os.environ.get("NO_COLOR")))


# Register commands after app is created to avoid circular imports.
from host_provisioner.cli import commands as _commands  # noqa: E402, F401
