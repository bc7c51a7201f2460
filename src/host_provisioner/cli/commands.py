"""CLI command implementations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import typer

from host_provisioner.cli import CliState, app
from host_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from host_provisioner.config.schema import Config
    from host_provisioner.engine.types import Plan, RunResult

ConfigPath = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to the recipe file."),
]

AutoApprove = Annotated[
    bool,
    typer.Option("--auto-approve", help="Skip interactive approval."),
]

ShowAll = Annotated[
    bool,
    typer.Option("--all", "-a", help="Also list up-to-date and dormant resources."),
]


def _use_color(ctx: typer.Context) -> bool:
    return ctx.ensure_object(CliState).color


def _run_with_progress(plan_obj: Plan, cfg: Config, *, color: bool) -> RunResult:
    """Run with a Rich progress bar and per-resource status lines."""
    from rich.console import Console
    from rich.markup import escape
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from host_provisioner.cli.formatting import _ACTION_STYLES
    from host_provisioner.config import run
    from host_provisioner.engine.types import Action, ResourceChange

    console = Console(no_color=not color)
    pending = [c for c in plan_obj.changes if c.action in (Action.RUN, Action.TRIGGER)]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Applying", total=len(pending))

        def on_progress(change: ResourceChange, event: Literal["start", "done"]) -> None:
            s = _ACTION_STYLES[change.action.value]
            if event == "start":
                progress.update(task, description=f"{escape(change.address)}: {s.progress_verb}...")
            elif event == "done":
                progress.console.print(f"  {escape(change.address)}: {s.done_verb}")
                progress.advance(task)

        return run(cfg, progress=on_progress)


@app.command()
def plan(
    ctx: typer.Context,
    config: ConfigPath = Path("provision.yaml"),
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Save plan to file (JSON)."),
    ] = None,
    show_all: ShowAll = False,
) -> None:
    """Show which resources a run would act on. Exits 2 when actions are pending."""
    from host_provisioner.cli.formatting import (
        format_plan,
        format_plan_summary,
        has_pending_actions,
    )
    from host_provisioner.config import load
    from host_provisioner.config import plan as plan_fn

    color = _use_color(ctx)
    try:
        cfg = load(config)
        plan_obj = plan_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_plan(plan_obj, color=color, verbose=show_all))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))

    if out is not None:
        plan_obj.save(out)
        typer.echo(f"\nPlan saved to {out}")

    if has_pending_actions(plan_obj):
        raise typer.Exit(2)


@app.command(name="apply")
def apply_cmd(
    ctx: typer.Context,
    config: ConfigPath = Path("provision.yaml"),
    auto_approve: AutoApprove = False,
    show_all: ShowAll = False,
) -> None:
    """Evaluate every resource once and act where the host is not yet satisfied."""
    from host_provisioner.cli.formatting import (
        format_plan,
        format_plan_summary,
        format_run_summary,
        has_pending_actions,
    )
    from host_provisioner.config import load
    from host_provisioner.config import plan as plan_fn

    color = _use_color(ctx)
    try:
        cfg = load(config)
        plan_obj = plan_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if not has_pending_actions(plan_obj):
        typer.echo("No changes. Host is up-to-date.")
        raise typer.Exit(0)

    typer.echo(format_plan(plan_obj, color=color, verbose=show_all))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))
    typer.echo()

    if not auto_approve:
        try:
            typer.confirm("Do you want to apply these changes?", abort=True)
        except typer.Abort as e:
            typer.echo("Apply canceled.", err=True)
            raise typer.Exit(1) from e

    try:
        result = _run_with_progress(plan_obj, cfg, color=color)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo()
    typer.echo(format_run_summary(result.summary(), color=color))


@app.command()
def validate(
    ctx: typer.Context,
    config: ConfigPath = Path("provision.yaml"),
) -> None:
    """Validate the recipe without touching the host."""
    from host_provisioner.cli.formatting import styler
    from host_provisioner.config import load
    from host_provisioner.config import validate as validate_fn

    color = _use_color(ctx)
    try:
        cfg = load(config)
        validate_fn(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    count = len(cfg.resources)
    typer.echo(
        styler(color)(
            f"Configuration is valid ({count} resource{'s' if count != 1 else ''}).", fg="green"
        )
    )
