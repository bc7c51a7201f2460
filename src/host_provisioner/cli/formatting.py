"""Plan and run output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import typer

from host_provisioner.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable

    from host_provisioner.engine.types import Plan, ResourceChange


class _ActionStyle(NamedTuple):
    color: str
    symbol: str
    progress_verb: str
    done_verb: str


_ACTION_STYLES: dict[str, _ActionStyle] = {
    "run": _ActionStyle("green", "+", "Running", "Run complete"),
    "trigger": _ActionStyle("yellow", "~", "Running (notified)", "Triggered run complete"),
    "skip": _ActionStyle("bright_black", " ", "", ""),
    "dormant": _ActionStyle("bright_black", "z", "", ""),
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def has_pending_actions(plan: Plan) -> bool:
    """Return True if the plan would run or trigger anything."""
    return any(c.action in (Action.RUN, Action.TRIGGER) for c in plan.changes)


def _describe(change: ResourceChange) -> str:
    match change.action:
        case Action.RUN:
            return "will run"
        case Action.TRIGGER:
            return f"will run (notified by {change.triggered_by})"
        case Action.SKIP:
            return f"is up-to-date ({change.reason})" if change.reason else "is up-to-date"
        case Action.DORMANT:
            return "is dormant (runs only when notified)"
        case _:
            return change.action.value


# ---------------------------------------------------------------------------
# Plan rendering
# ---------------------------------------------------------------------------


def format_change(change: ResourceChange, *, color: bool = True) -> str:
    """Render a single ResourceChange as one line."""
    style = styler(color)
    s = _ACTION_STYLES[change.action.value]
    return style(f"  {s.symbol} {change.address} {_describe(change)}", fg=s.color)


def format_changes(
    changes: list[ResourceChange], *, color: bool = True, verbose: bool = False
) -> str:
    """Render changes; up-to-date and dormant resources only when *verbose*."""
    shown = [
        c for c in changes if verbose or c.action in (Action.RUN, Action.TRIGGER)
    ]
    if not shown:
        return "No changes. Host is up-to-date."
    return "\n".join(format_change(c, color=color) for c in shown)


def format_plan(plan: Plan, *, color: bool = True, verbose: bool = False) -> str:
    return format_changes(plan.changes, color=color, verbose=verbose)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

_PLAN_VERBS = ("to run", "to trigger", "up-to-date")
_APPLY_VERBS = ("run", "triggered", "skipped")
_SUMMARY_COLORS = ("green", "yellow", "bright_black")


def _format_summary(summary: dict[str, int], verbs: tuple[str, ...], *, color: bool) -> str:
    """Build the ``N verb, N verb, N verb`` part of a summary line."""
    style = styler(color)
    counts = (summary.get("run", 0), summary.get("trigger", 0), summary.get("skip", 0))
    parts = [
        style(f"{n} {verb}", fg=fg) if n and color else f"{n} {verb}"
        for n, verb, fg in zip(counts, verbs, _SUMMARY_COLORS, strict=True)
    ]
    return ", ".join(parts)


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Plan: 2 to run, 1 to trigger, 3 up-to-date.``"""
    return f"Plan: {_format_summary(summary, _PLAN_VERBS, color=color)}."


def format_run_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Apply complete! Resources: 2 run, 1 triggered, 3 skipped.``"""
    style = styler(color)
    header = style("Apply complete!", fg="green", bold=True)
    return f"{header} Resources: {_format_summary(summary, _APPLY_VERBS, color=color)}."
