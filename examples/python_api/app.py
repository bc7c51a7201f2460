"""Explain what a recipe would do, then optionally apply it step by step.

    python app.py --config provision.yaml          # why each resource runs or not
    python app.py --config provision.yaml --apply  # apply, one resource at a time
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from host_provisioner.config import engine_from_config, load, plan
from host_provisioner.engine import Action, EngineError, ResourceChange


def _chain(change: ResourceChange, by_address: dict[str, ResourceChange]) -> str:
    """``git[/tmp/wrk] -> execute[install wrk]`` for a notified resource."""
    links = [change.address]
    source = change.triggered_by
    while source is not None:
        links.append(source)
        parent = by_address.get(source)
        source = parent.triggered_by if parent is not None else None
    return " -> ".join(reversed(links))


def explain(changes: list[ResourceChange]) -> None:
    by_address = {c.address: c for c in changes}
    for change in changes:
        if change.action is Action.SKIP:
            print(f"  skip     {change.address}: {change.reason}")
        elif change.action is Action.DORMANT:
            print(f"  dormant  {change.address}: runs only when notified")
        elif change.action is Action.TRIGGER:
            print(f"  notified {_chain(change, by_address)}")
        else:
            print(f"  run      {change.address}")


def apply_stepwise(config_path: Path) -> int:
    config = load(config_path)
    engine = engine_from_config(config)
    run = engine.start(config.resources)

    try:
        for resource in run.resources:
            acted = engine.apply(resource, run)
            print(f"{resource.address}: {'applied' if acted else 'unchanged'}")
        engine.flush(run)
    except EngineError as exc:
        print(f"Stopped at {run.current}: {exc}", file=sys.stderr)
        print("Done before the failure:", run.result().summary(), file=sys.stderr)
        return 1

    print("\nWhat ran and why:")
    explain(run.result().changes)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Explain or apply a host-provisioner recipe")
    parser.add_argument("--config", default="provision.yaml", help="Path to recipe file")
    parser.add_argument("--apply", action="store_true", help="Apply the recipe after explaining")
    args = parser.parse_args()
    config_path = Path(args.config)

    planned = plan(load(config_path))
    print("Plan:", planned.summary())
    explain(planned.changes)

    if not args.apply:
        return 0
    print()
    return apply_stepwise(config_path)


if __name__ == "__main__":
    sys.exit(main())
