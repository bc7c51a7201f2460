"""Engine types (plan, changes, run results)."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class Action(str, Enum):
    RUN = "run"
    TRIGGER = "trigger"
    SKIP = "skip"
    DORMANT = "dormant"


class ResourceChange(BaseModel):
    address: str
    resource_type: str
    action: Action
    reason: str | None = None
    triggered_by: str | None = None


def _count(changes: list[ResourceChange]) -> dict[str, int]:
    counts = {a.value: 0 for a in Action}
    for c in changes:
        counts[c.action.value] += 1
    return counts


class Plan(BaseModel):
    """Dry-run evaluation of a resource list against the current host."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    engine_version: str
    changes: list[ResourceChange]

    def summary(self) -> dict[str, int]:
        return _count(self.changes)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


class RunResult(BaseModel):
    changes: list[ResourceChange] = Field(default_factory=list)

    @property
    def applied(self) -> list[ResourceChange]:
        """Changes whose action actually executed."""
        return [c for c in self.changes if c.action in (Action.RUN, Action.TRIGGER)]

    def summary(self) -> dict[str, int]:
        return _count(self.changes)
