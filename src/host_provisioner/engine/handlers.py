"""Engine-facing handler interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

from host_provisioner.resources.base import Resource

if TYPE_CHECKING:
    from collections.abc import Mapping

    from host_provisioner.core import Host

R = TypeVar("R", bound=Resource)


@dataclass(frozen=True)
class EngineContext:
    """Context passed to handlers.

    ``environment`` is the snapshot template variables are resolved from; it
    is taken once when the configuration is loaded.
    """

    host: Host
    environment: Mapping[str, str] = field(default_factory=dict)
    base_dir: Path = field(default_factory=Path)


class ResourceHandler(Generic[R]):
    """Base class for resource handlers.

    Handlers translate resources into actions on the host. Subclass and
    override ``run``; ``check`` and ``validate`` are optional.
    """

    def validate(self, ctx: EngineContext, desired: R) -> list[str]:
        """Single-resource validation, before anything runs.

        Return list of error messages (empty = valid).
        """
        _ = ctx, desired
        return []

    def check(self, ctx: EngineContext, desired: R) -> bool:
        """Implicit idempotency check, evaluated after the declared guards.

        Return True when the host already matches *desired*. Must not have
        side effects.
        """
        _ = ctx, desired
        return False

    def run(self, ctx: EngineContext, desired: R) -> None:
        """Perform the resource's action. Raise on failure."""
        raise NotImplementedError
