"""Sequential evaluate/apply engine."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from host_provisioner import __version__
from host_provisioner.core.command import CommandError
from host_provisioner.engine.errors import (
    ActionError,
    DuplicateAddressError,
    EngineError,
    GuardError,
    RunCanceled,
    RunError,
    ValidationError,
)
from host_provisioner.engine.graph import NotificationGraph
from host_provisioner.engine.guards import evaluate_guard
from host_provisioner.engine.handlers import EngineContext
from host_provisioner.engine.types import Action, Plan, ResourceChange, RunResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResourceChange, Literal["start", "done"]], None]

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from host_provisioner.core import Host
    from host_provisioner.engine.handlers import ResourceHandler
    from host_provisioner.engine.registry import ResourceTypeRegistry
    from host_provisioner.resources.base import Resource
    from host_provisioner.resources.guards import Guard


class Run:
    """Bookkeeping for one provisioning pass over a validated resource list."""

    def __init__(
        self, resources: Sequence[Resource], *, progress: ProgressCallback | None = None
    ) -> None:
        self.resources: list[Resource] = list(resources)
        self.by_address: dict[str, Resource] = {r.address: r for r in self.resources}
        self.changes: list[ResourceChange] = []
        self.current: str | None = None
        self._progress = progress
        self._delayed: deque[tuple[str, str]] = deque()
        self._delayed_seen: set[str] = set()

    def record(self, change: ResourceChange) -> None:
        self.changes.append(change)

    def started(self, change: ResourceChange) -> None:
        self.current = change.address
        if self._progress:
            self._progress(change, "start")

    def finished(self, change: ResourceChange) -> None:
        self.changes.append(change)
        if self._progress:
            self._progress(change, "done")

    def queue_delayed(self, target: str, source: str) -> None:
        """Queue *target*; a delayed target runs at most once per run."""
        if target in self._delayed_seen:
            logger.debug("Delayed notification of %s already queued", target)
            return
        self._delayed_seen.add(target)
        self._delayed.append((target, source))

    def pop_delayed(self) -> tuple[str, str] | None:
        return self._delayed.popleft() if self._delayed else None

    def result(self) -> RunResult:
        return RunResult(changes=list(self.changes))


class ProvisionEngine:
    """Evaluates resources in declaration order, acting only where needed."""

    def __init__(
        self,
        *,
        host: Host,
        registry: ResourceTypeRegistry,
        environment: Mapping[str, str] | None = None,
        base_dir: Path | None = None,
    ) -> None:
        self._host = host
        self._registry = registry
        self._environment = dict(environment or {})
        self._base_dir = base_dir or Path()

    @property
    def host(self) -> Host:
        return self._host

    def _ctx(self) -> EngineContext:
        return EngineContext(
            host=self._host, environment=self._environment, base_dir=self._base_dir
        )

    # --- Validation ---------------------------------------------------------

    def validate(self, resources: Sequence[Resource]) -> None:
        """Check the resource set as a whole before anything runs.

        Raises:
            DuplicateAddressError: Two resources share an address.
            UnknownResourceTypeError: A resource type has no handler.
            ValidationError: Per-resource or notification errors.
            NotificationCycleError: Notifications form a cycle.
        """
        handlers: dict[str, ResourceHandler[Any]] = {}
        for r in resources:
            if r.address in handlers:
                raise DuplicateAddressError(r.address)
            handlers[r.address] = self._registry.handler_for(r)
        by_address = {r.address: r for r in resources}

        ctx = self._ctx()
        errors: list[str] = []
        notified: set[str] = set()
        for r in resources:
            errors.extend(handlers[r.address].validate(ctx, r))
            for n in r.notifies:
                target = by_address.get(n.target)
                if target is None:
                    errors.append(f"Resource '{r.address}' notifies unknown resource '{n.target}'")
                    continue
                notified.add(target.address)
                if n.action is not None and n.action != target.default_action:
                    errors.append(
                        f"Resource '{r.address}' notifies '{n.target}' with action "
                        f"'{n.action}'; expected '{target.default_action}'"
                    )
        if errors:
            raise ValidationError(errors)

        NotificationGraph(
            by_address, {a: [n.target for n in r.notifies] for a, r in by_address.items()}
        ).check_acyclic()

        for r in resources:
            if r.dormant and r.address not in notified:
                logger.warning("%s is dormant and never notified; it will not run", r.address)

    # --- Evaluation ---------------------------------------------------------

    def _guard_holds(self, ctx: EngineContext, resource: Resource, guard: Guard) -> bool:
        try:
            return evaluate_guard(ctx, guard)
        except (OSError, CommandError) as exc:
            raise GuardError(resource.address, guard.describe(), str(exc)) from exc

    def _satisfied_reason(self, ctx: EngineContext, resource: Resource) -> str | None:
        """Return why *resource* needs no action, or None if it must run."""
        if resource.not_if is not None and self._guard_holds(ctx, resource, resource.not_if):
            return f"not_if {resource.not_if.describe()}"
        if resource.only_if is not None and not self._guard_holds(
            ctx, resource, resource.only_if
        ):
            return f"only_if {resource.only_if.describe()}"

        handler = self._registry.handler_for(resource)
        try:
            satisfied = handler.check(ctx, resource)
        except (OSError, CommandError) as exc:
            raise GuardError(resource.address, "implicit check", str(exc)) from exc
        return "already satisfied" if satisfied else None

    def evaluate(self, resource: Resource) -> bool:
        """Return True when *resource* is already satisfied. No side effects.

        Raises:
            GuardError: A guard or implicit check could not be evaluated.
        """
        return self._satisfied_reason(self._ctx(), resource) is not None

    # --- Apply --------------------------------------------------------------

    def start(
        self, resources: Sequence[Resource], *, progress: ProgressCallback | None = None
    ) -> Run:
        """Validate *resources* and open a run over them."""
        self.validate(resources)
        return Run(resources, progress=progress)

    def apply(self, resource: Resource, run: Run) -> bool:
        """Evaluate *resource* and act if it is not satisfied.

        Dormant resources are recorded and left alone. Returns whether the
        resource's action ran.
        """
        run.current = resource.address
        if resource.dormant:
            logger.debug("%s is dormant", resource.address)
            run.record(
                ResourceChange(
                    address=resource.address,
                    resource_type=resource.resource_type,
                    action=Action.DORMANT,
                )
            )
            return False

        ctx = self._ctx()
        reason = self._satisfied_reason(ctx, resource)
        if reason is not None:
            logger.info("Skipping %s (%s)", resource.address, reason)
            run.record(
                ResourceChange(
                    address=resource.address,
                    resource_type=resource.resource_type,
                    action=Action.SKIP,
                    reason=reason,
                )
            )
            return False

        self._execute(ctx, resource, run, triggered_by=None)
        return True

    def _execute(
        self, ctx: EngineContext, resource: Resource, run: Run, *, triggered_by: str | None
    ) -> None:
        change = ResourceChange(
            address=resource.address,
            resource_type=resource.resource_type,
            action=Action.TRIGGER if triggered_by else Action.RUN,
            triggered_by=triggered_by,
        )
        run.started(change)
        if triggered_by:
            logger.info("Running %s (notified by %s)", resource.address, triggered_by)
        else:
            logger.info("Running %s", resource.address)

        handler = self._registry.handler_for(resource)
        try:
            handler.run(ctx, resource)
        except EngineError:
            raise
        except Exception as exc:
            raise ActionError(resource.address, str(exc)) from exc

        run.finished(change)
        self._notify(ctx, resource, run)

    def _notify(self, ctx: EngineContext, resource: Resource, run: Run) -> None:
        for n in resource.notifies:
            if n.timing == "delayed":
                logger.debug("Queued %s (notified by %s)", n.target, resource.address)
                run.queue_delayed(n.target, resource.address)
            else:
                self._execute(ctx, run.by_address[n.target], run, triggered_by=resource.address)

    def flush(self, run: Run) -> None:
        """Run queued delayed notifications, including any they queue in turn."""
        ctx = self._ctx()
        while (item := run.pop_delayed()) is not None:
            target, source = item
            self._execute(ctx, run.by_address[target], run, triggered_by=source)

    def run(
        self, resources: Sequence[Resource], *, progress: ProgressCallback | None = None
    ) -> RunResult:
        """Evaluate and apply every resource in order, then delayed notifications.

        Raises:
            RunError: On the first guard/action failure; nothing after it runs.
            RunCanceled: On Ctrl-C.
        """
        logger.info("Running %d resources", len(resources))
        run = self.start(resources, progress=progress)

        try:
            for resource in run.resources:
                self.apply(resource, run)
            self.flush(run)
        except KeyboardInterrupt as e:  # pragma: no cover
            raise RunCanceled("Run canceled") from e
        except Exception as e:
            raise RunError(
                changes=run.changes, address=run.current or "<run>", message=str(e)
            ) from e

        result = run.result()
        logger.info("Run complete: %s", result.summary())
        return result

    # --- Plan ---------------------------------------------------------------

    def plan(self, resources: Sequence[Resource]) -> Plan:
        """Dry run: evaluate every guard against the current host, act on nothing.

        Guards are evaluated up front, so a resource whose guard would be
        satisfied by an earlier resource's action is still reported as "run".
        """
        logger.info("Planning %d resources", len(resources))
        self.validate(resources)
        ctx = self._ctx()
        by_address = {r.address: r for r in resources}
        changes: list[ResourceChange] = []
        delayed: list[tuple[str, str]] = []

        def planned_run(resource: Resource, triggered_by: str | None) -> None:
            changes.append(
                ResourceChange(
                    address=resource.address,
                    resource_type=resource.resource_type,
                    action=Action.TRIGGER if triggered_by else Action.RUN,
                    triggered_by=triggered_by,
                )
            )
            for n in resource.notifies:
                if n.timing == "delayed":
                    if n.target not in (t for t, _ in delayed):
                        delayed.append((n.target, resource.address))
                else:
                    planned_run(by_address[n.target], resource.address)

        for r in resources:
            if r.dormant:
                changes.append(
                    ResourceChange(
                        address=r.address, resource_type=r.resource_type, action=Action.DORMANT
                    )
                )
                continue
            reason = self._satisfied_reason(ctx, r)
            if reason is not None:
                changes.append(
                    ResourceChange(
                        address=r.address,
                        resource_type=r.resource_type,
                        action=Action.SKIP,
                        reason=reason,
                    )
                )
                continue
            planned_run(r, None)

        i = 0
        while i < len(delayed):
            target, source = delayed[i]
            planned_run(by_address[target], source)
            i += 1

        return Plan(engine_version=__version__, changes=changes)
