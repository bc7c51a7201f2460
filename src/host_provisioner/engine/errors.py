"""Engine error types."""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base exception for engine errors."""


class UnknownResourceTypeError(EngineError):
    """Raised when a resource type has no registration/handler."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"Unknown resource type: {resource_type}")
        self.resource_type = resource_type


class DuplicateAddressError(EngineError):
    """Raised when multiple declared resources share the same address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Duplicate resource address: {address}")
        self.address = address


class NotificationCycleError(EngineError):
    """Raised when notifications form a cycle."""

    def __init__(self, addresses: list[str]) -> None:
        msg = "Notification cycle detected"
        if addresses:
            msg += f": {', '.join(addresses)}"
        super().__init__(msg)
        self.addresses = addresses


class ValidationError(EngineError):
    """One or more resources failed validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        msg = "Validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class GuardError(EngineError):
    """Raised when a guard predicate cannot be evaluated."""

    def __init__(self, address: str, guard: str, message: str) -> None:
        super().__init__(f"Guard '{guard}' of {address} could not be evaluated: {message}")
        self.address = address
        self.guard = guard


class ActionError(EngineError):
    """Raised when a resource action fails (command, download, install, checkout)."""

    def __init__(self, address: str, message: str) -> None:
        super().__init__(f"{address}: {message}")
        self.address = address


class TemplateRenderError(EngineError):
    """Raised when a template cannot be rendered or written."""

    def __init__(self, destination: str, message: str) -> None:
        super().__init__(f"Failed to render {destination}: {message}")
        self.destination = destination


class RunError(EngineError):
    """Raised when a run aborts on its first failure.

    Carries the partial result (what ran before the failure) so callers can
    inspect progress.  The original exception is chained via ``__cause__``.
    """

    def __init__(self, *, changes: list[Any], address: str, message: str) -> None:
        from host_provisioner.engine.types import RunResult

        self.result = RunResult(changes=changes)
        self.address = address
        super().__init__(f"Run failed on {address}: {message}")


class RunCanceled(EngineError):
    """Raised when a run is canceled (e.g., Ctrl-C)."""
