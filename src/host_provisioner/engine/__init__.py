"""Evaluate/apply engine for host resources."""

from host_provisioner.engine.engine import ProgressCallback, ProvisionEngine, Run
from host_provisioner.engine.errors import (
    ActionError,
    DuplicateAddressError,
    EngineError,
    GuardError,
    NotificationCycleError,
    RunCanceled,
    RunError,
    TemplateRenderError,
    UnknownResourceTypeError,
    ValidationError,
)
from host_provisioner.engine.handlers import EngineContext, ResourceHandler
from host_provisioner.engine.registry import ResourceTypeRegistration, ResourceTypeRegistry
from host_provisioner.engine.templates import render_template
from host_provisioner.engine.types import Action, Plan, ResourceChange, RunResult

__all__ = [
    "Action",
    "ActionError",
    "DuplicateAddressError",
    "EngineContext",
    "EngineError",
    "GuardError",
    "NotificationCycleError",
    "Plan",
    "ProgressCallback",
    "ProvisionEngine",
    "ResourceChange",
    "ResourceHandler",
    "ResourceTypeRegistration",
    "ResourceTypeRegistry",
    "Run",
    "RunCanceled",
    "RunError",
    "RunResult",
    "TemplateRenderError",
    "UnknownResourceTypeError",
    "ValidationError",
    "render_template",
]
