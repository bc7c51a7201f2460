"""Default resource type registry factory."""

from __future__ import annotations

from host_provisioner.engine.execute_handler import ExecuteHandler
from host_provisioner.engine.git_handler import GitHandler
from host_provisioner.engine.http_request_handler import HttpRequestHandler
from host_provisioner.engine.package_handler import PackageHandler
from host_provisioner.engine.registry import ResourceTypeRegistry
from host_provisioner.engine.template_handler import TemplateHandler
from host_provisioner.resources.execute import ExecuteResource
from host_provisioner.resources.git import GitResource
from host_provisioner.resources.http_request import HttpRequestResource
from host_provisioner.resources.package import PackageResource
from host_provisioner.resources.template import TemplateResource


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry with all built-in resource types and handlers."""
    registry = ResourceTypeRegistry()

    registry.register(HttpRequestResource, HttpRequestHandler())
    registry.register(ExecuteResource, ExecuteHandler())
    registry.register(PackageResource, PackageHandler())
    registry.register(GitResource, GitHandler())
    registry.register(TemplateResource, TemplateHandler())

    return registry
