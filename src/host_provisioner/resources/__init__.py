"""Host resource definitions."""

from host_provisioner.resources.base import Notification, Resource, parse_address
from host_provisioner.resources.execute import ExecuteResource
from host_provisioner.resources.git import GitResource
from host_provisioner.resources.guards import CommandGuard, Guard, PackageGuard, PathGuard
from host_provisioner.resources.http_request import HttpRequestResource
from host_provisioner.resources.package import PackageResource
from host_provisioner.resources.template import EnvVar, TemplateResource

__all__ = [
    "CommandGuard",
    "EnvVar",
    "ExecuteResource",
    "GitResource",
    "Guard",
    "HttpRequestResource",
    "Notification",
    "PackageGuard",
    "PackageResource",
    "PathGuard",
    "Resource",
    "TemplateResource",
    "parse_address",
]
