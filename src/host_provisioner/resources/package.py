"""System package resource model."""

from __future__ import annotations

from typing import ClassVar, Literal

from host_provisioner.resources.base import Resource


class PackageResource(Resource):
    """Install the system package called ``name``.

    Satisfied while the package is registered in the package database.
    """

    resource_type: ClassVar[str] = "package"
    default_action: ClassVar[str] = "install"

    type: Literal["package"] = "package"
    version: str | None = None
    options: list[str] = []
