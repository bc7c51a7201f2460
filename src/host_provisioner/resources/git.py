"""Git checkout resource model."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from host_provisioner.resources.base import Resource


class GitResource(Resource):
    """Clone ``repository`` into the directory ``name``.

    Satisfied once the destination is a checkout, at ``revision`` when set.
    """

    resource_type: ClassVar[str] = "git"
    default_action: ClassVar[str] = "sync"

    type: Literal["git"] = "git"
    repository: str = Field(min_length=1)
    revision: str | None = None
    depth: int | None = Field(default=None, ge=1)

    @property
    def destination(self) -> str:
        return self.name
