"""Shell command resource model."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from host_provisioner.resources.base import Resource


class ExecuteResource(Resource):
    """Run ``command`` through the host shell, optionally inside ``cwd``."""

    resource_type: ClassVar[str] = "execute"
    default_action: ClassVar[str] = "run"

    type: Literal["execute"] = "execute"
    command: str = Field(min_length=1)
    cwd: str | None = None
    environment: dict[str, str] = Field(default_factory=dict)
