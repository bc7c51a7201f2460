"""HTTP download resource model."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from host_provisioner.resources.base import Resource


class HttpRequestResource(Resource):
    """Fetch ``url`` with a GET request and write the body to ``path``.

    There is no implicit idempotency check: the file is fetched whenever the
    resource's guards do not skip it.
    """

    resource_type: ClassVar[str] = "http_request"
    default_action: ClassVar[str] = "create"

    type: Literal["http_request"] = "http_request"
    url: str = Field(pattern=r"^https?://")
    path: str = Field(min_length=1)
    mode: str | None = Field(default=None, pattern=r"^0?[0-7]{3}$")
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def file_mode(self) -> int | None:
        return int(self.mode, 8) if self.mode is not None else None
