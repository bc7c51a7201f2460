"""Base resource class for host resources."""

from __future__ import annotations

import re
from typing import Annotated, Any, ClassVar, Literal, Self

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from host_provisioner.resources.guards import Guard  # noqa: TC001 (pydantic resolves it at runtime)

DORMANT_ACTION = "nothing"

_ADDRESS_RE = re.compile(r"^(?P<type>[a-z_]+)\[(?P<name>.+)\]$")


def parse_address(address: str) -> tuple[str, str]:
    """Split ``execute[install alp]`` into ``("execute", "install alp")``."""
    m = _ADDRESS_RE.match(address)
    if m is None:
        raise ValueError(f"Invalid resource address '{address}': expected 'type[name]'")
    return m.group("type"), m.group("name")


def _coerce_notification(v: Any) -> Any:
    if isinstance(v, str):
        return {"target": v}
    return v


class Notification(BaseModel):
    """Trigger relationship: run *target* after the owning resource's action succeeds.

    ``action`` defaults to the target's default action. ``timing="delayed"``
    queues the target until every declared resource has been evaluated; delayed
    targets run at most once per run.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str
    action: str | None = None
    timing: Literal["immediately", "delayed"] = "immediately"

    @field_validator("target")
    @classmethod
    def _target_is_address(cls, v: str) -> str:
        parse_address(v)
        return v


def _none_to_list(v: Any) -> Any:
    if v is None:
        return []
    if not isinstance(v, list):
        return [v]
    return v


class Resource(BaseModel):
    """Base class for all host resources.

    Resources are pure data - they define the desired state and how to check it.
    Handlers know how to act on the host.
    """

    model_config = ConfigDict(extra="forbid")

    resource_type: ClassVar[str]
    default_action: ClassVar[str]

    name: str = Field(min_length=1)
    description: str = ""
    action: str = ""
    not_if: Guard | None = None
    only_if: Guard | None = None
    notifies: Annotated[
        list[Annotated[Notification, BeforeValidator(_coerce_notification)]],
        BeforeValidator(_none_to_list),
    ] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_action(self) -> Self:
        if not self.action:
            self.action = self.default_action
        elif self.action not in (self.default_action, DORMANT_ACTION):
            msg = (
                f"Invalid action '{self.action}' for {self.resource_type}: "
                f"expected '{self.default_action}' or '{DORMANT_ACTION}'"
            )
            raise ValueError(msg)
        return self

    @property
    def dormant(self) -> bool:
        """True when the resource only runs when notified."""
        return self.action == DORMANT_ACTION

    @computed_field  # type: ignore[prop-decorator]
    @property
    def address(self) -> str:
        """Unique address for this resource (e.g., 'execute[install alp]')."""
        return f"{self.resource_type}[{self.name}]"
