"""Configuration models for YAML-based provisioning."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Discriminator, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from host_provisioner.resources.execute import ExecuteResource
from host_provisioner.resources.git import GitResource
from host_provisioner.resources.http_request import HttpRequestResource
from host_provisioner.resources.package import PackageResource
from host_provisioner.resources.template import TemplateResource


class HostSettings(BaseSettings):
    """Host execution settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``PROVISION_`` prefix.  Constructor kwargs take precedence.
    """

    model_config = SettingsConfigDict(env_prefix="PROVISION_")

    shell: str = "/bin/sh"
    http_timeout: float = 60.0
    command_timeout: float | None = None


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


ResourceEntry = Annotated[
    HttpRequestResource | ExecuteResource | PackageResource | GitResource | TemplateResource,
    Discriminator("type"),
]


class Config(BaseModel):
    """Provisioning configuration: settings plus the ordered resource list.

    ``resources`` keeps declaration order (included recipes first, in include
    order); that order is the evaluation order.
    """

    settings: HostSettings = Field(default_factory=HostSettings)
    resources: Annotated[list[ResourceEntry], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    _environment: dict[str, str] = PrivateAttr(default_factory=dict)

    @property
    def environment(self) -> dict[str, str]:
        """Environment snapshot taken at load time (``.env`` overlaid by ``os.environ``)."""
        return self._environment
