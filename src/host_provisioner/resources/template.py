"""Template-rendered file resource model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from host_provisioner.resources.base import Resource

if TYPE_CHECKING:
    from collections.abc import Mapping


def _scalar_to_str(v: Any) -> Any:
    """YAML scalars render the way they are written: ``1`` and ``true``."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int | float):
        return str(v)
    return v


Scalar = Annotated[str, BeforeValidator(_scalar_to_str)]


class EnvVar(BaseModel):
    """Template variable sourced from the environment snapshot."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    env: str = Field(min_length=1)
    default: Scalar | None = None


class TemplateResource(Resource):
    """Render the Jinja2 template ``source`` to the file ``name``.

    Always renders, overwriting the destination. ``source`` is relative to
    the recipe file that declares the resource. Numeric and boolean variable
    values are rendered as strings.
    """

    resource_type: ClassVar[str] = "template"
    default_action: ClassVar[str] = "create"

    type: Literal["template"] = "template"
    source: str = Field(min_length=1)
    variables: dict[str, Scalar | EnvVar] = Field(default_factory=dict)
    mode: str | None = Field(default=None, pattern=r"^0?[0-7]{3}$")

    @property
    def destination(self) -> str:
        return self.name

    @property
    def file_mode(self) -> int | None:
        return int(self.mode, 8) if self.mode is not None else None

    def missing_variables(self, environment: Mapping[str, str]) -> list[str]:
        """Environment variable names referenced here but absent from *environment*."""
        return [
            v.env
            for v in self.variables.values()
            if isinstance(v, EnvVar) and v.default is None and v.env not in environment
        ]

    def resolve_variables(self, environment: Mapping[str, str]) -> dict[str, str]:
        """Return the fixed name -> value mapping used for rendering.

        Raises:
            KeyError: If an environment reference has no value and no default.
        """
        resolved: dict[str, str] = {}
        for key, value in self.variables.items():
            if isinstance(value, EnvVar):
                if value.env in environment:
                    resolved[key] = environment[value.env]
                elif value.default is not None:
                    resolved[key] = value.default
                else:
                    raise KeyError(value.env)
            else:
                resolved[key] = value
        return resolved
