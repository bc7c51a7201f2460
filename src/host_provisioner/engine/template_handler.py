"""Template file handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from host_provisioner.engine.errors import TemplateRenderError
from host_provisioner.engine.handlers import ResourceHandler
from host_provisioner.engine.templates import render_template, template_source_path

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext
    from host_provisioner.resources.template import TemplateResource


class TemplateHandler(ResourceHandler["TemplateResource"]):
    """Renders on every evaluation; only declared guards can skip it."""

    def validate(self, ctx: EngineContext, desired: TemplateResource) -> list[str]:
        errors = [
            f"{desired.address}: environment variable '{name}' is not set"
            for name in desired.missing_variables(ctx.environment)
        ]
        source = template_source_path(desired, ctx.base_dir)
        if not source.is_file():
            errors.append(f"{desired.address}: template source not found: {source}")
        return errors

    def run(self, ctx: EngineContext, desired: TemplateResource) -> None:
        try:
            variables = desired.resolve_variables(ctx.environment)
        except KeyError as exc:
            raise TemplateRenderError(
                desired.destination, f"environment variable {exc} is not set"
            ) from exc
        render_template(desired, variables, base_dir=ctx.base_dir)
