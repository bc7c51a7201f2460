"""Template rendering for ``template`` resources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, StrictUndefined, TemplateError

from host_provisioner.core.files import write_text_atomic
from host_provisioner.engine.errors import TemplateRenderError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from host_provisioner.resources.template import TemplateResource

logger = logging.getLogger(__name__)

_jinja = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def template_source_path(resource: TemplateResource, base_dir: Path) -> Path:
    source = Path(resource.source)
    return source if source.is_absolute() else base_dir / source


def render_template(
    resource: TemplateResource, variables: Mapping[str, str], *, base_dir: Path
) -> Path:
    """Render *resource*'s template with *variables* and write it to its destination.

    The destination is always overwritten. Returns the destination path.

    Raises:
        TemplateRenderError: The template is missing or invalid, references an
            undefined variable, or the destination cannot be written.
    """
    source = template_source_path(resource, base_dir)
    destination = Path(resource.destination)

    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateRenderError(
            str(destination), f"cannot read template {source}: {exc}"
        ) from exc

    try:
        rendered = _jinja.from_string(text).render(**variables)
    except TemplateError as exc:
        raise TemplateRenderError(str(destination), f"{source}: {exc}") from exc

    try:
        write_text_atomic(destination, rendered, mode=resource.file_mode)
    except OSError as exc:
        raise TemplateRenderError(str(destination), str(exc)) from exc

    logger.info("Rendered %s from %s", destination, source)
    return destination
