"""HTTP download handler."""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING

import requests

from host_provisioner.core.files import write_atomic
from host_provisioner.engine.errors import ActionError
from host_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import EngineContext
    from host_provisioner.resources.http_request import HttpRequestResource

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def _copy_body(response: requests.Response, f: IO[bytes]) -> None:
    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
        if chunk:
            f.write(chunk)


class HttpRequestHandler(ResourceHandler["HttpRequestResource"]):
    """Streams the response body to the target path with an atomic replace."""

    def run(self, ctx: EngineContext, desired: HttpRequestResource) -> None:
        logger.info("Downloading %s -> %s", desired.url, desired.path)
        try:
            response = ctx.host.session.get(
                desired.url,
                headers=desired.headers or None,
                stream=True,
                timeout=ctx.host.http_timeout,
            )
            try:
                response.raise_for_status()
                write_atomic(
                    desired.path, lambda f: _copy_body(response, f), mode=desired.file_mode
                )
            finally:
                response.close()
        except requests.RequestException as exc:
            raise ActionError(desired.address, f"download of {desired.url} failed: {exc}") from exc
        except OSError as exc:
            raise ActionError(desired.address, f"cannot write {desired.path}: {exc}") from exc
