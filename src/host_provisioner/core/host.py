"""Host - access to the machine being provisioned."""

from functools import cached_property
from typing import Self

import requests
from pydantic import BaseModel, ConfigDict

from host_provisioner import __version__
from host_provisioner.core.command import CommandRunner
from host_provisioner.core.packages import AptPackageManager


class Host(BaseModel):
    """The local host: shell, package database and outbound HTTP.

    Examples:
        # Real host
        host = Host(shell="/bin/bash", http_timeout=30)

        # Tests: inject fakes
        host = Host.from_runner(fake_runner, session=fake_session)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    shell: str = "/bin/sh"
    http_timeout: float = 60.0
    command_timeout: float | None = None

    # Injected collaborators (for testing)
    _injected_runner: CommandRunner | None = None
    _injected_session: requests.Session | None = None

    @classmethod
    def from_runner(
        cls, runner: CommandRunner, *, session: requests.Session | None = None, **kwargs: object
    ) -> Self:
        """Create a host bound to an existing command runner (and HTTP session)."""
        host = cls(**kwargs)
        host._injected_runner = runner
        host._injected_session = session
        return host

    @cached_property
    def runner(self) -> CommandRunner:
        if self._injected_runner is not None:
            return self._injected_runner
        return CommandRunner(shell=self.shell, timeout=self.command_timeout)

    @cached_property
    def session(self) -> requests.Session:
        if self._injected_session is not None:
            return self._injected_session
        session = requests.Session()
        session.headers["User-Agent"] = f"host-provisioner/{__version__}"
        return session

    @cached_property
    def packages(self) -> AptPackageManager:
        return AptPackageManager(self.runner)
