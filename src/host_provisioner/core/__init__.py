"""Core host access components."""

from host_provisioner.core.command import CommandError, CommandResult, CommandRunner
from host_provisioner.core.host import Host
from host_provisioner.core.packages import AptPackageManager

__all__ = ["AptPackageManager", "CommandError", "CommandResult", "CommandRunner", "Host"]
