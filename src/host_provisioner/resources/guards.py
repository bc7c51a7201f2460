"""Guard predicates: side-effect-free checks of the host state.

A guard is declared on a resource as ``not_if`` (skip when the guard holds) or
``only_if`` (skip unless the guard holds). Three forms are supported:

- ``CommandGuard``: a shell command; holds when it exits 0
- ``PathGuard``: a filesystem test on a path
- ``PackageGuard``: package-database membership

YAML accepts shorthands, normalized by :func:`coerce_guard`::

    not_if: test -x /usr/local/bin/alp     # CommandGuard
    not_if: {executable: /usr/local/bin/alp}
    not_if: {directory: /opt/netdata}
    not_if: {package: percona-toolkit}
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, TypeAlias

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

PathCheck: TypeAlias = Literal["exists", "file", "directory", "executable"]

_PATH_CHECKS: tuple[str, ...] = ("exists", "file", "directory", "executable")


class CommandGuard(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    command: str = Field(min_length=1)
    cwd: str | None = None

    def describe(self) -> str:
        return self.command


class PathGuard(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    check: PathCheck
    path: str = Field(min_length=1)

    def describe(self) -> str:
        return f"{self.check} {self.path}"


class PackageGuard(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    package: str = Field(min_length=1)

    def describe(self) -> str:
        return f"package {self.package}"


def coerce_guard(v: Any) -> Any:
    """Normalize YAML shorthands into guard model input."""
    if isinstance(v, str):
        return {"command": v}
    if isinstance(v, dict) and len(v) == 1:
        ((key, value),) = v.items()
        if key in _PATH_CHECKS:
            return {"check": key, "path": value}
    return v


Guard: TypeAlias = Annotated[
    CommandGuard | PathGuard | PackageGuard,
    BeforeValidator(coerce_guard),
]
