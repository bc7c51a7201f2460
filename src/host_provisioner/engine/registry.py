"""Resource kinds and the handlers that act on them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from host_provisioner.engine.errors import UnknownResourceTypeError
from host_provisioner.resources.base import DORMANT_ACTION

if TYPE_CHECKING:
    from host_provisioner.engine.handlers import ResourceHandler
    from host_provisioner.resources.base import Resource


@dataclass(frozen=True)
class ResourceTypeRegistration:
    resource_type: str
    model: type[Resource]
    handler: ResourceHandler[Any]


class ResourceTypeRegistry:
    """Maps a resource kind (``execute``, ``package``, ...) to its model and handler."""

    def __init__(self) -> None:
        self._kinds: dict[str, ResourceTypeRegistration] = {}

    def register(self, model: type[Resource], handler: ResourceHandler[Any]) -> None:
        """Register *model* under its ``resource_type``.

        Raises:
            ValueError: The model does not name its kind and default action, its
                default action is the dormant one, or the kind is already taken.
        """
        kind = getattr(model, "resource_type", None)
        default_action = getattr(model, "default_action", None)
        if not kind or not isinstance(kind, str):
            raise ValueError(f"{model.__name__} must set a `resource_type`")
        if not default_action or not isinstance(default_action, str):
            raise ValueError(f"{model.__name__} must set a `default_action`")
        if default_action == DORMANT_ACTION:
            raise ValueError(f"{model.__name__}: '{DORMANT_ACTION}' cannot be a default action")
        if kind in self._kinds:
            raise ValueError(f"Resource type already registered: {kind}")

        self._kinds[kind] = ResourceTypeRegistration(
            resource_type=kind, model=model, handler=handler
        )

    def get(self, resource_type: str) -> ResourceTypeRegistration:
        try:
            return self._kinds[resource_type]
        except KeyError as e:
            raise UnknownResourceTypeError(resource_type) from e

    def handler_for(self, resource: Resource) -> ResourceHandler[Any]:
        """Return the handler for *resource*'s kind.

        Raises:
            UnknownResourceTypeError: Nothing is registered for the kind.
        """
        return self.get(resource.resource_type).handler
