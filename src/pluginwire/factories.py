from __future__ import annotations

from typing import Any

from pluginwire._internal.class_loader import load_class
from pluginwire._internal.type_checks import has_creation_options
from pluginwire.contracts import ConfigurableFactory, CreationOptions, FactoryInterface, ServiceLocator
from pluginwire.exceptions import ServiceNotFoundError


class InvokableFactory(FactoryInterface, ConfigurableFactory):
    """Build the class named by the requested service name.

    Register it for services whose name is a dotted class path, so the class is
    constructed with the creation options of the current call, or without
    arguments when there are none.

    Examples:
        .. code-block:: python

            manager.set_factory("app.filters.StringTrim", InvokableFactory)
            trim = manager.get("app.filters.StringTrim", {"charlist": " "})

    """

    def __init__(self, creation_options: CreationOptions | None = None) -> None:
        self._creation_options = creation_options

    def set_creation_options(self, options: CreationOptions) -> None:
        self._creation_options = options

    def create_service(
        self,
        service_locator: ServiceLocator,  # noqa: ARG002
        canonical_name: str,
        requested_name: str,
    ) -> Any:
        target = load_class(requested_name) or load_class(canonical_name)
        if target is None:
            msg = (
                f"{type(self).__qualname__} was unable to load class "
                f"'{requested_name or canonical_name}'; class does not exist"
            )
            raise ServiceNotFoundError(msg, name=requested_name)

        if has_creation_options(self._creation_options):
            return target(self._creation_options)
        return target()


__all__ = ["InvokableFactory"]
