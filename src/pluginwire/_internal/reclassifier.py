from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn

from pluginwire.exceptions import ServiceLocatorUsageError

if TYPE_CHECKING:
    from pluginwire.plugin_manager import AbstractPluginManager

logger = logging.getLogger(__name__)


class ErrorReclassifier:
    """Turn a failed plugin lookup into the most actionable error.

    A failure is reported as ``ServiceLocatorUsageError`` when the outer
    service locator of the plugin manager has the requested name: the caller
    most likely asked the plugin manager for a service of the main locator.
    Otherwise the original error is raised unchanged.
    """

    def reclassify(
        self,
        plugin_manager: AbstractPluginManager,
        name: str,
        was_auto_invokable: bool,
        error: Exception,
    ) -> NoReturn:
        """Raise the reclassified error; never returns.

        Args:
            plugin_manager: Manager whose ``get`` failed.
            name: Requested service name.
            was_auto_invokable: ``name`` was registered as an invokable by this
                ``get`` call; the registration is rolled back.
            error: Original failure.

        Raises:
            ServiceLocatorUsageError: If the outer locator has ``name``.
            Exception: ``error`` itself in every other case.

        """
        if was_auto_invokable:
            self.roll_back(plugin_manager, name)

        service_locator = plugin_manager.get_service_locator()
        if service_locator is not None and service_locator.has(name):
            logger.debug(
                "Service '%s' failed in %r but exists in outer locator %r",
                name,
                plugin_manager,
                service_locator,
            )
            raise ServiceLocatorUsageError.from_invalid_plugin_manager_requested_service_name(
                plugin_manager,
                service_locator,
                name,
                error,
            ) from error

        raise error

    def roll_back(self, plugin_manager: AbstractPluginManager, name: str) -> None:
        """Unregister ``name`` after its auto-invokable registration failed."""
        logger.debug("Rolling back auto-invokable registration of '%s'", name)
        plugin_manager.unregister_service(plugin_manager.canonicalize_name(name))


__all__ = ["ErrorReclassifier"]
