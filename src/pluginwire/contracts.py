from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeAlias, runtime_checkable

CreationOptions: TypeAlias = Mapping[str, Any] | Sequence[Any]
"""Transient per-call construction options passed to ``get``."""


@runtime_checkable
class ServiceLocator(Protocol):
    """Read-only lookup surface shared by managers and outer locators."""

    def has(self, name: str) -> bool:
        """Return whether ``name`` can be resolved by this locator."""
        ...

    def get(self, name: str) -> Any:
        """Return the service registered as ``name``."""
        ...


class ServiceLocatorAware(ABC):
    """Mark a plugin that wants a back-reference to the manager creating it.

    Plugin managers inject themselves through ``set_service_locator`` right
    after a fresh instance is created, before it is validated.
    """

    @abstractmethod
    def set_service_locator(self, service_locator: ServiceLocator) -> None:
        """Store the locator that created this instance."""

    @abstractmethod
    def get_service_locator(self) -> ServiceLocator | None:
        """Return the stored locator, if any."""


class FactoryInterface(ABC):
    """Produce a service instance for a factory binding."""

    @abstractmethod
    def create_service(
        self,
        service_locator: ServiceLocator,
        canonical_name: str,
        requested_name: str,
    ) -> Any:
        """Create the service.

        Args:
            service_locator: Manager resolving the service; use it to pull
                dependencies.
            canonical_name: Canonical form of the requested name.
            requested_name: Name as passed by the caller.

        Returns:
            The created instance. ``None`` is treated as a creation failure.

        """


class ConfigurableFactory(ABC):
    """Mark a factory that accepts transient construction options.

    Options are pushed in right before ``create_service`` (or ``__call__``) runs
    and are only valid for that invocation.
    """

    @abstractmethod
    def set_creation_options(self, options: CreationOptions) -> None:
        """Receive the options of the current ``get`` call."""


class Initializer(ABC):
    """Hook invoked on every freshly created instance."""

    @abstractmethod
    def initialize(self, instance: Any, service_locator: ServiceLocator) -> None:
        """Initialize ``instance`` in place."""


__all__ = [
    "ConfigurableFactory",
    "CreationOptions",
    "FactoryInterface",
    "Initializer",
    "ServiceLocator",
    "ServiceLocatorAware",
]
