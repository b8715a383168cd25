from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pluginwire.exceptions import InvalidArgumentError
from pluginwire.lock_mode import LockMode

if TYPE_CHECKING:
    from pluginwire.plugin_manager import AbstractPluginManager
    from pluginwire.service_manager import ServiceManager


class ServiceManagerConfig(BaseModel):
    """Initial registrations used to seed a manager.

    Keys are service names; values follow the matching registration method:
    ``services`` map to instances, ``invokables`` to classes or dotted class
    paths, ``factories`` to factory classes, dotted paths, ``FactoryInterface``
    instances or callables, ``aliases`` to target names and ``shared`` to
    shared flags. ``initializers`` are ``Initializer`` instances or callables.

    Examples:
        .. code-block:: python

            config = ServiceManagerConfig(
                invokables={"trim": "app.filters.StringTrim"},
                aliases={"strip": "trim"},
                shared={"trim": False},
            )
            manager = ServiceManager(config)

    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid", frozen=True)

    services: dict[str, Any] = Field(default_factory=dict)
    invokables: dict[str, Any] = Field(default_factory=dict)
    factories: dict[str, Any] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
    shared: dict[str, bool] = Field(default_factory=dict)
    initializers: list[Any] = Field(default_factory=list)

    @classmethod
    def from_value(cls, value: ServiceManagerConfig | Mapping[str, Any]) -> ServiceManagerConfig:
        """Return ``value`` as a config, validating plain mappings.

        Raises:
            InvalidArgumentError: If ``value`` is neither a config nor a mapping,
                or if the mapping does not validate.

        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            msg = (
                f"{cls.__name__} expects a mapping of registrations; "
                f"received {type(value).__qualname__}"
            )
            raise InvalidArgumentError(msg)
        try:
            return cls.model_validate(dict(value))
        except ValidationError as error:
            msg = f"Invalid service manager configuration: {error}"
            raise InvalidArgumentError(msg) from error

    def is_empty(self) -> bool:
        return not (
            self.services
            or self.invokables
            or self.factories
            or self.aliases
            or self.shared
            or self.initializers
        )

    def configure_service_manager(self, manager: ServiceManager | AbstractPluginManager) -> None:
        """Apply every registration to ``manager``.

        Bindings are registered before aliases and shared flags, which refer to
        them.
        """
        if self.is_empty():
            return

        for name, invokable in self.invokables.items():
            manager.set_invokable_class(name, invokable)
        for name, factory in self.factories.items():
            manager.set_factory(name, factory)
        for name, service in self.services.items():
            manager.set_service(name, service)
        for alias, target in self.aliases.items():
            manager.set_alias(alias, target)
        for name, shared in self.shared.items():
            manager.set_shared(name, shared)
        for initializer in self.initializers:
            manager.add_initializer(initializer, top_of_stack=False)


class ServiceManagerSettings(BaseSettings):
    """Environment-driven behaviour defaults for managers.

    Values left unset fall back to the manager class defaults; explicit
    constructor keywords win over both.

    Environment variables use the ``PLUGINWIRE_`` prefix, for example
    ``PLUGINWIRE_ALLOW_OVERRIDE=false`` or ``PLUGINWIRE_LOCK_MODE=thread``.
    """

    model_config = SettingsConfigDict(env_prefix="PLUGINWIRE_", extra="ignore")

    allow_override: bool | None = None
    auto_add_invokable_class: bool | None = None
    share_by_default: bool | None = None
    lock_mode: LockMode | None = None

    def pick(self, field: str, explicit: Any, default: Any) -> Any:
        """Return ``explicit`` if given, else the configured value, else ``default``."""
        if explicit is not None:
            return explicit
        configured = getattr(self, field)
        if configured is not None:
            return configured
        return default


__all__ = ["ServiceManagerConfig", "ServiceManagerSettings"]
