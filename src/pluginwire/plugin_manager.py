from __future__ import annotations

import logging
import weakref
from abc import abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from typing_extensions import Self

from pluginwire._internal.autoregistration import AutoInvokablePolicy
from pluginwire._internal.class_loader import class_path
from pluginwire._internal.instantiation import PluginInstantiator
from pluginwire._internal.reclassifier import ErrorReclassifier
from pluginwire.config import ServiceManagerConfig, ServiceManagerSettings
from pluginwire.contracts import CreationOptions, ServiceLocator, ServiceLocatorAware
from pluginwire.exceptions import (
    InvalidArgumentError,
    InvalidPluginError,
    ServiceNotCreatedError,
    ServiceNotFoundError,
)
from pluginwire.lock_mode import LockMode
from pluginwire.service_manager import InitializerLike, ServiceManager

logger = logging.getLogger(__name__)


class AbstractPluginManager(ServiceLocatorAware):
    """Manage plugins of one kind on top of a ``ServiceManager``.

    A plugin manager resolves plugins by name like a service manager, and adds:

    - per-call creation options passed to invokable constructors and
      configurable factories (``get(name, options)``);
    - auto-invokable registration, so a dotted class path can be requested
      without registering it first;
    - validation of every plugin through ``validate_plugin``;
    - diagnostics for plugins requested from the wrong manager, when the outer
      service locator turns out to have the requested name.

    Overriding registrations is allowed by default, so applications can replace
    the plugins a concrete manager ships with.

    Subclasses implement ``validate_plugin``; ``InstanceOfPluginManager`` covers
    the common "must be an instance of" rule.
    """

    allow_override: ClassVar[bool] = True
    auto_add_invokable_class: ClassVar[bool] = True
    share_by_default: ClassVar[bool] = True

    def __init__(
        self,
        config_or_locator: ServiceManagerConfig | ServiceLocator | None = None,
        config: ServiceManagerConfig | Mapping[str, Any] | None = None,
        *,
        allow_override: bool | None = None,
        auto_add_invokable_class: bool | None = None,
        share_by_default: bool | None = None,
        lock_mode: LockMode | None = None,
        settings: ServiceManagerSettings | None = None,
    ) -> None:
        """Initialize the manager from no seed, a config, or an outer locator.

        Args:
            config_or_locator: ``None``, a ``ServiceManagerConfig`` with the
                initial registrations, or the outer service locator.
            config: Initial registrations when ``config_or_locator`` is a
                locator.
            allow_override: Allow replacing existing registrations.
            auto_add_invokable_class: Register requested dotted class paths as
                invokables on demand.
            share_by_default: Cache created plugins unless a name is marked as
                not shared.
            lock_mode: Locking strategy for registrations and resolution.
            settings: Environment-driven defaults for the options above.

        Raises:
            InvalidArgumentError: If ``config_or_locator`` has an unsupported
                type, or ``config`` is combined with something other than a
                locator.

        Examples:
            .. code-block:: python

                filters = FilterPluginManager()
                filters = FilterPluginManager(ServiceManagerConfig(invokables={...}))
                filters = FilterPluginManager(services, {"invokables": {...}})

        """
        service_locator, seed = self._split_seed(config_or_locator, config)

        settings = settings or ServiceManagerSettings.model_construct()
        self._auto_add_invokable_class: bool = settings.pick(
            "auto_add_invokable_class",
            auto_add_invokable_class,
            self.auto_add_invokable_class,
        )
        self._services = ServiceManager(
            allow_override=settings.pick("allow_override", allow_override, self.allow_override),
            share_by_default=settings.pick(
                "share_by_default",
                share_by_default,
                self.share_by_default,
            ),
            lock_mode=settings.pick("lock_mode", lock_mode, LockMode.NONE),
            instantiator=PluginInstantiator(),
            creation_locator=self,
        )
        self._auto_invokable_policy = AutoInvokablePolicy()
        self._reclassifier = ErrorReclassifier()
        self._service_locator_ref: Callable[[], ServiceLocator | None] | None = None

        if service_locator is not None:
            self.set_service_locator(service_locator)
        if seed is not None:
            ServiceManagerConfig.from_value(seed).configure_service_manager(self)

        self.add_initializer(self._inject_service_locator)

    @abstractmethod
    def validate_plugin(self, plugin: Any) -> None:
        """Check that ``plugin`` is acceptable for this manager.

        Raises:
            InvalidPluginError: If the plugin has the wrong type or shape.

        """

    # region Resolution
    def get(
        self,
        name: str,
        options: CreationOptions | None = None,
        use_peering: bool = True,
    ) -> Any:
        """Retrieve a plugin by name.

        Args:
            name: Plugin name, alias, or dotted class path.
            options: Creation options for this call only. When a new instance
                is created they are passed as the sole constructor argument of
                invokables and class factories, and to configurable factories.
                ``None`` and empty options both mean "no options".
            use_peering: Fall back to peering service managers.

        Returns:
            The validated plugin.

        Raises:
            ServiceNotFoundError: If the name cannot be resolved, or if importing
                a dotted class path failed with an error other than
                ``ImportError``; the import error is chained as the cause.
            ServiceNotCreatedError: If creating the plugin failed.
            CircularDependencyFoundError: If creating the plugin requires the
                plugin itself.
            InvalidPluginError: If ``validate_plugin`` rejected the instance.
            ServiceLocatorUsageError: Instead of any of the above when the
                outer service locator has ``name``.

        Notes:
            A dotted class path registered on demand is unregistered again when
            any step fails, including errors other than ``InvalidPluginError``
            raised by ``validate_plugin``, so a later request starts from a
            clean state. Names registered as aliases are never auto-registered,
            even while their target is missing.

        """
        with self._services.lock:
            try:
                is_auto_invokable = self._register_auto_invokable(name)
            except ServiceNotFoundError as error:
                self._reclassifier.reclassify(self, name, False, error)

            try:
                instance = self._services.get(name, use_peering, creation_options=options)
                self.validate_plugin(instance)
            except (ServiceNotFoundError, ServiceNotCreatedError, InvalidPluginError) as error:
                self._reclassifier.reclassify(self, name, is_auto_invokable, error)
            except Exception:
                if is_auto_invokable:
                    self._reclassifier.roll_back(self, name)
                raise

            return instance

    def has(self, name: str, *, use_peering: bool = True) -> bool:
        return self._services.has(name, use_peering=use_peering)

    def has_alias(self, name: str) -> bool:
        return self._services.has_alias(name)

    def _register_auto_invokable(self, name: str) -> bool:
        if not self._auto_add_invokable_class or not isinstance(name, str) or self.has(name):
            return False
        if self.has_alias(name):
            return False
        plugin_class = self._auto_invokable_policy.resolve(name)
        if plugin_class is None:
            return False

        self.set_invokable_class(name, name)
        logger.debug(
            "Registered '%s' as auto-invokable plugin %s in %r",
            name,
            class_path(plugin_class),
            self,
        )
        return True

    def _inject_service_locator(self, instance: Any, service_locator: ServiceLocator) -> None:  # noqa: ARG002
        if isinstance(instance, ServiceLocatorAware):
            instance.set_service_locator(self)

    # endregion Resolution

    # region Service Locator
    def set_service_locator(self, service_locator: ServiceLocator) -> Self:
        """Set the outer service locator.

        The locator is referenced weakly when it supports weak references; it
        must be kept alive by its owner. It is used for lookups in factories
        and for error diagnostics only.
        """
        try:
            self._service_locator_ref = weakref.ref(service_locator)
        except TypeError:
            self._service_locator_ref = lambda: service_locator
        return self

    def get_service_locator(self) -> ServiceLocator | None:
        if self._service_locator_ref is None:
            return None
        return self._service_locator_ref()

    # endregion Service Locator

    # region Registration Methods
    def set_service(self, name: str, service: Any, shared: bool = True) -> Self:
        """Register a ready plugin instance after validating it.

        Raises:
            InvalidPluginError: If ``validate_plugin`` rejects ``service``.
            InvalidServiceNameError: If the name is rejected by the underlying
                service manager.

        """
        if service is not None:
            self.validate_plugin(service)
        self._services.set_service(name, service, shared)
        return self

    def set_invokable_class(
        self,
        name: str,
        invokable_class: type[Any] | str,
        shared: bool | None = None,
    ) -> Self:
        self._services.set_invokable_class(name, invokable_class, shared)
        return self

    def set_factory(self, name: str, factory: Any, shared: bool | None = None) -> Self:
        self._services.set_factory(name, factory, shared)
        return self

    def set_alias(self, alias: str, name: str) -> Self:
        self._services.set_alias(alias, name)
        return self

    def set_shared(self, name: str, shared: bool) -> Self:
        self._services.set_shared(name, shared)
        return self

    def add_initializer(self, initializer: InitializerLike, top_of_stack: bool = True) -> Self:
        self._services.add_initializer(initializer, top_of_stack)
        return self

    def add_peering_service_manager(self, manager: ServiceLocator) -> Self:
        self._services.add_peering_service_manager(manager)
        return self

    def unregister_service(self, canonical_name: str) -> None:
        self._services.unregister_service(canonical_name)

    def canonicalize_name(self, name: str) -> str:
        return self._services.canonicalize_name(name)

    def get_registered_services(self) -> dict[str, list[str]]:
        return self._services.get_registered_services()

    def get_canonical_names(self) -> dict[str, str]:
        return self._services.get_canonical_names()

    def get_allow_override(self) -> bool:
        return self._services.get_allow_override()

    def set_allow_override(self, allow_override: bool) -> Self:
        self._services.set_allow_override(allow_override)
        return self

    # endregion Registration Methods

    @staticmethod
    def _split_seed(
        config_or_locator: object,
        config: ServiceManagerConfig | Mapping[str, Any] | None,
    ) -> tuple[ServiceLocator | None, ServiceManagerConfig | Mapping[str, Any] | None]:
        if isinstance(config_or_locator, ServiceManagerConfig):
            if config is not None:
                msg = (
                    "A ServiceManagerConfig passed as first argument cannot be combined "
                    "with a second configuration"
                )
                raise InvalidArgumentError(msg)
            return None, config_or_locator

        if isinstance(config_or_locator, ServiceLocator):
            return config_or_locator, config

        if config_or_locator is None:
            if config is not None:
                msg = (
                    "A configuration passed as second argument requires a service "
                    "locator as first argument; pass a ServiceManagerConfig first instead"
                )
                raise InvalidArgumentError(msg)
            return None, None

        msg = (
            "Plugin managers expect a ServiceManagerConfig instance or ServiceLocator "
            f"instance; received {type(config_or_locator).__qualname__}"
        )
        raise InvalidArgumentError(msg)


class InstanceOfPluginManager(AbstractPluginManager):
    """Plugin manager accepting instances of ``instance_of``.

    Examples:
        .. code-block:: python

            class FilterPluginManager(InstanceOfPluginManager):
                instance_of = Filter

    """

    instance_of: ClassVar[type[Any] | tuple[type[Any], ...]] = object

    def validate_plugin(self, plugin: Any) -> None:
        if isinstance(plugin, self.instance_of):
            return

        expected = self.instance_of if isinstance(self.instance_of, tuple) else (self.instance_of,)
        expected_names = ", ".join(cls.__qualname__ for cls in expected)
        msg = (
            f"Plugin of type '{type(plugin).__qualname__}' is invalid for "
            f"{type(self).__qualname__}; it must be an instance of {expected_names}"
        )
        raise InvalidPluginError(msg)


__all__ = ["AbstractPluginManager", "InstanceOfPluginManager"]
