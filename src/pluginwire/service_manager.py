from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, ClassVar

from typing_extensions import Self

from pluginwire._internal.instantiation import Instantiator
from pluginwire._internal.resolution import ResolutionContext, resolving
from pluginwire.config import ServiceManagerConfig, ServiceManagerSettings
from pluginwire.contracts import CreationOptions, Initializer, ServiceLocator
from pluginwire.exceptions import (
    InvalidArgumentError,
    InvalidServiceNameError,
    ServiceNotCreatedError,
    ServiceNotFoundError,
)
from pluginwire.lock_mode import LockMode

logger = logging.getLogger(__name__)

InitializerLike = Initializer | Callable[[Any, ServiceLocator], None]

_CANONICAL_NAME_TRANSLATION = str.maketrans("", "", "-_ \\/")


class ServiceManager:
    """Register, create and cache services by name.

    Services are registered as ready instances, invokable classes (classes or
    dotted class paths, resolved when first created) or factories. Every name
    is reduced to a canonical form, so ``"Json-Encoder"`` and ``"jsonencoder"``
    refer to the same registration. Registering a new binding for a name
    replaces the previous one when overrides are allowed.

    Instances created from invokables and factories go through the registered
    initializers and are cached when the name is shared.

    Examples:
        .. code-block:: python

            services = ServiceManager()
            services.set_invokable_class("clock", "app.time.SystemClock")
            services.set_factory("db", lambda locator, cname, rname: connect())

            clock = services.get("clock")

    """

    allow_override: ClassVar[bool] = False
    share_by_default: ClassVar[bool] = True

    def __init__(
        self,
        config: ServiceManagerConfig | Mapping[str, Any] | None = None,
        *,
        allow_override: bool | None = None,
        share_by_default: bool | None = None,
        lock_mode: LockMode | None = None,
        settings: ServiceManagerSettings | None = None,
        instantiator: Instantiator | None = None,
        creation_locator: ServiceLocator | None = None,
    ) -> None:
        """Initialize a manager and optionally seed its registrations.

        Args:
            config: Initial registrations, as a ``ServiceManagerConfig`` or a
                mapping validated into one.
            allow_override: Allow replacing existing registrations.
            share_by_default: Cache created instances unless a name is marked
                as not shared.
            lock_mode: Locking strategy for registrations and resolution.
            settings: Environment-driven defaults for the options above.
            instantiator: Creation strategies for invokables and factories.
            creation_locator: Locator handed to factories and initializers.
                Defaults to this manager.

        Raises:
            InvalidArgumentError: If ``config`` is neither a config nor a mapping.

        """
        # Unset settings must not read the environment; build empty ones instead.
        settings = settings or ServiceManagerSettings.model_construct()
        self._allow_override = settings.pick("allow_override", allow_override, self.allow_override)
        self._share_by_default = settings.pick(
            "share_by_default",
            share_by_default,
            self.share_by_default,
        )
        self._lock_mode = settings.pick("lock_mode", lock_mode, LockMode.NONE)
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self._lock_mode is LockMode.THREAD else nullcontext()
        )

        self._instantiator = instantiator or Instantiator()
        self._creation_locator: ServiceLocator = creation_locator or self

        self._instances: dict[str, Any] = {}
        self._invokable_classes: dict[str, Any] = {}
        self._factories: dict[str, Any] = {}
        self._aliases: dict[str, str] = {}
        self._shared: dict[str, bool] = {}
        self._canonical_names: dict[str, str] = {}
        self._initializers: list[InitializerLike] = []
        self._peering_service_managers: list[ServiceLocator] = []

        if config is not None:
            ServiceManagerConfig.from_value(config).configure_service_manager(self)

    @property
    def lock(self) -> AbstractContextManager[Any]:
        """Re-entrant lock guarding registrations and resolution."""
        return self._lock

    @property
    def lock_mode(self) -> LockMode:
        return self._lock_mode

    def get_allow_override(self) -> bool:
        return self._allow_override

    def set_allow_override(self, allow_override: bool) -> Self:
        self._allow_override = allow_override
        return self

    # region Registration Methods
    def set_invokable_class(
        self,
        name: str,
        invokable_class: type[Any] | str,
        shared: bool | None = None,
    ) -> Self:
        """Bind ``name`` to a class constructed on demand.

        Args:
            name: Service name.
            invokable_class: Class or dotted class path. Paths are resolved when
                the service is first created, so the class may not exist yet.
            shared: Whether created instances are cached; ``None`` keeps the
                manager default.

        Raises:
            InvalidServiceNameError: If the name is invalid or already
                registered while overrides are not allowed.

        """
        with self._lock:
            canonical_name = self._prepare_registration(name)
            self._invokable_classes[canonical_name] = invokable_class
            self._apply_shared(canonical_name, shared)
        return self

    def set_factory(self, name: str, factory: Any, shared: bool | None = None) -> Self:
        """Bind ``name`` to a factory.

        Args:
            name: Service name.
            factory: ``FactoryInterface`` instance, callable taking
                ``(locator, canonical_name, requested_name)``, ``(factory,
                "method")`` pair, or a factory class / dotted class path which
                is instantiated on first use.
            shared: Whether created instances are cached; ``None`` keeps the
                manager default.

        Raises:
            InvalidServiceNameError: If the name is invalid or already
                registered while overrides are not allowed.

        """
        with self._lock:
            canonical_name = self._prepare_registration(name)
            self._factories[canonical_name] = factory
            self._apply_shared(canonical_name, shared)
        return self

    def set_service(self, name: str, service: Any, shared: bool = True) -> Self:
        """Register a ready instance under ``name``.

        Passing ``None`` clears every binding of the name.

        Raises:
            InvalidServiceNameError: If the name is invalid or already
                registered while overrides are not allowed.

        """
        with self._lock:
            canonical_name = self._prepare_registration(name)
            if service is not None:
                self._instances[canonical_name] = service
                self._shared[canonical_name] = shared
        return self

    def set_alias(self, alias: str, name: str) -> Self:
        """Make ``alias`` resolve to the registration of ``name``.

        Raises:
            InvalidServiceNameError: If both names are identical, the alias
                would form a cycle, or the alias is already registered while
                overrides are not allowed.

        """
        with self._lock:
            canonical_alias = self.canonicalize_name(alias)
            canonical_target = self.canonicalize_name(name)
            if canonical_alias == canonical_target:
                msg = f"Invalid service name '{alias}'; alias and target cannot be identical."
                raise InvalidServiceNameError(msg)
            if self._alias_leads_to(canonical_target, canonical_alias):
                msg = f"Circular alias reference: '{alias}' -> '{name}' leads back to '{alias}'."
                raise InvalidServiceNameError(msg)

            self._prepare_registration(alias)
            self._aliases[canonical_alias] = canonical_target
        return self

    def set_shared(self, name: str, shared: bool) -> Self:
        """Mark whether instances created for ``name`` are cached.

        Raises:
            ServiceNotFoundError: If ``name`` is not registered.

        """
        with self._lock:
            canonical_name = self._resolve_alias(self.canonicalize_name(name))
            if not self._is_registered(canonical_name):
                msg = (
                    f"{type(self).__qualname__}.set_shared: a service by the name '{name}' "
                    f"was not found and could not be marked as shared"
                )
                raise ServiceNotFoundError(msg, name=name)
            self._shared[canonical_name] = shared
        return self

    def add_initializer(self, initializer: InitializerLike, top_of_stack: bool = True) -> Self:
        """Add a hook run on every freshly created instance.

        Args:
            initializer: ``Initializer`` instance or callable taking
                ``(instance, locator)``.
            top_of_stack: Run before the already registered initializers.

        Raises:
            InvalidArgumentError: If ``initializer`` is neither an
                ``Initializer`` nor callable.

        """
        if not isinstance(initializer, Initializer) and not callable(initializer):
            msg = (
                f"{type(self).__qualname__}.add_initializer expects a callable or an "
                f"Initializer instance; received {type(initializer).__qualname__}"
            )
            raise InvalidArgumentError(msg)

        with self._lock:
            if top_of_stack:
                self._initializers.insert(0, initializer)
            else:
                self._initializers.append(initializer)
        return self

    def add_peering_service_manager(self, manager: ServiceLocator) -> Self:
        """Consult ``manager`` when a name cannot be resolved locally."""
        with self._lock:
            self._peering_service_managers.append(manager)
        return self

    def unregister_service(self, canonical_name: str) -> None:
        """Remove every binding registered under ``canonical_name``."""
        with self._lock:
            self._clear_bindings(canonical_name)
            self._aliases.pop(canonical_name, None)
            self._shared.pop(canonical_name, None)

    def cache_factory(self, canonical_name: str, factory: Any) -> None:
        """Replace a class factory binding with its instance for reuse."""
        self._factories[canonical_name] = factory

    # endregion Registration Methods

    # region Names
    def canonicalize_name(self, name: str) -> str:
        """Return the canonical form of ``name``.

        Canonical names are lower-cased with ``-``, ``_``, spaces and slashes
        removed; dots are kept so dotted class paths stay readable.

        Raises:
            InvalidServiceNameError: If ``name`` is not a non-empty string.

        """
        canonical_name = self._canonical_names.get(name) if isinstance(name, str) else None
        if canonical_name is not None:
            return canonical_name

        if not isinstance(name, str) or not name:
            msg = f"Service names must be non-empty strings; received {name!r}."
            raise InvalidServiceNameError(msg)

        canonical_name = name.lower().translate(_CANONICAL_NAME_TRANSLATION)
        if not canonical_name:
            msg = f"Service name {name!r} has an empty canonical form."
            raise InvalidServiceNameError(msg)

        self._canonical_names[name] = canonical_name
        return canonical_name

    def get_canonical_names(self) -> dict[str, str]:
        return dict(self._canonical_names)

    def get_registered_services(self) -> dict[str, list[str]]:
        """Return registered canonical names grouped by binding kind."""
        return {
            "invokable_classes": sorted(self._invokable_classes),
            "factories": sorted(self._factories),
            "aliases": sorted(self._aliases),
            "instances": sorted(self._instances),
        }

    # endregion Names

    # region Resolution
    def has(self, name: str, *, use_peering: bool = True) -> bool:
        """Return whether ``name`` can be resolved.

        Args:
            name: Service name or alias.
            use_peering: Also ask peering service managers.

        """
        canonical_name = self._resolve_alias(self.canonicalize_name(name))
        if self._is_registered(canonical_name):
            return True
        if use_peering:
            return any(peer.has(name) for peer in self._peering_service_managers)
        return False

    def has_alias(self, name: str) -> bool:
        """Return whether ``name`` is registered as an alias, resolvable or not."""
        return self.canonicalize_name(name) in self._aliases

    def get(
        self,
        name: str,
        use_peering: bool = True,
        *,
        creation_options: CreationOptions | None = None,
    ) -> Any:
        """Return the service registered as ``name``.

        Args:
            name: Service name or alias.
            use_peering: Fall back to peering service managers when the name is
                not registered locally.
            creation_options: Options of this call, handed to the instantiation
                strategies when a new instance is created.

        Returns:
            Cached or newly created instance.

        Raises:
            ServiceNotFoundError: If no binding can resolve the name.
            ServiceNotCreatedError: If a binding exists but creation failed.
            CircularDependencyFoundError: If creating the name requires the
                name itself.

        """
        with self._lock:
            canonical_name = self._resolve_alias(self.canonicalize_name(name))

            if canonical_name in self._instances:
                return self._instances[canonical_name]

            if self._can_create(canonical_name):
                instance = self._create(canonical_name, name, creation_options)
                if self._shared.get(canonical_name, self._share_by_default):
                    self._instances[canonical_name] = instance
                return instance

            if use_peering:
                for peer in self._peering_service_managers:
                    if peer.has(name):
                        logger.debug("Service '%s' resolved through peering manager %r", name, peer)
                        return peer.get(name)

        msg = f"{type(self).__qualname__}.get was unable to fetch or create an instance for '{name}'"
        raise ServiceNotFoundError(msg, name=name)

    def create(self, name: str, *, creation_options: CreationOptions | None = None) -> Any:
        """Create a new instance for ``name`` without touching the cache.

        Raises:
            ServiceNotFoundError: If the name has no invokable or factory binding.
            ServiceNotCreatedError: If creation failed.

        """
        with self._lock:
            canonical_name = self._resolve_alias(self.canonicalize_name(name))
            if not self._can_create(canonical_name):
                msg = (
                    f"{type(self).__qualname__}.create: no invokable or factory is "
                    f"registered for '{name}'"
                )
                raise ServiceNotFoundError(msg, name=name)
            return self._create(canonical_name, name, creation_options)

    def invoke_factory(self, callback: Callable[..., Any], context: ResolutionContext) -> Any:
        """Call a factory callback and check that it produced an instance.

        Raises:
            ServiceNotCreatedError: If the factory returned ``None``.

        """
        instance = callback(self._creation_locator, context.canonical_name, context.requested_name)
        if instance is None:
            msg = (
                f"The factory was called but did not return an instance for "
                f"'{context.requested_name}'."
            )
            raise ServiceNotCreatedError(msg, name=context.requested_name)
        return instance

    def _create(
        self,
        canonical_name: str,
        requested_name: str,
        creation_options: CreationOptions | None,
    ) -> Any:
        context = ResolutionContext(
            canonical_name=canonical_name,
            requested_name=requested_name,
            options=creation_options,
        )
        with resolving(self, canonical_name):
            try:
                if canonical_name in self._invokable_classes:
                    instance = self._instantiator.create_from_invokable(
                        context,
                        self._invokable_classes[canonical_name],
                    )
                else:
                    instance = self._instantiator.create_from_factory(
                        self,
                        context,
                        self._factories[canonical_name],
                    )
                self._initialize(instance)
            except (ServiceNotFoundError, ServiceNotCreatedError):
                raise
            except Exception as error:
                msg = (
                    f"An exception was raised while creating '{requested_name}'; "
                    f"no instance returned: {type(error).__qualname__}: {error}"
                )
                raise ServiceNotCreatedError(msg, name=requested_name) from error
        return instance

    def _initialize(self, instance: Any) -> None:
        for initializer in list(self._initializers):
            if isinstance(initializer, Initializer):
                initializer.initialize(instance, self._creation_locator)
            else:
                initializer(instance, self._creation_locator)

    # endregion Resolution

    def _prepare_registration(self, name: str) -> str:
        canonical_name = self.canonicalize_name(name)
        if not self._allow_override and self._is_known(canonical_name):
            msg = (
                f"A service by the name or alias '{name}' already exists and cannot be "
                f"overridden; please use an alternate name"
            )
            raise InvalidServiceNameError(msg)
        self._clear_bindings(canonical_name)
        self._aliases.pop(canonical_name, None)
        return canonical_name

    def _apply_shared(self, canonical_name: str, shared: bool | None) -> None:
        if shared is None:
            self._shared.pop(canonical_name, None)
        else:
            self._shared[canonical_name] = shared

    def _clear_bindings(self, canonical_name: str) -> None:
        self._instances.pop(canonical_name, None)
        self._invokable_classes.pop(canonical_name, None)
        self._factories.pop(canonical_name, None)

    def _is_known(self, canonical_name: str) -> bool:
        return canonical_name in self._aliases or self._is_registered(canonical_name)

    def _is_registered(self, canonical_name: str) -> bool:
        return canonical_name in self._instances or self._can_create(canonical_name)

    def _can_create(self, canonical_name: str) -> bool:
        return canonical_name in self._invokable_classes or canonical_name in self._factories

    def _resolve_alias(self, canonical_name: str) -> str:
        seen: set[str] = set()
        while canonical_name in self._aliases and canonical_name not in seen:
            seen.add(canonical_name)
            canonical_name = self._aliases[canonical_name]
        return canonical_name

    def _alias_leads_to(self, start: str, target: str) -> bool:
        seen: set[str] = set()
        current = start
        while current in self._aliases and current not in seen:
            seen.add(current)
            current = self._aliases[current]
            if current == target:
                return True
        return False


__all__ = ["ServiceManager"]
