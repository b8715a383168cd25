from __future__ import annotations

from typing import Any


class PluginWireError(Exception):
    """Represent a base class for all pluginwire-specific failures.

    Catch this type when you want to handle any pluginwire error path without
    matching each concrete exception class individually.
    """


class InvalidArgumentError(PluginWireError, ValueError):
    """Signal malformed constructor input.

    Raised by ``AbstractPluginManager`` and ``ServiceManager`` constructors when
    the seed argument is neither ``None``, a ``ServiceManagerConfig`` nor a
    service locator, or when a configuration object and a second configuration
    are passed together.

    Typical fixes include passing the outer locator first and the registration
    mapping second, or passing a single ``ServiceManagerConfig``.
    """


class InvalidServiceNameError(PluginWireError, ValueError):
    """Signal a service name rejected at registration time.

    Raised when a name is not a non-empty string, when an alias would point at
    itself or form a cycle, or when a name is already registered and the
    manager does not allow overrides.
    """


class ServiceNotFoundError(PluginWireError, LookupError):
    """Signal that a service name has no resolvable binding.

    Raised by ``get`` when neither a registration, an alias, a peering manager
    nor (for plugin managers) auto-invokable registration can satisfy the
    requested name. Also raised when an invokable binding points at a class
    that cannot be loaded at creation time.

    Typical fixes include registering the service, correcting the dotted class
    path, or asking the right manager for it.
    """

    def __init__(self, msg: str, *, name: str | None = None) -> None:
        super().__init__(msg)
        self.name = name


class ServiceNotCreatedError(PluginWireError, RuntimeError):
    """Signal that a binding exists but instantiation failed.

    Raised when the registered factory has an unusable shape, when a factory
    raises an unexpected exception (the original error is chained as
    ``__cause__``) or when a factory returns ``None``.
    """

    def __init__(self, msg: str, *, name: str | None = None) -> None:
        super().__init__(msg)
        self.name = name


class CircularDependencyFoundError(ServiceNotCreatedError):
    """Signal that resolving a name re-entered its own resolution.

    ``chain`` lists the canonical names being created, outermost first, ending
    with the name that was requested again.

    Typical fix is breaking the cycle by resolving one side lazily, e.g. by
    fetching it from the manager when it is first used instead of inside the
    factory.
    """

    def __init__(self, name: str, chain: tuple[str, ...]) -> None:
        msg = f"Circular dependency for service '{name}' was found: {' -> '.join(chain)}."
        super().__init__(msg, name=name)
        self.chain = chain


class InvalidPluginError(PluginWireError, RuntimeError):
    """Signal that a produced instance was rejected by ``validate_plugin``.

    Concrete plugin managers raise this from ``validate_plugin`` when an
    instance does not have the type or shape the manager's domain accepts.
    """


class ServiceLocatorUsageError(ServiceNotFoundError):
    """Signal that a plugin manager was asked for a service of its outer locator.

    Raised instead of the original failure when the plugin manager cannot
    provide ``name`` but its outer service locator reports that it has it. The
    original error is available as ``__cause__``.

    Typical fix is fetching the service from the outer locator rather than from
    the plugin manager.
    """

    def __init__(
        self,
        msg: str,
        *,
        plugin_manager: Any,
        service_locator: Any,
        name: str,
    ) -> None:
        super().__init__(msg, name=name)
        self.plugin_manager = plugin_manager
        self.service_locator = service_locator

    @classmethod
    def from_invalid_plugin_manager_requested_service_name(
        cls,
        plugin_manager: Any,
        service_locator: Any,
        name: str,
        previous: BaseException,
    ) -> ServiceLocatorUsageError:
        """Build the error for a service requested from the wrong manager.

        Args:
            plugin_manager: Plugin manager that failed to provide the service.
            service_locator: Outer locator that has a registration for ``name``.
            name: Requested service name.
            previous: Original failure, chained as ``__cause__``.

        Returns:
            The error, ready to be raised.

        """
        msg = (
            f"Service '{name}' has been requested to plugin manager of type "
            f"'{type(plugin_manager).__qualname__}', but couldn't be retrieved.\n"
            f"A previous exception of type '{type(previous).__qualname__}' has been "
            f"raised in the process.\n"
            f"By the way, a service with the name '{name}' has been found in the "
            f"parent service locator '{type(service_locator).__qualname__}': did you "
            f"forget to call get_service_locator().get('{name}') in your factory code?"
        )
        error = cls(
            msg,
            plugin_manager=plugin_manager,
            service_locator=service_locator,
            name=name,
        )
        error.__cause__ = previous
        return error
