from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from pluginwire._internal.class_loader import load_callable, load_class
from pluginwire._internal.resolution import ResolutionContext
from pluginwire._internal.type_checks import is_runtime_class
from pluginwire.contracts import ConfigurableFactory, FactoryInterface
from pluginwire.exceptions import ServiceNotCreatedError, ServiceNotFoundError
from pluginwire.factories import InvokableFactory

logger = logging.getLogger(__name__)


class FactoryHost(Protocol):
    """Container side of factory creation used by the strategies."""

    def cache_factory(self, canonical_name: str, factory: Any) -> None:
        """Replace a class factory binding with its instance."""
        ...

    def invoke_factory(self, callback: Callable[..., Any], context: ResolutionContext) -> Any:
        """Call ``callback`` with the creation locator and names."""
        ...


class Instantiator:
    """Creation strategies of a plain ``ServiceManager``.

    Creation options are ignored: invokables are built without arguments and
    factory classes are instantiated without arguments.
    """

    def create_from_invokable(self, context: ResolutionContext, invokable: object) -> Any:
        invokable_class = self._load_invokable(context, invokable)
        return invokable_class(*self.invokable_args(context))

    def invokable_args(self, context: ResolutionContext) -> tuple[Any, ...]:  # noqa: ARG002
        return ()

    def create_from_factory(
        self,
        host: FactoryHost,
        context: ResolutionContext,
        factory: object,
    ) -> Any:
        """Create an instance from a factory binding.

        Class factories (classes or dotted class paths) are instantiated once
        and the instance is cached back into the binding. A dotted path to any
        other callable, such as a module-level function, is imported once and
        cached the same way.

        Raises:
            ServiceNotCreatedError: If the binding is neither a
                ``FactoryInterface`` instance, a ``(factory, "method")`` pair nor
                a callable.

        """
        if isinstance(factory, str) or is_runtime_class(factory):
            factory_class = load_class(factory)
            if factory_class is not None:
                factory = factory_class(*self.invokable_args(context))
                host.cache_factory(context.canonical_name, factory)
                logger.debug(
                    "Cached factory instance %r for service '%s'",
                    factory,
                    context.canonical_name,
                )
            elif isinstance(factory, str):
                factory = load_callable(factory)
                if factory is not None:
                    host.cache_factory(context.canonical_name, factory)

        callback = self._factory_callback(factory)
        if callback is None:
            msg = (
                f"While attempting to create '{context.canonical_name}'"
                f"{_alias_suffix(context)} an invalid factory was registered for this "
                f"instance type."
            )
            raise ServiceNotCreatedError(msg, name=context.requested_name)

        return self.create_service_via_callback(host, context, callback)

    def create_service_via_callback(
        self,
        host: FactoryHost,
        context: ResolutionContext,
        callback: Callable[..., Any],
    ) -> Any:
        return host.invoke_factory(callback, context)

    def _factory_callback(self, factory: object) -> Callable[..., Any] | None:
        if isinstance(factory, FactoryInterface):
            return factory.create_service
        if (
            isinstance(factory, tuple)
            and len(factory) == 2  # noqa: PLR2004
            and isinstance(factory[1], str)
        ):
            method = getattr(factory[0], factory[1], None)
            return method if callable(method) else None
        if isinstance(factory, str):
            return None
        if callable(factory):
            return factory
        return None

    def _load_invokable(self, context: ResolutionContext, invokable: object) -> type[Any]:
        invokable_class = load_class(invokable)
        if invokable_class is None:
            msg = (
                f"{type(self).__qualname__}.create_from_invokable: failed retrieving "
                f"'{context.canonical_name}'{_alias_suffix(context)} via invokable class "
                f"'{invokable}'; class does not exist"
            )
            raise ServiceNotFoundError(msg, name=context.requested_name)
        return invokable_class


class PluginInstantiator(Instantiator):
    """Creation strategies of plugin managers.

    Non-empty creation options are passed as the sole constructor argument of
    invokables and class factories, and pushed into ``ConfigurableFactory``
    instances before they run.
    """

    def invokable_args(self, context: ResolutionContext) -> tuple[Any, ...]:
        return context.constructor_args

    def create_service_via_callback(
        self,
        host: FactoryHost,
        context: ResolutionContext,
        callback: Callable[..., Any],
    ) -> Any:
        factory = getattr(callback, "__self__", callback)

        if isinstance(factory, ConfigurableFactory) and context.has_options:
            factory.set_creation_options(context.options)  # type: ignore[arg-type]
        elif isinstance(factory, InvokableFactory):
            factory.set_creation_options({})

        return super().create_service_via_callback(host, context, callback)


def _alias_suffix(context: ResolutionContext) -> str:
    if context.requested_name and context.requested_name != context.canonical_name:
        return f" (alias: {context.requested_name})"
    return ""


__all__ = ["FactoryHost", "Instantiator", "PluginInstantiator"]
