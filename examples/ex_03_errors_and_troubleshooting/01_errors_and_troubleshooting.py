"""Common error classes for troubleshooting.

This module triggers representative failure paths of a plugin manager and
prints what each error carries, so you can recognize them quickly.
"""

from __future__ import annotations

from pluginwire import (
    CircularDependencyFoundError,
    InstanceOfPluginManager,
    InvalidPluginError,
    ServiceLocatorUsageError,
    ServiceManager,
    ServiceNotFoundError,
)


class Filter:
    pass


class NotAFilter:
    pass


class FilterPluginManager(InstanceOfPluginManager):
    instance_of = Filter


def main() -> None:
    services = ServiceManager()
    services.set_service("database", object())
    filters = FilterPluginManager(services)

    try:
        filters.get("database")
    except ServiceLocatorUsageError as error:
        print(f"wrong_manager={type(error.__cause__).__name__}")  # => wrong_manager=ServiceNotFoundError

    not_a_filter = f"{__name__}.NotAFilter"
    try:
        filters.get(not_a_filter)
    except InvalidPluginError:
        print(f"invalid_plugin_rolled_back={not filters.has(not_a_filter)}")  # => invalid_plugin_rolled_back=True

    filters.set_factory("loop", lambda locator, cname, rname: locator.get("loop"))
    try:
        filters.get("loop")
    except CircularDependencyFoundError as error:
        print(f"circular={' -> '.join(error.chain)}")  # => circular=loop -> loop

    try:
        filters.get("missing")
    except ServiceNotFoundError as error:
        print(f"not_found={error.name}")  # => not_found=missing


if __name__ == "__main__":
    main()
