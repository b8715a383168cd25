"""Creation options.

Options passed to ``get`` become the sole constructor argument of a freshly
created plugin. They apply to that call only, and a cached (shared) plugin
keeps the options it was first built with.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pluginwire import InstanceOfPluginManager


class Filter:
    def apply(self, value: str) -> str:
        return value


class Truncate(Filter):
    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self.length = (options or {}).get("length", 10)

    def apply(self, value: str) -> str:
        return value[: self.length]


class FilterPluginManager(InstanceOfPluginManager):
    instance_of = Filter


def main() -> None:
    filters = FilterPluginManager()
    filters.set_invokable_class("truncate", Truncate, shared=False)

    print(f"short={filters.get('truncate', {'length': 3}).apply('pluginwire')}")  # => short=plu
    print(f"default={filters.get('truncate').apply('pluginwire-manager')}")  # => default=pluginwire

    filters.set_invokable_class("cached-truncate", Truncate)
    first = filters.get("cached-truncate", {"length": 3})
    second = filters.get("cached-truncate", {"length": 5})
    print(f"cached_same={first is second}")  # => cached_same=True
    print(f"cached_length={second.length}")  # => cached_length=3


if __name__ == "__main__":
    main()
