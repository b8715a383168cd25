"""Quickstart: one plugin manager per kind of plugin.

Subclass ``InstanceOfPluginManager`` with the plugin base class, seed it with
registrations and request plugins by name, alias or dotted class path.
"""

from __future__ import annotations

from pluginwire import InstanceOfPluginManager, ServiceManager


class Filter:
    def apply(self, value: str) -> str:
        return value


class StringTrim(Filter):
    def apply(self, value: str) -> str:
        return value.strip()


class StringToUpper(Filter):
    def apply(self, value: str) -> str:
        return value.upper()


class FilterPluginManager(InstanceOfPluginManager):
    instance_of = Filter


def main() -> None:
    services = ServiceManager()
    filters = FilterPluginManager(
        services,
        {"invokables": {"string-trim": StringTrim}, "aliases": {"strip": "string-trim"}},
    )

    trim = filters.get("StringTrim")
    print(f"trim={trim.apply('  hello  ')!r}")  # => trim='hello'
    print(f"alias_same={filters.get('strip') is trim}")  # => alias_same=True

    upper_path = f"{__name__}.StringToUpper"
    upper = filters.get(upper_path)
    print(f"upper={upper.apply('hello')}")  # => upper=HELLO
    print(f"auto_registered={filters.has(upper_path)}")  # => auto_registered=True


if __name__ == "__main__":
    main()
