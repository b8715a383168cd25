from __future__ import annotations

import importlib
from typing import Any

from pluginwire._internal.type_checks import is_runtime_class


def class_path(cls: type[Any]) -> str:
    """Return the dotted import path of ``cls``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def load_class(path: object) -> type[Any] | None:
    """Load a class from a dotted path such as ``"package.module.Class"``.

    Nested classes (``"package.module.Outer.Inner"``) are supported. The longest
    importable module prefix wins, remaining segments are looked up as
    attributes.

    Args:
        path: Dotted path, or a class which is returned unchanged.

    Returns:
        The class, or ``None`` when the path does not name a loadable class.

    Raises:
        ImportError: If a module on the path exists but fails to import for an
            unrelated reason, such as a missing dependency of its own.

    """
    if is_runtime_class(path):
        return path
    candidate = _load_attribute(path)
    return candidate if is_runtime_class(candidate) else None


def load_callable(path: object) -> Any | None:
    """Load a callable, such as a module-level function, from a dotted path.

    Returns:
        The callable, or ``None`` when the path does not name one.

    Raises:
        ImportError: Under the same conditions as :func:`load_class`.

    """
    candidate = _load_attribute(path)
    return candidate if callable(candidate) else None


def _load_attribute(path: object) -> object | None:
    if not isinstance(path, str) or "." not in path:
        return None

    parts = path.split(".")
    if not all(parts):
        return None

    for split_at in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split_at])
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as error:
            if error.name is not None and not _is_module_prefix(error.name, module_name):
                raise
            continue

        candidate: object = module
        for attribute in parts[split_at:]:
            candidate = getattr(candidate, attribute, None)
            if candidate is None:
                return None
        return candidate

    return None


def _is_module_prefix(missing: str, module_name: str) -> bool:
    return module_name == missing or module_name.startswith(f"{missing}.")


__all__ = ["class_path", "load_callable", "load_class"]
