from __future__ import annotations

import types
from collections.abc import Mapping, Sequence
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def has_creation_options(options: object) -> bool:
    """Return true when options carry at least one value.

    ``None`` and empty mappings or sequences are all treated as "no options",
    so plugins are then constructed without arguments. Strings and bytes are
    scalar values, not sequences of options.

    Args:
        options: Options passed to ``get`` for the current call.

    """
    if options is None:
        return False
    if isinstance(options, Mapping):
        return len(options) > 0
    if isinstance(options, Sequence) and not isinstance(options, (str, bytes)):
        return len(options) > 0
    return True


__all__ = ["has_creation_options", "is_runtime_class"]
