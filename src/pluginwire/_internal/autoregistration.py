from __future__ import annotations

import datetime
import decimal
import inspect
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any, TypeGuard

from pluginwire._internal.class_loader import load_class
from pluginwire._internal.type_checks import is_runtime_class
from pluginwire.exceptions import ServiceNotFoundError


@dataclass(frozen=True, slots=True)
class AutoInvokablePolicy:
    """Internal policy for auto-invokable registration eligibility."""

    ignored_base_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
    )

    def is_eligible_concrete(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when a candidate can be auto-registered as an invokable.

        Args:
            candidate: Value being checked for eligibility or runtime type constraints.

        """
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if inspect.isabstract(candidate):
            return False
        if issubclass(candidate, type):
            return False
        return not issubclass(candidate, self.ignored_base_types)

    def resolve(self, name: str) -> type[Any] | None:
        """Return the class named by ``name`` when it may be auto-registered.

        Args:
            name: Requested service name, interpreted as a dotted class path.

        Raises:
            ServiceNotFoundError: If a module on the path raised anything but
                ``ImportError`` while being imported; the error is chained.

        """
        try:
            candidate = load_class(name)
        except ImportError:
            return None
        except Exception as error:
            msg = (
                f"Unable to auto-register '{name}': importing it raised "
                f"{type(error).__qualname__}: {error}"
            )
            raise ServiceNotFoundError(msg, name=name) from error
        if self.is_eligible_concrete(candidate):
            return candidate
        return None
