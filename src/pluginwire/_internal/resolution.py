from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from pluginwire._internal.type_checks import has_creation_options
from pluginwire.contracts import CreationOptions
from pluginwire.exceptions import CircularDependencyFoundError

# Names currently being created, outermost first. Entries are keyed by the
# owning manager so two managers may create equally named services in one chain.
_resolution_stack: ContextVar[tuple[tuple[int, str], ...]] = ContextVar(
    "pluginwire_resolution_stack",
    default=(),
)


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Per-call state threaded through every instantiation layer.

    Each ``get`` call builds its own context, so a factory resolving other
    services through the same manager never sees or replaces the options of
    the call that is constructing it.
    """

    canonical_name: str
    requested_name: str
    options: CreationOptions | None = None

    @property
    def has_options(self) -> bool:
        return has_creation_options(self.options)

    @property
    def constructor_args(self) -> tuple[Any, ...]:
        """Positional arguments for a plugin or factory constructor."""
        return (self.options,) if self.has_options else ()


def current_chain(owner: object) -> tuple[str, ...]:
    """Return names currently being created by ``owner``, outermost first."""
    owner_id = id(owner)
    return tuple(name for key_owner, name in _resolution_stack.get() if key_owner == owner_id)


@contextmanager
def resolving(owner: object, canonical_name: str) -> Generator[None, None, None]:
    """Mark ``canonical_name`` as being created by ``owner`` for the block.

    Raises:
        CircularDependencyFoundError: If the name is already being created by
            the same owner further up the call chain.

    """
    stack = _resolution_stack.get()
    key = (id(owner), canonical_name)
    if key in stack:
        chain = (*current_chain(owner), canonical_name)
        raise CircularDependencyFoundError(canonical_name, chain)

    token = _resolution_stack.set((*stack, key))
    try:
        yield
    finally:
        _resolution_stack.reset(token)


__all__ = ["ResolutionContext", "current_chain", "resolving"]
