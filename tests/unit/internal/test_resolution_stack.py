from __future__ import annotations

from typing import Any

import pytest

from pluginwire._internal.resolution import ResolutionContext, current_chain, resolving
from pluginwire.exceptions import CircularDependencyFoundError


class Owner:
    pass


@pytest.mark.parametrize(
    ("options", "expected_args"),
    [
        (None, ()),
        ({}, ()),
        ([], ()),
        ({"a": 1}, ({"a": 1},)),
        (["x"], (["x"],)),
        ("scalar", ("scalar",)),
    ],
)
def test_constructor_args_follow_options(options: Any, expected_args: tuple[Any, ...]) -> None:
    context = ResolutionContext(canonical_name="widget", requested_name="Widget", options=options)

    assert context.has_options is bool(expected_args)
    assert context.constructor_args == expected_args


def test_resolving_tracks_chain_per_owner() -> None:
    owner = Owner()
    other = Owner()

    with resolving(owner, "a"), resolving(other, "x"), resolving(owner, "b"):
        assert current_chain(owner) == ("a", "b")
        assert current_chain(other) == ("x",)

    assert current_chain(owner) == ()


def test_resolving_same_name_twice_raises() -> None:
    owner = Owner()

    with resolving(owner, "a"), resolving(owner, "b"):
        with pytest.raises(CircularDependencyFoundError) as exc_info:
            with resolving(owner, "a"):
                pass

    assert exc_info.value.chain == ("a", "b", "a")


def test_same_name_in_different_owners_is_not_circular() -> None:
    with resolving(Owner(), "a"), resolving(Owner(), "a"):
        pass


def test_stack_is_restored_after_failure() -> None:
    owner = Owner()

    with pytest.raises(RuntimeError), resolving(owner, "a"):
        msg = "boom"
        raise RuntimeError(msg)

    assert current_chain(owner) == ()
    with resolving(owner, "a"):
        assert current_chain(owner) == ("a",)
