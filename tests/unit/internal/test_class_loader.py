from __future__ import annotations

from pathlib import Path

import pytest

from pluginwire._internal.class_loader import class_path, load_callable, load_class


class Outer:
    class Inner:
        pass


def helper() -> None:
    return None


SETTING = "not callable"


def test_load_class_returns_module_level_class() -> None:
    assert load_class(f"{__name__}.Outer") is Outer


def test_load_class_returns_nested_class() -> None:
    assert load_class(f"{__name__}.Outer.Inner") is Outer.Inner


def test_load_class_loads_stdlib_class() -> None:
    assert load_class("collections.OrderedDict").__name__ == "OrderedDict"


def test_load_class_returns_class_unchanged() -> None:
    assert load_class(Outer) is Outer


@pytest.mark.parametrize(
    "path",
    [
        "Outer",
        "",
        f"{__name__}..Outer",
        f"{__name__}.Missing",
        f"{__name__}.helper",
        "definitely_missing_package_xyz.Thing",
        42,
        None,
    ],
)
def test_load_class_returns_none_for_unloadable_paths(path: object) -> None:
    assert load_class(path) is None


def test_load_class_propagates_broken_module_imports(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    (tmp_path / "pluginwire_broken_plugins.py").write_text(
        "import pluginwire_missing_dependency_xyz\n\nclass Thing:\n    pass\n",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    with pytest.raises(ModuleNotFoundError, match="pluginwire_missing_dependency_xyz"):
        load_class("pluginwire_broken_plugins.Thing")


def test_class_path_round_trips_through_load_class() -> None:
    assert class_path(Outer.Inner) == f"{__name__}.Outer.Inner"
    assert load_class(class_path(Outer.Inner)) is Outer.Inner


def test_load_callable_returns_module_level_function() -> None:
    assert load_callable(f"{__name__}.helper") is helper


def test_load_callable_accepts_classes() -> None:
    assert load_callable(f"{__name__}.Outer.Inner") is Outer.Inner


@pytest.mark.parametrize(
    "path",
    [
        "helper",
        f"{__name__}.SETTING",
        f"{__name__}.missing_function",
        helper,
    ],
)
def test_load_callable_returns_none_for_non_callables(path: object) -> None:
    assert load_callable(path) is None
