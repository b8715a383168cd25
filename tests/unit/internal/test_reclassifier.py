from __future__ import annotations

import pytest

from pluginwire import InstanceOfPluginManager, ServiceManager
from pluginwire._internal.reclassifier import ErrorReclassifier
from pluginwire.exceptions import (
    InvalidPluginError,
    ServiceLocatorUsageError,
    ServiceNotFoundError,
)


class Formatter:
    pass


class FormatterPluginManager(InstanceOfPluginManager):
    instance_of = Formatter


FORMATTER = f"{__name__}.Formatter"


def test_original_error_is_raised_without_locator() -> None:
    plugins = FormatterPluginManager()
    error = ServiceNotFoundError("missing", name="json")

    with pytest.raises(ServiceNotFoundError) as exc_info:
        ErrorReclassifier().reclassify(plugins, "json", False, error)

    assert exc_info.value is error


def test_original_error_is_raised_when_locator_lacks_name() -> None:
    services = ServiceManager()
    plugins = FormatterPluginManager(services)
    error = InvalidPluginError("wrong type")

    with pytest.raises(InvalidPluginError) as exc_info:
        ErrorReclassifier().reclassify(plugins, "json", False, error)

    assert exc_info.value is error


def test_locator_usage_error_is_raised_when_locator_has_name() -> None:
    services = ServiceManager()
    services.set_service("json", object())
    plugins = FormatterPluginManager(services)
    error = ServiceNotFoundError("missing", name="json")

    with pytest.raises(ServiceLocatorUsageError) as exc_info:
        ErrorReclassifier().reclassify(plugins, "json", False, error)

    assert exc_info.value.__cause__ is error
    assert exc_info.value.service_locator is services


def test_auto_invokable_registration_is_rolled_back() -> None:
    plugins = FormatterPluginManager()
    plugins.set_invokable_class(FORMATTER, FORMATTER)
    error = InvalidPluginError("wrong type")

    with pytest.raises(InvalidPluginError):
        ErrorReclassifier().reclassify(plugins, FORMATTER, True, error)

    assert not plugins.has(FORMATTER)


def test_explicit_registration_is_kept() -> None:
    plugins = FormatterPluginManager()
    plugins.set_invokable_class(FORMATTER, FORMATTER)
    error = InvalidPluginError("wrong type")

    with pytest.raises(InvalidPluginError):
        ErrorReclassifier().reclassify(plugins, FORMATTER, False, error)

    assert plugins.has(FORMATTER)
