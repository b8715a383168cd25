"""Shared pytest fixtures for pluginwire tests."""

import pytest

from pluginwire import LockMode, ServiceManager


@pytest.fixture()
def services() -> ServiceManager:
    """Outer service manager with overrides allowed."""
    return ServiceManager(allow_override=True)


@pytest.fixture()
def strict_services() -> ServiceManager:
    """Service manager with the default override policy."""
    return ServiceManager()


@pytest.fixture()
def threaded_services() -> ServiceManager:
    """Service manager guarded by a re-entrant lock."""
    return ServiceManager(lock_mode=LockMode.THREAD)
