"""Tests for thread safety of managers using LockMode.THREAD."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pluginwire import InstanceOfPluginManager, LockMode, ServiceLocator, ServiceManager


class Connection:
    pass


class ConnectionPluginManager(InstanceOfPluginManager):
    instance_of = Connection


class TestConcurrentResolution:
    def test_concurrent_shared_resolution_same_instance(
        self,
        threaded_services: ServiceManager,
    ) -> None:
        """Concurrent resolution of a shared name runs the factory once."""
        calls: list[int] = []

        def factory(service_locator: ServiceLocator, *names: str) -> Connection:
            calls.append(threading.get_ident())
            time.sleep(0.01)
            return Connection()

        threaded_services.set_factory("connection", factory)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: threaded_services.get("connection"), range(16)))

        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_concurrent_unshared_resolution_different_instances(
        self,
        threaded_services: ServiceManager,
    ) -> None:
        """Concurrent resolution of an unshared name creates distinct instances."""
        threaded_services.set_invokable_class("connection", Connection, shared=False)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: threaded_services.get("connection"), range(16)))

        assert len({id(result) for result in results}) == 16

    def test_factory_may_resolve_through_same_manager(
        self,
        threaded_services: ServiceManager,
    ) -> None:
        """The re-entrant lock lets factories resolve other services."""
        threaded_services.set_invokable_class("connection", Connection)
        threaded_services.set_factory(
            "pool",
            lambda locator, cname, rname: [locator.get("connection")],
        )

        pool = threaded_services.get("pool")

        assert pool == [threaded_services.get("connection")]

    def test_concurrent_plugin_resolution_with_options(self) -> None:
        """Options of concurrent plugin requests never leak between threads."""

        class Configured(Connection):
            def __init__(self, options: Any = None) -> None:
                self.options = options

        plugins = ConnectionPluginManager(lock_mode=LockMode.THREAD)
        plugins.set_invokable_class("configured", Configured, shared=False)

        def resolve(index: int) -> Any:
            return plugins.get("configured", {"index": index})

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(resolve, range(32)))

        assert [result.options["index"] for result in results] == list(range(32))
