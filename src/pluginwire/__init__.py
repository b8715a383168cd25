from pluginwire.config import ServiceManagerConfig, ServiceManagerSettings
from pluginwire.contracts import (
    ConfigurableFactory,
    CreationOptions,
    FactoryInterface,
    Initializer,
    ServiceLocator,
    ServiceLocatorAware,
)
from pluginwire.exceptions import (
    CircularDependencyFoundError,
    InvalidArgumentError,
    InvalidPluginError,
    InvalidServiceNameError,
    PluginWireError,
    ServiceLocatorUsageError,
    ServiceNotCreatedError,
    ServiceNotFoundError,
)
from pluginwire.factories import InvokableFactory
from pluginwire.lock_mode import LockMode
from pluginwire.plugin_manager import AbstractPluginManager, InstanceOfPluginManager
from pluginwire.service_manager import ServiceManager

__all__ = [
    "AbstractPluginManager",
    "CircularDependencyFoundError",
    "ConfigurableFactory",
    "CreationOptions",
    "FactoryInterface",
    "Initializer",
    "InstanceOfPluginManager",
    "InvalidArgumentError",
    "InvalidPluginError",
    "InvalidServiceNameError",
    "InvokableFactory",
    "LockMode",
    "PluginWireError",
    "ServiceLocator",
    "ServiceLocatorAware",
    "ServiceLocatorUsageError",
    "ServiceManager",
    "ServiceManagerConfig",
    "ServiceManagerSettings",
    "ServiceNotCreatedError",
    "ServiceNotFoundError",
]
