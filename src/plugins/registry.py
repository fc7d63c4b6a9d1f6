"""
Plugin Registry - Discovery and registration of plugins.

This module provides the central registry for resource and data source
plugins, handling discovery, registration, and instantiation.
"""

import logging
from importlib.metadata import entry_points
from typing import Dict, List, Optional, Type

from plugins.datasources.base import DataSourcePlugin
from plugins.resources.base import ResourcePlugin

logger = logging.getLogger(__name__)

RESOURCE_ENTRY_POINT_GROUP = "chatbotkit.resources"


class PluginRegistry:
    """
    Central registry for all plugins.

    Handles registration and lazy instantiation of resource and data
    source plugins, keyed by kind name.
    """

    def __init__(self):
        # Registered plugin classes (not instantiated)
        self._resource_plugins: Dict[str, Type[ResourcePlugin]] = {}
        self._datasource_plugins: Dict[str, Type[DataSourcePlugin]] = {}

        # Instantiated plugin instances
        self._resource_instances: Dict[str, ResourcePlugin] = {}
        self._datasource_instances: Dict[str, DataSourcePlugin] = {}

    # Registration methods

    def register_resource_plugin(self, plugin_class: Type[ResourcePlugin]) -> None:
        """
        Register a resource plugin class.

        Args:
            plugin_class: The ResourcePlugin subclass to register
        """
        # Create temporary instance to get the kind name
        name = plugin_class().name

        if name in self._resource_plugins:
            logger.warning(f"Overwriting existing resource plugin: {name}")

        self._resource_plugins[name] = plugin_class
        self._resource_instances.pop(name, None)
        logger.debug(f"Registered resource plugin: {name}")

    def register_datasource_plugin(
        self, plugin_class: Type[DataSourcePlugin]
    ) -> None:
        """
        Register a data source plugin class.

        Args:
            plugin_class: The DataSourcePlugin subclass to register
        """
        name = plugin_class().name

        if name in self._datasource_plugins:
            logger.warning(f"Overwriting existing data source plugin: {name}")

        self._datasource_plugins[name] = plugin_class
        self._datasource_instances.pop(name, None)
        logger.debug(f"Registered data source plugin: {name}")

    # Instantiation methods

    def get_resource_plugin(self, name: str) -> ResourcePlugin:
        """
        Get a resource plugin instance.

        Args:
            name: The kind name (e.g. 'bot')

        Returns:
            A ResourcePlugin instance

        Raises:
            ValueError: If no resource plugin is registered for the name
        """
        if name not in self._resource_plugins:
            available = ", ".join(self._resource_plugins.keys()) or "none"
            raise ValueError(
                f"Unknown resource plugin: {name}. Available plugins: {available}"
            )

        if name not in self._resource_instances:
            self._resource_instances[name] = self._resource_plugins[name]()
            logger.debug(f"Instantiated resource plugin: {name}")

        return self._resource_instances[name]

    def get_datasource_plugin(self, name: str) -> DataSourcePlugin:
        """
        Get a data source plugin instance.

        Args:
            name: The kind name (e.g. 'bot')

        Returns:
            A DataSourcePlugin instance

        Raises:
            ValueError: If no data source plugin is registered for the name
        """
        if name not in self._datasource_plugins:
            available = ", ".join(self._datasource_plugins.keys()) or "none"
            raise ValueError(
                f"Unknown data source plugin: {name}. "
                f"Available plugins: {available}"
            )

        if name not in self._datasource_instances:
            self._datasource_instances[name] = self._datasource_plugins[name]()
            logger.debug(f"Instantiated data source plugin: {name}")

        return self._datasource_instances[name]

    # Discovery methods

    def list_resource_plugins(self) -> List[str]:
        """List all registered resource plugin names."""
        return list(self._resource_plugins.keys())

    def list_datasource_plugins(self) -> List[str]:
        """List all registered data source plugin names."""
        return list(self._datasource_plugins.keys())

    def has_resource_plugin(self, name: str) -> bool:
        """Check if a resource plugin is registered."""
        return name in self._resource_plugins

    def has_datasource_plugin(self, name: str) -> bool:
        """Check if a data source plugin is registered."""
        return name in self._datasource_plugins


# Global registry instance
_registry: Optional[PluginRegistry] = None


def get_registry() -> PluginRegistry:
    """Get the global plugin registry singleton."""
    global _registry
    if _registry is None:
        _registry = PluginRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _registry
    _registry = None


def register_builtin_plugins(registry: Optional[PluginRegistry] = None) -> None:
    """
    Register all built-in plugins and discover resource plugins via entry
    points.

    Args:
        registry: Registry to populate; defaults to the global registry
    """
    from plugins.datasources import BUILTIN_DATASOURCES
    from plugins.resources import BUILTIN_RESOURCES

    registry = registry or get_registry()

    for resource_class in BUILTIN_RESOURCES:
        registry.register_resource_plugin(resource_class)
    for datasource_class in BUILTIN_DATASOURCES:
        registry.register_datasource_plugin(datasource_class)

    # Discover and register third-party resource plugins via entry points
    discovered = entry_points(group=RESOURCE_ENTRY_POINT_GROUP)
    for ep in discovered:
        try:
            resource_class = ep.load()
            registry.register_resource_plugin(resource_class)
        except Exception as e:
            logger.warning(f"Could not load resource plugin {ep.name}: {e}")
