"""
Plugin system for the ChatBotKit reconciler.

This package provides the resource (reconciler) and data source (lookup)
plugin families and the registry that discovers them.
"""

from plugins.base import KindPlugin
from plugins.datasources.base import DataSourcePlugin
from plugins.registry import PluginRegistry, get_registry
from plugins.resources.base import ResourcePlugin

__all__ = [
    "KindPlugin",
    "DataSourcePlugin",
    "ResourcePlugin",
    "PluginRegistry",
    "get_registry",
]
