"""
Provider - wires configuration, transport and plugins together.

The provider builds the one Transport shared by every plugin and hands it
over through each plugin's configure() hook.
"""

import logging
from typing import Optional

from config import ClientConfig, get_config
from plugins.datasources.base import DataSourcePlugin
from plugins.registry import PluginRegistry, get_registry, register_builtin_plugins
from plugins.resources.base import ResourcePlugin
from transport import Transport

logger = logging.getLogger(__name__)


class Provider:
    """Configures resource and data source plugins with a shared Transport."""

    def __init__(self, registry: Optional[PluginRegistry] = None):
        self.registry = registry or get_registry()
        self.transport: Optional[Transport] = None

    def configure(self, client_config: Optional[ClientConfig] = None) -> Transport:
        """
        Build the shared transport and configure every registered plugin.

        Args:
            client_config: API client settings; defaults to the global config

        Returns:
            The configured Transport

        Raises:
            ValueError: If no API token is configured
        """
        client_config = client_config or get_config().client
        if not client_config.token:
            raise ValueError(
                "Missing ChatBotKit API token. Set the token in the configuration "
                "or use the CHATBOTKIT_TOKEN environment variable."
            )

        if not self.registry.list_resource_plugins():
            register_builtin_plugins(self.registry)

        self.transport = Transport(
            token=client_config.token,
            base_url=client_config.base_url,
            timeout=client_config.timeout,
        )

        for name in self.registry.list_resource_plugins():
            self.registry.get_resource_plugin(name).configure(self.transport)
        for name in self.registry.list_datasource_plugins():
            self.registry.get_datasource_plugin(name).configure(self.transport)

        logger.info(f"Provider configured for {self.transport.base_url}")
        return self.transport

    def resource(self, kind: str) -> ResourcePlugin:
        """Get the configured resource plugin for a kind."""
        return self.registry.get_resource_plugin(kind)

    def datasource(self, kind: str) -> DataSourcePlugin:
        """Get the configured data source plugin for a kind."""
        return self.registry.get_datasource_plugin(kind)
