"""
Core plugin types shared by resource and data source plugins.

Every plugin serves exactly one entity kind and receives the shared
Transport from the host through configure().
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from client import EntityClient
from entities import EntityKind
from errors import NotConfiguredError
from transport import Transport

logger = logging.getLogger(__name__)


class KindPlugin(ABC):
    """
    Abstract base class for plugins bound to one entity kind.

    Subclasses only name their kind descriptor, usually as a class
    attribute (``kind = BOT``).
    """

    def __init__(self):
        self._client: Optional[EntityClient] = None

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Descriptor of the entity kind this plugin serves."""
        pass

    @property
    def name(self) -> str:
        """Unique identifier for this plugin (the kind name, e.g. 'bot')."""
        return self.kind.name

    @property
    def configured(self) -> bool:
        return self._client is not None

    def configure(self, transport: Optional[Any]) -> None:
        """
        Receive the shared transport from the host.

        A None transport means the host has not been configured yet and is
        ignored.

        Args:
            transport: The Transport instance shared by all plugins

        Raises:
            TypeError: If something other than a Transport is passed
        """
        if transport is None:
            return
        if not isinstance(transport, Transport):
            raise TypeError(
                f"Expected Transport, got: {type(transport).__name__}. "
                f"Cannot configure {self.name} plugin."
            )
        self._client = EntityClient(transport, self.kind)
        logger.debug(f"Configured {type(self).__name__}")

    @property
    def client(self) -> EntityClient:
        """
        The entity client for this plugin's kind.

        Raises:
            NotConfiguredError: If configure() has not been called with a
                transport
        """
        if self._client is None:
            raise NotConfiguredError(
                f"{type(self).__name__} used before configure(); "
                f"the host must provide a Transport first"
            )
        return self._client

    def _identifier(self, record: Dict[str, Any]) -> str:
        identifier = record.get("id")
        if not identifier:
            raise ValueError(f"{self.name} record has no identifier")
        return identifier
