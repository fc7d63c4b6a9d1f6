"""
Built-in ChatBotKit resource plugins, one per entity kind.
"""

from entities import (
    BLUEPRINT,
    BOT,
    DATASET,
    FILE,
    INTEGRATION,
    PORTAL,
    SECRET,
    SKILLSET,
)
from plugins.resources.base import ResourcePlugin


class BlueprintResource(ResourcePlugin):
    """Manages a ChatBotKit blueprint."""

    kind = BLUEPRINT


class BotResource(ResourcePlugin):
    """Manages a ChatBotKit bot."""

    kind = BOT


class DatasetResource(ResourcePlugin):
    """Manages a ChatBotKit dataset."""

    kind = DATASET


class FileResource(ResourcePlugin):
    """Manages a ChatBotKit file."""

    kind = FILE


class IntegrationResource(ResourcePlugin):
    """Manages a ChatBotKit integration."""

    kind = INTEGRATION


class PortalResource(ResourcePlugin):
    """Manages a ChatBotKit portal."""

    kind = PORTAL


class SecretResource(ResourcePlugin):
    """Manages a ChatBotKit secret. The value is write-only."""

    kind = SECRET


class SkillsetResource(ResourcePlugin):
    """Manages a ChatBotKit skillset."""

    kind = SKILLSET


BUILTIN_RESOURCES = [
    BlueprintResource,
    BotResource,
    DatasetResource,
    FileResource,
    IntegrationResource,
    PortalResource,
    SecretResource,
    SkillsetResource,
]
