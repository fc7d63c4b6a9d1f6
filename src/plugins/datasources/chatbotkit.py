"""
Built-in ChatBotKit data source plugins, one per entity kind.
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
from plugins.datasources.base import DataSourcePlugin


class BlueprintDataSource(DataSourcePlugin):
    kind = BLUEPRINT


class BotDataSource(DataSourcePlugin):
    kind = BOT


class DatasetDataSource(DataSourcePlugin):
    kind = DATASET


class FileDataSource(DataSourcePlugin):
    kind = FILE


class IntegrationDataSource(DataSourcePlugin):
    kind = INTEGRATION


class PortalDataSource(DataSourcePlugin):
    kind = PORTAL


class SecretDataSource(DataSourcePlugin):
    """Secret lookups never return the secret value."""

    kind = SECRET


class SkillsetDataSource(DataSourcePlugin):
    kind = SKILLSET


BUILTIN_DATASOURCES = [
    BlueprintDataSource,
    BotDataSource,
    DatasetDataSource,
    FileDataSource,
    IntegrationDataSource,
    PortalDataSource,
    SecretDataSource,
    SkillsetDataSource,
]
