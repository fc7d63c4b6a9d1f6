"""
Data source plugins package.

Data sources are read-only lookups over one remote entity kind.
"""

from plugins.datasources.base import DataSourcePlugin
from plugins.datasources.chatbotkit import (
    BUILTIN_DATASOURCES,
    BlueprintDataSource,
    BotDataSource,
    DatasetDataSource,
    FileDataSource,
    IntegrationDataSource,
    PortalDataSource,
    SecretDataSource,
    SkillsetDataSource,
)

__all__ = [
    "DataSourcePlugin",
    "BUILTIN_DATASOURCES",
    "BlueprintDataSource",
    "BotDataSource",
    "DatasetDataSource",
    "FileDataSource",
    "IntegrationDataSource",
    "PortalDataSource",
    "SecretDataSource",
    "SkillsetDataSource",
]
