"""
Resource plugins package.

Resource plugins reconcile declared configuration against one remote entity
kind. Third-party plugins are discovered via Python entry points
(group: 'chatbotkit.resources').
"""

from plugins.resources.base import ResourcePlugin
from plugins.resources.chatbotkit import (
    BUILTIN_RESOURCES,
    BlueprintResource,
    BotResource,
    DatasetResource,
    FileResource,
    IntegrationResource,
    PortalResource,
    SecretResource,
    SkillsetResource,
)

__all__ = [
    "ResourcePlugin",
    "BUILTIN_RESOURCES",
    "BlueprintResource",
    "BotResource",
    "DatasetResource",
    "FileResource",
    "IntegrationResource",
    "PortalResource",
    "SecretResource",
    "SkillsetResource",
]
