"""
Configuration module for the ChatBotKit reconciler.

Loads configuration from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


@dataclass
class ClientConfig:
    """ChatBotKit API client configuration."""

    token: str = field(default="", repr=False)  # Never log the token
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT  # seconds, whole request/response cycle

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        token = os.getenv("CHATBOTKIT_TOKEN", "")
        if not token:
            raise ValueError(
                "CHATBOTKIT_TOKEN environment variable must be set. "
                "The API token cannot be empty."
            )

        return cls(
            token=token,
            base_url=os.getenv("CHATBOTKIT_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.getenv("CHATBOTKIT_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )


@dataclass
class ControllerConfig:
    """Plan/apply controller configuration."""

    max_concurrent_reconciles: int = 5

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            max_concurrent_reconciles=int(os.getenv("MAX_CONCURRENT_RECONCILES", "5")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(log_level=os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass
class Config:
    """Main configuration object."""

    client: ClientConfig
    controller: ControllerConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            client=ClientConfig.from_env(),
            controller=ControllerConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            client=ClientConfig(),
            controller=ControllerConfig(),
            logging=LoggingConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
