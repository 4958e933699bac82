"""Configuration module for managing client settings."""

from rconsole.config.settings import (
    ClientConfig,
    LoggingConfig,
    Config,
)

__all__ = [
    'ClientConfig',
    'LoggingConfig',
    'Config',
]
