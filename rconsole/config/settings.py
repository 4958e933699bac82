"""Configuration management for the RCON client."""

from dataclasses import dataclass
from typing import Optional
import logging
import math
import os
from pathlib import Path

from dotenv import load_dotenv

from rconsole.protocol.constants import DEFAULT_PORT, URL_SCHEME
from rconsole.utils.exceptions import ConfigurationError


# Load .env file from the working directory
# This is called at module import time to ensure env vars are available
env_path = Path.cwd() / '.env'
load_dotenv(dotenv_path=env_path, override=False)

DEFAULT_ADDRESS = f"{URL_SCHEME}://127.0.0.1:{DEFAULT_PORT}"


@dataclass
class ClientConfig:
    """Configuration for the RCON client."""

    address: str
    password: str
    connect_timeout: Optional[float] = None

    def validate(self) -> None:
        """Validate client configuration parameters."""
        if not self.address:
            raise ConfigurationError("RCON address is required")
        if not self.password:
            raise ConfigurationError("RCON password is required")
        if self.connect_timeout is not None and (
            not math.isfinite(self.connect_timeout) or self.connect_timeout <= 0
        ):
            raise ConfigurationError("RCON connect timeout must be a positive number of seconds")


@dataclass
class LoggingConfig:
    """Configuration for application logging."""

    level: str = "INFO"

    def validate(self) -> None:
        """Validate logging configuration parameters."""
        if not isinstance(getattr(logging, self.level.upper(), None), int):
            raise ConfigurationError(f"Invalid log level: {self.level}")


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.client: Optional[ClientConfig] = None
        self.logging: Optional[LoggingConfig] = None

    def load_client_config(
        self,
        address: Optional[str] = None,
        password: Optional[str] = None,
    ) -> ClientConfig:
        """
        Load client configuration from environment variables.

        Explicit address and password arguments, e.g. from command-line
        flags, take precedence over the environment.

        Environment variables:
            RCON_ADDRESS: Server address, rcon://host[:port] or host[:port]
                          (default: rcon://127.0.0.1:25575)
            RCON_PASSWORD: Server RCON password (required)
            RCON_CONNECT_TIMEOUT: Seconds to wait for the TCP connect (optional)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        password = password or os.getenv('RCON_PASSWORD')
        if not password:
            raise ConfigurationError(
                "RCON_PASSWORD environment variable is required. "
                "Example: RCON_PASSWORD=secret"
            )

        timeout_str = os.getenv('RCON_CONNECT_TIMEOUT')
        timeout = None
        if timeout_str:
            try:
                timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"RCON_CONNECT_TIMEOUT must be a number of seconds, got: {timeout_str}"
                )

        config = ClientConfig(
            address=address or os.getenv('RCON_ADDRESS', DEFAULT_ADDRESS),
            password=password,
            connect_timeout=timeout,
        )
        config.validate()
        self.client = config
        return config

    def load_logging_config(self, level: Optional[str] = None) -> LoggingConfig:
        """
        Load logging configuration from environment variables.

        Environment variables:
            LOG_LEVEL: Logging level (default: INFO)

        Returns:
            Validated LoggingConfig instance

        Raises:
            ConfigurationError: If the level is not a known logging level
        """
        config = LoggingConfig(level=level or os.getenv('LOG_LEVEL', 'INFO'))
        config.validate()
        self.logging = config
        return config
