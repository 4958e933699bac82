"""Convenience client opening one RCON connection per command."""

from typing import Optional

from rconsole.client.connection import Connection
from rconsole.config.settings import ClientConfig
from rconsole.protocol.packets import RequestIdGenerator
from rconsole.utils.logging import get_logger

logger = get_logger(__name__)


class RconClient:
    """
    Entry point for sending RCON commands to a server.

    Every send() dials, authenticates, runs one command and closes again,
    so concurrent sends never share a stream. Callers issuing many commands
    can use connect() and keep the returned Connection open instead.
    """

    def __init__(
        self,
        address: str,
        password: str,
        connect_timeout: Optional[float] = None,
    ):
        self._address = address
        self._password = password
        self._connect_timeout = connect_timeout
        self._ids = RequestIdGenerator()

    @classmethod
    def from_config(cls, config: ClientConfig) -> 'RconClient':
        """Create a client from validated client configuration."""
        return cls(config.address, config.password, config.connect_timeout)

    @property
    def address(self) -> str:
        return self._address

    async def connect(self) -> Connection:
        """Open and authenticate a connection the caller is responsible for closing."""
        return await Connection.dial(
            self._address,
            self._password,
            ids=self._ids,
            connect_timeout=self._connect_timeout,
        )

    async def send(self, command: str) -> str:
        """
        Run a single command on a fresh connection.

        Not every command produces output; an empty string is returned then.

        Raises:
            DialError: If the server cannot be reached
            AuthenticationError: If login fails
            RconIOError: If the connection fails mid-command
        """
        conn = await self.connect()
        try:
            return await conn.send_command(command)
        finally:
            await conn.close()
