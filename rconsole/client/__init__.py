"""Client module with the RCON connection and the per-command client."""

from rconsole.client.connection import Connection, parse_address
from rconsole.client.rcon_client import RconClient

__all__ = [
    'Connection',
    'parse_address',
    'RconClient',
]
