"""Asynchronous client for the RCON remote console protocol."""

from rconsole.client import Connection, RconClient, parse_address
from rconsole.protocol import (
    Packet,
    PacketKind,
    RequestIdGenerator,
    decode_packet,
    encode_packet,
    new_packet,
)
from rconsole.utils.exceptions import (
    AuthenticationError,
    ConnectionClosedError,
    DialError,
    PacketError,
    RconError,
    RconIOError,
)

__version__ = '1.0.0'

__all__ = [
    'Connection',
    'RconClient',
    'parse_address',
    'Packet',
    'PacketKind',
    'RequestIdGenerator',
    'decode_packet',
    'encode_packet',
    'new_packet',
    'AuthenticationError',
    'ConnectionClosedError',
    'DialError',
    'PacketError',
    'RconError',
    'RconIOError',
]
