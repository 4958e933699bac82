"""Utility modules for logging and exception handling."""

from rconsole.utils.logging import setup_logging, get_logger
from rconsole.utils.exceptions import (
    RconError,
    ConfigurationError,
    DialError,
    AuthenticationError,
    ConnectionClosedError,
    RconIOError,
    PacketError,
    NilPacketError,
    InvalidPacketError,
    NonASCIIPayloadError,
    InvalidPacketBytesError,
    IncorrectLengthError,
    InvalidPacketTypeError,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'RconError',
    'ConfigurationError',
    'DialError',
    'AuthenticationError',
    'ConnectionClosedError',
    'RconIOError',
    'PacketError',
    'NilPacketError',
    'InvalidPacketError',
    'NonASCIIPayloadError',
    'InvalidPacketBytesError',
    'IncorrectLengthError',
    'InvalidPacketTypeError',
]
