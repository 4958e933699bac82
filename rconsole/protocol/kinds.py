"""Packet kind definitions."""

from enum import IntEnum


class PacketKind(IntEnum):
    """Enumeration of the packet types exchanged with the server."""

    RESPONSE = 0                # Server reply to a command or login
    COMMAND = 2                 # Console command to execute
    LOGIN = 3                   # Authentication request carrying the password
    TERMINATION = 5             # Probe the server does not understand
