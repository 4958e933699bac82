"""Custom exception classes for the RCON client."""


class RconError(Exception):
    """Base exception class for all RCON-related errors."""
    pass


class ConfigurationError(RconError):
    """Exception raised when configuration is invalid or missing."""
    pass


class DialError(RconError):
    """Exception raised when the transport connection cannot be established."""
    pass


class AuthenticationError(RconError):
    """Exception raised when the server rejects the login or answers it malformed."""
    pass


class ConnectionClosedError(RconError):
    """Exception raised when using a connection that has been torn down."""
    pass


class RconIOError(RconError):
    """Exception raised when reading from or writing to the stream fails mid-session."""
    pass


class PacketError(RconError):
    """Base exception class for packet encoding and decoding errors."""
    pass


class NilPacketError(PacketError):
    """Exception raised when no packet is given to the encoder."""
    pass


class InvalidPacketError(PacketError):
    """Exception raised when a packet's fields are inconsistent."""
    pass


class NonASCIIPayloadError(InvalidPacketError):
    """Exception raised when a payload holds characters outside the ASCII range."""
    pass


class InvalidPacketBytesError(PacketError):
    """Exception raised when raw bytes are not a complete packet frame."""
    pass


class IncorrectLengthError(PacketError):
    """Exception raised when the length field disagrees with the frame size."""
    pass


class InvalidPacketTypeError(PacketError):
    """Exception raised when the packet kind is not a known packet type."""
    pass
