"""Protocol module for packet encoding, decoding, and kind definitions."""

from rconsole.protocol.constants import (
    DEFAULT_PORT,
    HEADER_FORMAT,
    HEADER_SIZE,
    MIN_PACKET_SIZE,
    TERMINAL_RESPONSE,
    TERMINATION_PAYLOAD,
)
from rconsole.protocol.kinds import PacketKind
from rconsole.protocol.encoding import encode_packet, decode_packet, is_complete_frame
from rconsole.protocol.packets import Packet, RequestIdGenerator, new_packet

__all__ = [
    'DEFAULT_PORT',
    'HEADER_FORMAT',
    'HEADER_SIZE',
    'MIN_PACKET_SIZE',
    'TERMINAL_RESPONSE',
    'TERMINATION_PAYLOAD',
    'PacketKind',
    'encode_packet',
    'decode_packet',
    'is_complete_frame',
    'Packet',
    'RequestIdGenerator',
    'new_packet',
]
