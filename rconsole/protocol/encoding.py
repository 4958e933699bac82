"""Packet encoding and decoding functions."""

from typing import Optional
import struct

from rconsole.protocol.constants import (
    HEADER_FORMAT,
    HEADER_SIZE,
    LENGTH_FIELD_SIZE,
    LENGTH_OVERHEAD,
    MAX_PACKET_ID,
    MIN_PACKET_ID,
    MIN_PACKET_SIZE,
    PACKET_PADDING,
)
from rconsole.protocol.kinds import PacketKind
from rconsole.protocol.packets import Packet
from rconsole.utils.exceptions import (
    IncorrectLengthError,
    InvalidPacketBytesError,
    InvalidPacketError,
    InvalidPacketTypeError,
    NilPacketError,
    NonASCIIPayloadError,
)


def is_complete_frame(data: bytes) -> bool:
    """
    Tell whether buffered bytes form a whole packet frame.

    A frame is at least 14 bytes long and ends with two null bytes.
    """
    return len(data) >= MIN_PACKET_SIZE and data.endswith(PACKET_PADDING)


def _to_kind(value: int) -> PacketKind:
    try:
        return PacketKind(value)
    except ValueError:
        raise InvalidPacketTypeError(f"Invalid packet type: {value}") from None


def encode_packet(packet: Optional[Packet]) -> bytes:
    """
    Serialize a packet to its wire representation.

    Args:
        packet: Packet to encode

    Returns:
        Encoded packet bytes, including the length field

    Raises:
        NilPacketError: If no packet is given
        InvalidPacketError: If the length field does not match the payload
            or the id does not fit 32 bits
        NonASCIIPayloadError: If the payload holds non-ASCII characters
        InvalidPacketTypeError: If the kind is not a known packet type
    """
    if packet is None:
        raise NilPacketError("Nil packet provided")

    if packet.length != len(packet.payload) + LENGTH_OVERHEAD:
        raise InvalidPacketError(
            f"Invalid packet provided: length {packet.length} does not match "
            f"payload size {len(packet.payload)} + {LENGTH_OVERHEAD}"
        )

    if not packet.payload.isascii():
        raise NonASCIIPayloadError("Payload contains non-ASCII characters")

    if not MIN_PACKET_ID <= packet.id <= MAX_PACKET_ID:
        raise InvalidPacketError(f"Packet id {packet.id} does not fit 32 bits")

    kind = _to_kind(packet.kind)

    header = struct.pack(HEADER_FORMAT, packet.length, packet.id, kind)
    return header + packet.payload.encode('ascii') + PACKET_PADDING


def decode_packet(data: bytes) -> Packet:
    """
    Parse a packet from its wire representation.

    Args:
        data: Raw bytes of exactly one packet, including the length field

    Returns:
        Decoded Packet instance

    Raises:
        InvalidPacketBytesError: If data is too short or not null-terminated
        IncorrectLengthError: If the length field does not match the data size
        InvalidPacketTypeError: If the kind is not a known packet type
        NonASCIIPayloadError: If the payload holds non-ASCII bytes
    """
    if not is_complete_frame(data):
        raise InvalidPacketBytesError("Invalid packet bytes")

    length, packet_id, kind_value = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
    if len(data) != length + LENGTH_FIELD_SIZE:
        raise IncorrectLengthError(
            f"Incorrect packet length: header says {length}, "
            f"frame carries {len(data) - LENGTH_FIELD_SIZE}"
        )

    kind = _to_kind(kind_value)

    body = data[HEADER_SIZE:-len(PACKET_PADDING)]
    if not body.isascii():
        raise NonASCIIPayloadError("Payload contains non-ASCII characters")

    return Packet(
        length=length,
        id=packet_id,
        kind=kind,
        payload=body.decode('ascii'),
    )
