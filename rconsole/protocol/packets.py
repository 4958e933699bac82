"""Packet structure definitions."""

from dataclasses import dataclass

from rconsole.protocol.constants import LENGTH_OVERHEAD, MAX_PACKET_ID
from rconsole.protocol.kinds import PacketKind


@dataclass
class Packet:
    """Single RCON packet as it appears on the wire."""

    length: int
    id: int
    kind: PacketKind
    payload: str


class RequestIdGenerator:
    """
    Source of request ids for outgoing packets.

    Ids start at 1 and increase by one per packet. Once the signed 32-bit
    range is exhausted they wrap back to 1, so the server's failure id (-1)
    is never issued. One generator may be shared by several connections;
    ids only need to be unique, not contiguous per connection.
    """

    def __init__(self, start: int = 1):
        if start < 1 or start > MAX_PACKET_ID:
            raise ValueError(f"Start id must be between 1 and {MAX_PACKET_ID}")
        self._next_id = start

    def next_id(self) -> int:
        """Return the next id and advance the counter."""
        current = self._next_id
        self._next_id = current + 1 if current < MAX_PACKET_ID else 1
        return current


def new_packet(kind: PacketKind, payload: str, ids: RequestIdGenerator) -> Packet:
    """
    Create a packet with its id and length filled in.

    Args:
        kind: Packet kind
        payload: ASCII payload text
        ids: Generator supplying the request id

    Returns:
        New Packet instance
    """
    return Packet(
        length=len(payload) + LENGTH_OVERHEAD,
        id=ids.next_id(),
        kind=kind,
        payload=payload,
    )
