"""RCON connection module: login, serialized commands and fragment reassembly."""

from typing import List, Optional, Tuple
import asyncio
from urllib.parse import urlsplit

from rconsole.protocol.constants import (
    AUTH_FAILURE_ID,
    DEFAULT_PORT,
    TERMINAL_RESPONSE,
    TERMINATION_PAYLOAD,
    URL_SCHEME,
)
from rconsole.protocol.encoding import encode_packet, decode_packet, is_complete_frame
from rconsole.protocol.kinds import PacketKind
from rconsole.protocol.packets import Packet, RequestIdGenerator, new_packet
from rconsole.utils.logging import get_logger
from rconsole.utils.exceptions import (
    AuthenticationError,
    ConnectionClosedError,
    DialError,
    PacketError,
    RconError,
    RconIOError,
)

logger = get_logger(__name__)


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split an RCON address into host and port.

    Accepts ``rcon://host[:port]`` or a bare ``host[:port]``. A missing
    port falls back to the default RCON port.

    Args:
        address: Address to parse

    Returns:
        Tuple of (host, port)

    Raises:
        DialError: If the scheme is not rcon or the address is malformed
    """
    if '://' not in address:
        address = f"{URL_SCHEME}://{address}"

    try:
        url = urlsplit(address)
        port = url.port
    except ValueError as e:
        raise DialError(f"Invalid address '{address}': {e}") from e

    if url.scheme != URL_SCHEME:
        raise DialError(f"Unsupported scheme '{url.scheme}'")
    if not url.hostname:
        raise DialError(f"Missing host in address '{address}'")

    return url.hostname, port if port is not None else DEFAULT_PORT


class Connection:
    """
    Authenticated RCON connection to a single server.

    One background task owns all reads from the stream and hands decoded
    packets to the command path through a queue. Commands are serialized
    by a lock held for the full round trip, since the server answers
    requests strictly in order and cannot tell interleaved responses apart.

    Any read or write failure closes the connection for good; there is no
    reconnection.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        ids: Optional[RequestIdGenerator] = None,
    ):
        """
        Wrap an open stream pair. Use dial() or from_streams() instead,
        which also start the reader and authenticate.

        Args:
            reader: Stream to read server packets from
            writer: Stream to write request packets to
            ids: Request id source, shared with other connections if given
        """
        self._reader = reader
        self._writer = writer
        self._ids = ids or RequestIdGenerator()
        self._lock = asyncio.Lock()
        # Decoded packets, with None marking the end of the stream
        self._packets: asyncio.Queue = asyncio.Queue()
        self._reader_task: Optional[asyncio.Task] = None
        self._reader_error: Optional[BaseException] = None
        self._closed = False
        self._peer = writer.get_extra_info('peername')

    @classmethod
    async def dial(
        cls,
        address: str,
        password: str,
        ids: Optional[RequestIdGenerator] = None,
        connect_timeout: Optional[float] = None,
    ) -> 'Connection':
        """
        Connect and authenticate to an RCON server.

        Args:
            address: rcon://host[:port] or host[:port]
            password: RCON password
            ids: Request id source
            connect_timeout: Seconds to wait for the TCP connect, None waits forever

        Returns:
            Authenticated Connection

        Raises:
            DialError: If the address is invalid or the server is unreachable
            AuthenticationError: If login fails
        """
        host, port = parse_address(address)
        logger.info(f"Connecting to {host}:{port}")

        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=connect_timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to connect to {host}:{port}: {e!r}")
            raise DialError(f"Failed to connect to {host}:{port}") from e

        return await cls.from_streams(reader, writer, password, ids)

    @classmethod
    async def from_streams(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        password: str,
        ids: Optional[RequestIdGenerator] = None,
    ) -> 'Connection':
        """
        Authenticate over an already open stream pair.

        The stream is closed if authentication does not succeed.

        Raises:
            AuthenticationError: If login fails for any reason
        """
        conn = cls(reader, writer, ids)
        conn._start()

        try:
            await conn._authenticate(password)
        except AuthenticationError:
            await conn.close()
            raise
        except RconError as e:
            await conn.close()
            raise AuthenticationError(f"Authentication failed: {e}") from e
        except BaseException:
            conn._shutdown_transport()
            conn._stop_reader()
            raise

        logger.info(f"Authenticated with {conn._peer}")
        return conn

    @property
    def is_closed(self) -> bool:
        """Whether the connection has been torn down."""
        return self._closed

    async def send_command(self, command: str) -> str:
        """
        Execute a console command and return the server's response.

        Commands on one connection run one at a time; a second caller waits
        until the first has received its whole response. Responses split
        across several packets are joined in arrival order.

        Args:
            command: Command text, ASCII only

        Returns:
            Response text, possibly empty

        Raises:
            ConnectionClosedError: If the connection is already closed
            NonASCIIPayloadError: If the command holds non-ASCII characters
            RconIOError: If the stream fails during the round trip
        """
        async with self._lock:
            if self._closed:
                raise ConnectionClosedError("Connection closed")

            request = new_packet(PacketKind.COMMAND, command, self._ids)
            data = encode_packet(request)
            logger.debug(f"Sending command id={request.id}: {command!r}")

            try:
                await self._send(request, data)
                responses = await self._read_packets()
            except (RconError, asyncio.CancelledError):
                await self._abort()
                raise

            logger.debug(
                f"Command id={request.id} answered with {len(responses)} packet(s)"
            )
            return ''.join(p.payload for p in responses)

    async def close(self) -> None:
        """
        Close the connection and stop the background reader.

        This method is idempotent and can be called multiple times safely.
        Commands waiting for a response fail with ConnectionClosedError.
        """
        if not self._closed:
            logger.info(f"Closing connection to {self._peer}")

        self._shutdown_transport()
        self._stop_reader()

        try:
            await self._writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error while closing connection to {self._peer}: {e!r}")

    async def __aenter__(self) -> 'Connection':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _start(self) -> None:
        """Start reading packets from the stream in the background."""
        self._reader_task = asyncio.create_task(self._read_loop())

    def _shutdown_transport(self) -> None:
        """Mark closed, close the stream and release waiting consumers."""
        if not self._closed:
            self._closed = True
            self._packets.put_nowait(None)
        if not self._writer.is_closing():
            self._writer.close()

    def _stop_reader(self) -> None:
        task = self._reader_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _abort(self) -> None:
        try:
            await self.close()
        except asyncio.CancelledError:
            self._shutdown_transport()
            raise

    async def _authenticate(self, password: str) -> None:
        """
        Log in with the given password.

        The server echoes the request id on success and answers with id -1
        on a wrong password.
        """
        request = new_packet(PacketKind.LOGIN, password, self._ids)
        await self._send(request, encode_packet(request))

        responses = await self._read_packets()

        if len(responses) == 1 and responses[0].id == AUTH_FAILURE_ID:
            logger.warning(f"Server {self._peer} rejected the password")
            raise AuthenticationError("Invalid password")
        if len(responses) != 1 or responses[0].id != request.id:
            logger.warning(
                f"Unexpected login response from {self._peer}: "
                f"{len(responses)} packet(s)"
            )
            raise AuthenticationError("Invalid password/response")

    async def _read_packets(self) -> List[Packet]:
        """
        Collect every response packet for the request just written.

        Nothing in a response says how many packets it spans. Once the first
        packet has arrived the server has started on the request, so a
        termination packet is sent behind it. The server rejects that
        packet kind with a fixed message, and since it answers in order,
        that message marks the end of the original response. It is not
        part of the returned packets.
        """
        packets: List[Packet] = []
        terminator_sent = False

        while True:
            packet = await self._packets.get()
            if packet is None:
                # Keep the end marker visible to later consumers
                self._packets.put_nowait(None)
                if self._reader_error is not None:
                    raise RconIOError(
                        f"Failed reading packets: {self._reader_error!r}"
                    ) from self._reader_error
                raise ConnectionClosedError("Connection closed while awaiting response")

            if not terminator_sent:
                terminator = new_packet(
                    PacketKind.TERMINATION, TERMINATION_PAYLOAD, self._ids
                )
                await self._send(terminator, encode_packet(terminator))
                terminator_sent = True

            if packet.payload == TERMINAL_RESPONSE:
                return packets

            packets.append(packet)

    async def _send(self, packet: Packet, data: bytes) -> None:
        """Write one encoded packet to the stream."""
        if self._closed:
            raise ConnectionClosedError("Connection closed")

        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            logger.error(f"Error writing to {self._peer}: {e!r}")
            raise RconIOError(f"Failed writing packet: {e!r}") from e

        logger.debug(
            f"Sent {packet.kind.name} packet id={packet.id}, {len(data)} bytes"
        )

    async def _read_packet(self) -> Packet:
        """
        Read the next packet from the stream.

        Bytes are read one at a time until at least 14 are buffered and
        the last two are null, the only frame boundary safe against
        partial reads.
        """
        data = bytearray()
        while not is_complete_frame(data):
            data += await self._reader.readexactly(1)
        return decode_packet(bytes(data))

    async def _read_loop(self) -> None:
        """Decode packets from the stream until it fails or is closed."""
        logger.debug(f"Starting reader for {self._peer}")

        try:
            while True:
                packet = await self._read_packet()
                logger.debug(
                    f"Received {packet.kind.name} packet id={packet.id}, "
                    f"payload_size={len(packet.payload)}"
                )
                self._packets.put_nowait(packet)

        except asyncio.CancelledError:
            logger.debug(f"Reader for {self._peer} cancelled")
            raise
        except (PacketError, OSError, asyncio.IncompleteReadError) as e:
            if not self._closed:
                if isinstance(e, asyncio.IncompleteReadError):
                    logger.warning(f"Server {self._peer} closed the connection")
                else:
                    logger.error(f"Reader for {self._peer} failed: {e!r}")
                self._reader_error = e
            self._shutdown_transport()
        finally:
            self._packets.put_nowait(None)
