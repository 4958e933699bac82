#!/usr/bin/env python3
"""
Main entry point for the RCON console client.

Runs a single command given on the command line, or opens an interactive
console that keeps one authenticated connection for every line typed.
Configuration is loaded from environment variables and an optional .env file;
command-line flags override it.
"""

from typing import Awaitable, List, Optional, TypeVar
import argparse
import asyncio
import os
import signal
import stat
import sys

from rconsole.client.connection import Connection
from rconsole.client.rcon_client import RconClient
from rconsole.config.settings import Config
from rconsole.utils.logging import setup_logging, get_logger
from rconsole.utils.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DialError,
    PacketError,
    RconError,
)

logger = get_logger(__name__)

EXIT_COMMANDS = ('exit', 'quit')
PROMPT = '> '

T = TypeVar('T')


class ShutdownRequested(Exception):
    """A shutdown signal arrived before the awaited operation finished."""


class ClientApplication:
    """Main application class for the RCON console."""

    def __init__(self, args: argparse.Namespace):
        """
        Initialize application.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self.config = Config()
        self.shutdown_event = asyncio.Event()

    async def run(self) -> int:
        """
        Run the client application.

        Returns:
            Process exit code
        """
        try:
            client_config = self.config.load_client_config(
                address=self.args.address,
                password=self.args.password,
            )
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for required configuration."
            )
            return 1

        logger.info(f"Configuration loaded: address={client_config.address}")
        client = RconClient.from_config(client_config)

        try:
            if self.args.command:
                return await self.run_once(client, ' '.join(self.args.command))
            return await self.run_console(client)
        except ShutdownRequested:
            logger.warning("Interrupted before the command completed")
            return 1
        except (DialError, AuthenticationError) as e:
            logger.error(f"Could not open RCON session: {e}")
            return 1
        except RconError as e:
            logger.error(f"RCON session failed: {e}")
            return 1

    async def run_once(self, client: RconClient, command: str) -> int:
        """Send one command on its own connection and print the response."""
        conn = await self.until_shutdown(client.connect())
        try:
            response = await self.until_shutdown(conn.send_command(command))
        finally:
            await conn.close()

        if response:
            print(response)
        return 0

    async def run_console(self, client: RconClient) -> int:
        """
        Read commands from stdin and run them on one shared connection.

        Stops on end of input, an exit command, or a shutdown signal.
        """
        conn = await self.until_shutdown(client.connect())
        logger.info(f"Connected to {client.address}, type 'exit' to quit")

        stdin = None
        try:
            stdin = await open_stdin()
            while not conn.is_closed:
                line = await self.next_line(stdin)
                if line is None:
                    break

                command = line.strip()
                if not command:
                    continue
                if command.lower() in EXIT_COMMANDS:
                    break

                await self.execute(conn, command)
        finally:
            if stdin is not None:
                stdin.close()
            await conn.close()

        logger.info("Session ended")
        return 0

    async def until_shutdown(self, awaitable: Awaitable[T]) -> T:
        """
        Await a result unless a shutdown signal arrives first.

        The pending operation is cancelled when shutdown wins, which for a
        command also closes its connection.

        Raises:
            ShutdownRequested: If the shutdown event was set first
        """
        work = asyncio.ensure_future(awaitable)
        stop = asyncio.create_task(self.shutdown_event.wait())
        try:
            await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (work, stop):
                if not task.done():
                    task.cancel()
            await asyncio.gather(work, stop, return_exceptions=True)

        if not work.cancelled():
            return work.result()
        raise ShutdownRequested()

    async def next_line(self, stdin: 'StdinReader') -> Optional[str]:
        """
        Wait for the next input line or a shutdown signal.

        Returns:
            The decoded line, or None on end of input or shutdown
        """
        if stdin.interactive:
            print(PROMPT, end='', flush=True)

        try:
            line = await self.until_shutdown(stdin.readline())
        except ShutdownRequested:
            return None
        return line or None

    async def execute(self, conn: Connection, command: str) -> None:
        """Run one console command and print its output."""
        try:
            response = await self.until_shutdown(conn.send_command(command))
        except PacketError as e:
            # Rejected before anything was written; the connection is intact
            logger.warning(f"Command not sent: {e}")
            return

        if response:
            print(response)

    def handle_shutdown(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        logger.info(f"Received signal {signum}")
        self.shutdown_event.set()


class StdinReader:
    """
    Line reader over stdin.

    Pipes, sockets and terminals are read through the event loop. Regular
    files cannot be registered with it and are read in the default executor.
    """

    def __init__(self, stream: Optional[asyncio.StreamReader] = None,
                 transport: Optional[asyncio.BaseTransport] = None):
        self._stream = stream
        self._transport = transport
        self.interactive = sys.stdin.isatty()

    async def readline(self) -> str:
        if self._stream is not None:
            raw = await self._stream.readline()
            return raw.decode('ascii', errors='replace')

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, sys.stdin.readline)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()


def stdin_is_pollable() -> bool:
    """Whether stdin is a FIFO, socket or character device."""
    try:
        mode = os.fstat(sys.stdin.fileno()).st_mode
    except (OSError, ValueError):
        return False
    return stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode) or stat.S_ISCHR(mode)


async def open_stdin() -> StdinReader:
    """Wrap stdin so lines can be awaited."""
    if not stdin_is_pollable():
        return StdinReader()

    loop = asyncio.get_running_loop()
    stream = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(stream)
    transport, _ = await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return StdinReader(stream, transport)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='rconsole',
        description='Send commands to a server over RCON.',
    )
    parser.add_argument(
        '--address',
        help='rcon://host[:port] or host[:port] (env: RCON_ADDRESS)',
    )
    parser.add_argument(
        '--password',
        help='RCON password (env: RCON_PASSWORD)',
    )
    parser.add_argument(
        '--log-level',
        help='DEBUG, INFO, WARNING, ERROR or CRITICAL (env: LOG_LEVEL)',
    )
    parser.add_argument(
        'command',
        nargs='*',
        help='Command to run once; omit for an interactive console',
    )
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        logging_config = Config().load_logging_config(args.log_level)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Setup logging
    setup_logging(logging_config.level)

    # Create application
    app = ClientApplication(args)

    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: app.handle_shutdown(s, None)
        )

    return await app.run()


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(1)


if __name__ == '__main__':
    cli()
