"""Synchronous TCP connection to the key-value server.

One socket per instance, one outstanding request at a time. The lifecycle is
forward-only: UNCONNECTED -> CONNECTED -> CLOSED. A closed instance is never
reused; create a new one to retry.
"""

import logging
import socket
import time
from enum import Enum

from kv_cli.client.errors import KvConnectionError, NotConnectedError, ProtocolError, TransportError
from kv_cli.client.protocol import Command, Response, decode_response, encode_command, is_handshake

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 65536


class ConnectionState(Enum):
    """Lifecycle state of a Connection."""

    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


class Connection:
    """Owns one transport stream to one server address."""

    def __init__(self, host: str, port: int, timeout: float) -> None:
        """Initialize an unconnected connection.

        Args:
            host: Server host name or address.
            port: Server TCP port.
            timeout: Per-operation deadline in seconds; 0 disables the deadline.

        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: socket.socket | None = None
        self._buffer = b""  # bytes received past the last line terminator
        self._deadline: float | None = None
        self._state = ConnectionState.UNCONNECTED

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._state

    @property
    def address(self) -> str:
        """Server address as host:port."""
        return f"{self.host}:{self.port}"

    def connect(self) -> None:
        """Open the stream and wait for the server greeting.

        Raises:
            KvConnectionError: Dial failure, handshake timeout, I/O error or unexpected greeting.

        """
        if self._state is not ConnectionState.UNCONNECTED:
            msg = f"connection to {self.address} is {self._state.value}, create a new one"
            raise KvConnectionError(msg)

        self._reset_deadline()
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self._remaining())
        except OSError as e:
            self._state = ConnectionState.CLOSED
            msg = f"failed to connect to {self.address}: {e}"
            raise KvConnectionError(msg) from e

        try:
            welcome = self._read_line()
        except (TransportError, OSError) as e:
            self.close()
            msg = f"failed to read welcome message from {self.address}: {e}"
            raise KvConnectionError(msg) from e

        if not is_handshake(welcome):
            self.close()
            msg = f"unexpected welcome message: {welcome.decode(errors='replace').strip()}"
            raise KvConnectionError(msg)

        self._state = ConnectionState.CONNECTED
        logger.info("Connected to %s", self.address)

    def close(self) -> None:
        """Close the stream. Safe to call repeatedly and from any state."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                logger.debug("Error closing socket to %s", self.address, exc_info=True)
            self._sock = None
            logger.debug("Closed connection to %s", self.address)
        self._buffer = b""
        self._state = ConnectionState.CLOSED

    def send(self, command: Command, *args: str) -> Response:
        """Send one command and return the decoded response.

        Raises:
            NotConnectedError: Connection is not in the connected state.
            InvalidArgumentError: Arguments cannot be framed on the wire.
            TransportError: Write, read or deadline failure. The connection is closed.
            ProtocolError: Response line does not follow the grammar.

        """
        if self._state is not ConnectionState.CONNECTED or self._sock is None:
            msg = "not connected to server"
            raise NotConnectedError(msg)

        data = encode_command(command, *args)
        self._reset_deadline()
        logger.debug("Sending %s to %s", command, self.address)

        try:
            self._sock.settimeout(self._remaining())
            self._sock.sendall(data)
        except OSError as e:
            self._fail()
            msg = f"failed to send command: {e}"
            raise TransportError(msg) from e

        line = self._read_line()
        try:
            return decode_response(line, command)
        except ProtocolError:
            logger.warning("Malformed response from %s: %r", self.address, line)
            raise

    def _reset_deadline(self) -> None:
        """Start a fresh deadline window for the next operation."""
        self._deadline = time.monotonic() + self.timeout if self.timeout > 0 else None

    def _remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is no deadline.

        Raises:
            TimeoutError: Deadline already passed.

        """
        if self._deadline is None:
            return None
        remaining = self._deadline - time.monotonic()
        if remaining <= 0:
            msg = "deadline exceeded"
            raise TimeoutError(msg)
        return remaining

    def _read_line(self) -> bytes:
        """Read until LF (framing delimiter), keeping any surplus for the next call.

        Raises:
            TransportError: Read error, deadline expiry or stream closed mid-line.

        """
        if self._sock is None:
            msg = "not connected to server"
            raise NotConnectedError(msg)
        try:
            while b"\n" not in self._buffer:
                self._sock.settimeout(self._remaining())
                chunk = self._sock.recv(_BUFSIZE)
                if not chunk:
                    msg = "connection closed by server"
                    raise TransportError(msg)
                self._buffer += chunk
        except TransportError:
            self._fail()
            raise
        except OSError as e:
            self._fail()
            msg = f"failed to read response: {e}"
            raise TransportError(msg) from e

        line, _, self._buffer = self._buffer.partition(b"\n")
        return line + b"\n"

    def _fail(self) -> None:
        """Discard the stream after a transport failure."""
        logger.warning("Transport failure on %s, discarding connection", self.address)
        self.close()
