"""Typed command wrappers over a single server connection."""

from types import TracebackType
from typing import Self

from kv_cli.client.connection import Connection
from kv_cli.client.protocol import Command, Response
from kv_cli.config import Config


class KvClient:
    """Client for the key-value server: one connection, one request at a time."""

    def __init__(self, host: str, port: int, timeout: float) -> None:
        """Initialize client with a server address.

        Args:
            host: Server host name or address.
            port: Server TCP port.
            timeout: Per-operation deadline in seconds; 0 disables the deadline.

        """
        self._conn = Connection(host, port, timeout)

    @classmethod
    def from_config(cls, cfg: Config) -> Self:
        """Build a client from resolved settings."""
        return cls(cfg.host, cfg.port, cfg.timeout)

    @property
    def connection(self) -> Connection:
        """Underlying connection."""
        return self._conn

    def connect(self) -> None:
        """Open the connection and complete the handshake."""
        self._conn.connect()

    def close(self) -> None:
        """Close the connection. Idempotent."""
        self._conn.close()

    def __enter__(self) -> Self:
        """Connect on entry."""
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        """Close on exit."""
        self.close()

    # --- Commands ---

    def get(self, key: str) -> Response:
        """Fetch the value of a key. An absent key yields a not_found response."""
        return self._conn.send(Command.GET, key)

    def set(self, key: str, value: str) -> Response:
        """Store a value under a key."""
        return self._conn.send(Command.PUT, key, value)

    def delete(self, key: str) -> Response:
        """Remove a key."""
        return self._conn.send(Command.DELETE, key)

    def ping(self) -> Response:
        """Check server liveness."""
        return self._conn.send(Command.PING)

    def quit(self) -> Response:
        """Ask the server to end the session. The connection is closed afterwards."""
        try:
            return self._conn.send(Command.QUIT)
        finally:
            self._conn.close()

    def status(self) -> Response:
        """Fetch server status text (returned in the message)."""
        return self._conn.send(Command.STATUS)
