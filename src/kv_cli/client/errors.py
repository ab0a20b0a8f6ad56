"""Exceptions raised by the protocol client.

Each class carries a machine-readable ``code`` used by the output layer.
Server-reported ``-ERR`` lines are not exceptions; they decode to a failed Response.
"""


class KvError(Exception):
    """Base error for client failures."""

    code = "error"


class KvConnectionError(KvError):
    """Connection could not be established (dial, handshake timeout or mismatch)."""

    code = "connection_failed"


class NotConnectedError(KvError):
    """Request issued on a connection that is not in the connected state."""

    code = "not_connected"


class TransportError(KvError):
    """Read, write or deadline failure during a request."""

    code = "transport_error"


class ProtocolError(KvError):
    """Server sent a line that does not follow the response grammar."""

    code = "malformed_response"


class InvalidArgumentError(KvError):
    """Command argument cannot be framed on the wire."""

    code = "invalid_argument"
