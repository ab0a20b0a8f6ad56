"""Line protocol codec for the key-value server.

CR LF terminated UTF-8 text, one line per message. No I/O happens here.

Request:  GET <key> | PUT <key> <value> | DELETE <key> | PING | QUIT | STATUS
Response: +OK <message> | +VALUE <data> | -ERR <message>
Greeting: +OK <anything>  (sent by the server once, right after accept)
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

from kv_cli.client.errors import InvalidArgumentError, ProtocolError

TERMINATOR = b"\r\n"
VALUE_TOKEN = "VALUE"
HANDSHAKE_PREFIX = "+OK"
NOT_FOUND_MESSAGE = "NOT_FOUND"


class Command(StrEnum):
    """Commands understood by the server."""

    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    PING = "PING"
    QUIT = "QUIT"
    STATUS = "STATUS"

    @property
    def arity(self) -> int:
        """Number of arguments the command takes."""
        return _ARITY[self]


_ARITY = {
    Command.GET: 1,
    Command.PUT: 2,
    Command.DELETE: 1,
    Command.PING: 0,
    Command.QUIT: 0,
    Command.STATUS: 0,
}


class ErrorKind(Enum):
    """Classification of a server response."""

    NONE = "none"
    NOT_FOUND = "not_found"
    GENERIC = "generic"


@dataclass(frozen=True)
class Response:
    """Decoded server response."""

    success: bool
    message: str = ""
    value: str = ""  # only set for GET answered with a VALUE frame
    error_kind: ErrorKind = ErrorKind.NONE

    @property
    def not_found(self) -> bool:
        """True when the server reported an absent key."""
        return self.error_kind is ErrorKind.NOT_FOUND

    @staticmethod
    def ok(message: str, value: str = "") -> "Response":
        """Build a success response."""
        return Response(success=True, message=message, value=value)

    @staticmethod
    def fail(message: str) -> "Response":
        """Build a failure response, classifying the message."""
        return Response(success=False, message=message, error_kind=classify_error(message))


def classify_error(message: str) -> ErrorKind:
    """Map a server error message to an ErrorKind.

    The server has no error codes; NOT_FOUND is a message convention.
    This is the only place that compares against it.
    """
    if message == NOT_FOUND_MESSAGE:
        return ErrorKind.NOT_FOUND
    return ErrorKind.GENERIC


def validate_args(command: Command, args: tuple[str, ...]) -> None:
    """Check that arguments can be framed as one unambiguous line.

    Raises:
        InvalidArgumentError: Wrong arity, empty key, line terminator inside an
            argument, or a space in a non-final argument.

    """
    if len(args) != command.arity:
        msg = f"{command} takes {command.arity} argument(s), got {len(args)}"
        raise InvalidArgumentError(msg)
    for i, arg in enumerate(args):
        if "\r" in arg or "\n" in arg:
            msg = f"{command} argument must not contain CR or LF"
            raise InvalidArgumentError(msg)
        is_last = i == len(args) - 1
        if not is_last and " " in arg:
            msg = f"{command} key must not contain spaces"
            raise InvalidArgumentError(msg)
    if args and not args[0]:
        msg = f"{command} key must not be empty"
        raise InvalidArgumentError(msg)


def encode_command(command: Command, *args: str) -> bytes:
    """Serialize a command and its arguments to one CR LF terminated line."""
    validate_args(command, args)
    return " ".join((command.value, *args)).encode() + TERMINATOR


def decode_response(line: str | bytes, command: Command | None = None) -> Response:
    """Parse one response line into a Response.

    Args:
        line: Raw line as received, terminator included or not.
        command: Command the line answers. When given and not GET, a VALUE
            payload is reported as the message instead of the value.

    Raises:
        ProtocolError: Invalid UTF-8, empty line or unknown leading marker.

    """
    if isinstance(line, bytes):
        try:
            line = line.decode()
        except UnicodeDecodeError as e:
            msg = f"response is not valid UTF-8: {line!r}"
            raise ProtocolError(msg) from e
    line = line.strip()
    if not line:
        msg = "empty response"
        raise ProtocolError(msg)

    marker, rest = line[0], line[1:]
    match marker:
        case "+":
            fields = rest.split(" ", 1)
            if fields[0] == VALUE_TOKEN and len(fields) == 2:
                if command is None or command is Command.GET:
                    return Response.ok("OK", value=fields[1])
                return Response.ok(fields[1])
            return Response.ok(fields[-1])
        case "-":
            fields = rest.split(" ", 1)
            return Response.fail(fields[1] if len(fields) == 2 else rest)
        case _:
            msg = f"unknown response format: {line}"
            raise ProtocolError(msg)


def is_handshake(line: str | bytes) -> bool:
    """Check whether a greeting line acknowledges readiness. Anything after +OK is ignored."""
    if isinstance(line, bytes):
        return line.startswith(HANDSHAKE_PREFIX.encode())
    return line.startswith(HANDSHAKE_PREFIX)
