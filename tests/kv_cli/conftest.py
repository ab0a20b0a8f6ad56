"""Shared fixtures: an in-process server speaking the line protocol."""

import socket
import threading
import time
from collections.abc import Callable, Iterator

import pytest

GREETING = b"+OK KV-Storage-Engine ready\r\n"


class FakeServer:
    """Threaded TCP server implementing the KV line protocol over an in-memory dict."""

    def __init__(self, greeting: bytes | None = GREETING) -> None:
        self.greeting = greeting  # None = never greet
        self.store: dict[str, str] = {}
        self.received: list[str] = []
        self.silent = False  # read commands but never answer
        self.reply_delay = 0.0
        self.raw_reply: bytes | None = None  # fixed answer for every command
        self.status_reply = b"+VALUE node_id=1 role=leader connections=1\r\n"
        self._sock = socket.create_server(("127.0.0.1", 0))
        self._sock.settimeout(0.1)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def port(self) -> int:
        return int(self._sock.getsockname()[1])

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except TimeoutError:
                continue
            conn.settimeout(None)
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn, conn.makefile("rb") as reader:
            if self.greeting is not None:
                conn.sendall(self.greeting)
            for raw in reader:
                line = raw.decode().rstrip("\r\n")
                self.received.append(line)
                if self.silent:
                    continue
                if self.reply_delay:
                    time.sleep(self.reply_delay)
                conn.sendall(self.raw_reply if self.raw_reply is not None else self._dispatch(line))
                if line == "QUIT":
                    return

    def _dispatch(self, line: str) -> bytes:
        name, _, rest = line.partition(" ")
        match name:
            case "PING":
                return b"+OK PONG\r\n"
            case "PUT":
                key, _, value = rest.partition(" ")
                self.store[key] = value
                return b"+OK stored\r\n"
            case "GET":
                if rest not in self.store:
                    return b"-ERR NOT_FOUND\r\n"
                return f"+VALUE {self.store[rest]}\r\n".encode()
            case "DELETE":
                if self.store.pop(rest, None) is None:
                    return b"-ERR NOT_FOUND\r\n"
                return b"+OK deleted\r\n"
            case "STATUS":
                return self.status_reply
            case "QUIT":
                return b"+OK bye\r\n"
            case _:
                return b"-ERR unknown command\r\n"


@pytest.fixture
def make_server() -> Iterator[Callable[..., FakeServer]]:
    """Factory for started fake servers; all are stopped at teardown."""
    servers: list[FakeServer] = []

    def factory(greeting: bytes | None = GREETING) -> FakeServer:
        srv = FakeServer(greeting)
        srv.start()
        servers.append(srv)
        return srv

    yield factory
    for srv in servers:
        srv.stop()


@pytest.fixture
def server(make_server: Callable[..., FakeServer]) -> FakeServer:
    """A started fake server with the standard greeting."""
    return make_server()


@pytest.fixture
def closed_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove KV_* configuration variables from the environment."""
    for name in (
        "KV_HOST",
        "KV_SERVER_HOST",
        "KV_PORT",
        "KV_SERVER_PORT",
        "KV_TIMEOUT_MS",
        "KV_SERVER_TIMEOUT_MS",
        "KV_FORMAT",
        "KV_OUTPUT_FORMAT",
        "KV_COLOR",
        "KV_OUTPUT_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
