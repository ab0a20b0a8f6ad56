"""Protocol client: codec, connection and command facade."""

from kv_cli.client.client import KvClient as KvClient
from kv_cli.client.connection import Connection as Connection
from kv_cli.client.connection import ConnectionState as ConnectionState
from kv_cli.client.errors import InvalidArgumentError as InvalidArgumentError
from kv_cli.client.errors import KvConnectionError as KvConnectionError
from kv_cli.client.errors import KvError as KvError
from kv_cli.client.errors import NotConnectedError as NotConnectedError
from kv_cli.client.errors import ProtocolError as ProtocolError
from kv_cli.client.errors import TransportError as TransportError
from kv_cli.client.protocol import Command as Command
from kv_cli.client.protocol import ErrorKind as ErrorKind
from kv_cli.client.protocol import Response as Response
