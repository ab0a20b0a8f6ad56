"""Application context shared across CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer

from kv_cli.client import KvClient, KvError
from kv_cli.config import Config
from kv_cli.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Resolved settings and output strategy passed through Typer context."""

    out: Output
    cfg: Config

    @contextmanager
    def session(self) -> Iterator[KvClient]:
        """Connect to the configured server for the duration of one command.

        Client failures are reported through the output layer and end the command with exit code 1.
        """
        try:
            with KvClient.from_config(self.cfg) as client:
                yield client
        except KvError as e:
            self.out.print_error_and_exit(e.code, str(e))


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
