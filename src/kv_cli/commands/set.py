"""Store a key-value pair."""

import typer

from kv_cli.app_context import use_context


def set_(ctx: typer.Context, key: str, value: str) -> None:
    """Set the value of a key (the value may contain spaces)."""
    app = use_context(ctx)
    with app.session() as client:
        resp = client.set(key, value)
    if not resp.success:
        app.out.print_error_and_exit("server_error", resp.message)
    app.out.print_key_set(key)
