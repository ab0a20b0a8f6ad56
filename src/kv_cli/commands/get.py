"""Fetch the value of a key."""

import typer

from kv_cli.app_context import use_context


def get(ctx: typer.Context, key: str) -> None:
    """Get the value of a key."""
    app = use_context(ctx)
    with app.session() as client:
        resp = client.get(key)
    if resp.not_found:
        app.out.print_not_found_and_exit(key)
    if not resp.success:
        app.out.print_error_and_exit("server_error", resp.message)
    app.out.print_value(key, resp.value)
