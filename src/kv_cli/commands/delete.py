"""Delete a key."""

import typer

from kv_cli.app_context import use_context


def delete(ctx: typer.Context, key: str) -> None:
    """Delete a key and its value."""
    app = use_context(ctx)
    with app.session() as client:
        resp = client.delete(key)
    if resp.not_found:
        app.out.print_not_found_and_exit(key)
    if not resp.success:
        app.out.print_error_and_exit("server_error", resp.message)
    app.out.print_key_deleted(key)
