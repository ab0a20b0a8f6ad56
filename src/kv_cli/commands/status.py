"""Show server status."""

import typer

from kv_cli.app_context import use_context


def status(ctx: typer.Context) -> None:
    """Show server status and replication info."""
    app = use_context(ctx)
    with app.session() as client:
        resp = client.status()
    if not resp.success:
        app.out.print_error_and_exit("server_error", resp.message)
    app.out.print_status(resp.message)
