"""Check server connectivity."""

import typer

from kv_cli.app_context import use_context


def ping(ctx: typer.Context) -> None:
    """Ping the server to verify connectivity."""
    app = use_context(ctx)
    with app.session() as client:
        resp = client.ping()
    if not resp.success:
        app.out.print_error_and_exit("server_error", resp.message)
    app.out.print_pong(f"{app.cfg.host}:{app.cfg.port}")
