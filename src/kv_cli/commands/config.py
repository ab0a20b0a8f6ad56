"""Inspect and initialize CLI configuration."""

import typer

from kv_cli.app_context import use_context
from kv_cli.config import write_default_config

config_app = typer.Typer(help="Manage CLI configuration.", no_args_is_help=True)


@config_app.command()
def show(ctx: typer.Context) -> None:
    """Show the resolved configuration (file, environment and flags combined)."""
    app = use_context(ctx)
    app.out.print_config(app.cfg.display())


@config_app.command()
def init(ctx: typer.Context) -> None:
    """Create a default config.toml in the config directory."""
    app = use_context(ctx)
    try:
        path = write_default_config(app.cfg.config_dir)
    except FileExistsError as e:
        app.out.print_error_and_exit("config_exists", str(e))
    app.out.print_config_created(str(path))
