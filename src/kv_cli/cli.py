"""CLI entry point for kv-cli."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from kv_cli.app_context import AppContext
from kv_cli.commands.config import config_app
from kv_cli.commands.delete import delete
from kv_cli.commands.get import get
from kv_cli.commands.ping import ping
from kv_cli.commands.set import set_
from kv_cli.commands.status import status
from kv_cli.config import Config, ConfigFileError, env_output_format
from kv_cli.log import setup_logging
from kv_cli.output import Output

app = TyperPlus(package_name="kv-cli")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    host: Annotated[str | None, typer.Option("--host", help="Server host (default: from config or 127.0.0.1).")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Server port (default: from config or 9000).")] = None,
    timeout_ms: Annotated[int | None, typer.Option("--timeout-ms", help="Per-operation timeout in milliseconds.")] = None,
    output_format: Annotated[str | None, typer.Option("--format", help="Output format: text or json.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output.")] = False,
    config_dir: Annotated[Path | None, typer.Option("--config-dir", help="Configuration directory path.")] = None,
) -> None:
    """Command-line client for the KV storage engine."""
    if json_output:
        output_format = "json"
    # used only when the settings themselves fail to resolve
    error_out = Output(json_mode=(output_format or env_output_format()) == "json")
    try:
        cfg = Config.build(
            config_dir,
            host=host,
            port=port,
            timeout_ms=timeout_ms,
            output_format=output_format,
            color=False if no_color else None,
        )
    except ValidationError as e:
        error_out.print_error_and_exit("invalid_config", _format_validation_error(e))
    except ConfigFileError as e:
        error_out.print_error_and_exit("invalid_config", str(e))
    setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=Output(json_mode=cfg.output_format == "json", color=cfg.color), cfg=cfg)


def _format_validation_error(e: ValidationError) -> str:
    """Summarize pydantic errors as 'field: reason' pairs."""
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())


# Keys
app.command()(get)
app.command("set")(set_)
app.command(aliases=["del", "rm"])(delete)

# Server
app.command()(ping)
app.command()(status)

# Configuration
app.add_typer(config_app, name="config")
