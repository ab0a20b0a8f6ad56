"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 - print() is how this module writes CLI output.

import json
import sys
from typing import NoReturn

import typer


def _parse_json(value: str) -> object | None:
    """Return the parsed value if it is a JSON object or array, else None."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict | list) else None


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool, color: bool = False) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.
            color: Colorize human-readable output. Ignored in JSON mode.

        """
        self._json_mode = json_mode
        self._color = color

    @property
    def json_mode(self) -> bool:
        """Whether output is JSON."""
        return self._json_mode

    def _echo(self, text: str, fg: str | None = None, *, err: bool = False) -> None:
        """Print text, colored when enabled."""
        if self._color and fg is not None:
            typer.secho(text, fg=fg, err=err)
        else:
            print(text, file=sys.stderr if err else sys.stdout)

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            self._echo(f"✓ {message}" if self._color else message, typer.colors.GREEN)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            self._echo(f"✗ Error: {message}" if self._color else f"Error: {message}", typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    # --- Keys ---

    def print_value(self, key: str, value: str) -> None:
        """Print a fetched value. JSON values are pretty-printed (text) or embedded parsed (JSON)."""
        parsed = _parse_json(value)
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"key": key, "value": parsed if parsed is not None else value}}))
            return
        text = json.dumps(parsed, indent=2) if parsed is not None else value
        self._echo(text, typer.colors.CYAN)

    def print_not_found_and_exit(self, key: str) -> NoReturn:
        """Print a missing-key result and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": "not_found", "message": f"Key not found: {key}", "key": key}))
        else:
            self._echo(f"Key not found: {key}", typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    def print_key_set(self, key: str) -> None:
        """Print store confirmation."""
        self._success({"key": key}, f"Set {key}")

    def print_key_deleted(self, key: str) -> None:
        """Print deletion confirmation."""
        self._success({"key": key}, f"Deleted {key}")

    # --- Server ---

    def print_pong(self, address: str) -> None:
        """Print ping result."""
        self._success({"address": address}, f"PONG from {address}")

    def print_status(self, status: str) -> None:
        """Print server status text as returned by the server."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"status": status}}))
            return
        self._echo("Server Status:", typer.colors.CYAN)
        print("---------------------")
        print(status)

    # --- Config ---

    def print_config(self, settings: dict[str, object]) -> None:
        """Print resolved configuration."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": settings}))
            return
        print("Current Configuration:")
        print("---------------------")
        for key, value in settings.items():
            print(f"{key}: {value}")

    def print_config_created(self, path: str) -> None:
        """Print config file creation confirmation."""
        self._success({"path": path}, f"Created default config at {path}")
