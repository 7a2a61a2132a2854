"""Configuration inspection commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from core.config import Settings, get_settings
from .shared import emit_json


app = typer.Typer(
    help="Inspect docindex settings (DOCINDEX_* variables and .env)",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("show", help="Show settings plus the resolved extensions and index location")
def show_config(
    json_out: bool = typer.Option(True, "--json/--no-json", help="Print JSON"),
) -> None:
    settings = get_settings()
    payload: dict[str, Any] = settings.model_dump()
    payload["resolved"] = settings.resolved()
    if json_out:
        emit_json(payload)
        return
    for key, value in settings.env_items().items():
        typer.echo(f"{key}={_env_value(value)}")
    for key, value in payload["resolved"].items():
        typer.echo(f"# {key}: {value}")


@app.command("export", help="Export settings as JSON or as a .env file")
def export_config(
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Target file (stdout when omitted)",
    ),
    env_format: bool = typer.Option(
        False,
        "--env",
        help="Write DOCINDEX_*=value lines instead of JSON",
    ),
) -> None:
    settings = get_settings()
    if env_format:
        # Unset optional values are left out so the file reloads cleanly.
        text = "".join(
            f"{key}={_env_value(value)}\n"
            for key, value in settings.env_items().items()
            if value is not None
        )
    else:
        text = json.dumps(settings.model_dump(), ensure_ascii=False, indent=2) + "\n"
    if output is None:
        typer.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(f"Wrote: {output}")


@app.command("diff", help="Show DOCINDEX_* variables whose value differs from the default")
def diff_config() -> None:
    current = get_settings().env_items()
    defaults = _env_defaults()
    diff: dict[str, dict[str, Any]] = {}
    for key, value in current.items():
        default = defaults.get(key)
        if value != default:
            diff[key] = {"value": value, "default": default}
    emit_json(diff)


def _env_defaults() -> dict[str, Any]:
    return {
        str(field.validation_alias or name.upper()): field.default
        for name, field in Settings.model_fields.items()
    }


def _env_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["app"]
