"""Main entry point for the quoterecorder command line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from quoterecorder.core.config import ConfigManager, RecorderConfig
from quoterecorder.core.exceptions import ConfigurationError
from quoterecorder.core.logging import LogConfig, configure_logging

from .formatters import create_formatter
from .quotes import register as register_quote_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for quoterecorder."""

    app = typer.Typer(add_completion=False, help="Minute quote recorder command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="Path to a TOML configuration file.",
        ),
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level; overrides the configured level.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        try:
            config = ConfigManager(config_path).get_config()
        except (ConfigurationError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--config") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "no_color": no_color,
                "config": config,
            }
        )
        _configure_logging(config, log_level)

    register_quote_commands(app)
    return app


def _configure_logging(config: RecorderConfig, level_override: str | None) -> None:
    param_hint = "--log-level" if level_override else "--config"
    try:
        configure_logging(LogConfig.from_settings(config.logging, level=level_override))
    except ValidationError as exc:
        raise typer.BadParameter(exc.errors()[0]["msg"], param_hint=param_hint) from exc
    except OSError as exc:
        raise typer.BadParameter(f"cannot open log file: {exc}", param_hint="--config") from exc


app = create_app()
