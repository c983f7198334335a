"""Helpers shared by the quote commands."""

from __future__ import annotations

import json
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Sequence, TextIO

import typer

from quoterecorder.core.config import RecorderConfig
from quoterecorder.core.exceptions import ErrorCode, QuoteRecorderError

from .constants import FETCH_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .formatters import OutputFormatter, create_formatter

# 未列出的错误码一律视为系统错误
EXIT_CODES: dict[str, int] = {
    ErrorCode.FETCH_ERROR.value: FETCH_EXIT_CODE,
    ErrorCode.PARSE_ERROR.value: VALIDATION_EXIT_CODE,
    ErrorCode.CONFIGURATION_ERROR.value: VALIDATION_EXIT_CODE,
}


@dataclass(slots=True)
class CommandOutput:
    """Formatter, target stream and configuration of one command run."""

    formatter: OutputFormatter
    stream: TextIO
    config: RecorderConfig
    stack: ExitStack = field(default_factory=ExitStack, repr=False)

    def __enter__(self) -> CommandOutput:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stack.close()

    def render(self, rows: Sequence[Mapping[str, object]], columns: Sequence[str], *, title: str | None = None) -> None:
        self.formatter.render(rows, stream=self.stream, columns=columns, title=title)


def open_output(ctx: typer.Context) -> CommandOutput:
    """Resolve the global ``--format``/``--output``/``--no-color`` options."""

    options = ctx.ensure_object(dict)
    formatter = create_formatter(str(options.get("format", "table")), no_color=bool(options.get("no_color", False)))
    config = options.get("config") or RecorderConfig()

    output = CommandOutput(formatter=formatter, stream=sys.stdout, config=config)
    output_path = options.get("output_path")
    if output_path is not None:
        try:
            output.stream = output.stack.enter_context(open(output_path, "w", encoding="utf-8"))
        except OSError as exc:
            emit_error(f"unable to open '{output_path}': {exc}", "OUTPUT_WRITE_ERROR")
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    return output


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a ``{"code", "message", "details"}`` line to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = dict(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def fail(error: QuoteRecorderError) -> typer.Exit:
    """Report ``error`` on stderr and build the matching exit."""

    emit_error(error.message, error.error_code, details=error.details)
    return typer.Exit(code=EXIT_CODES.get(error.error_code, SYSTEM_EXIT_CODE))


def parse_day(value: str | None, *, param_hint: str = "--date") -> date:
    """Parse ``YYYY-MM-DD``; ``None`` means today."""

    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid date '{value}', expected YYYY-MM-DD", param_hint=param_hint) from exc


__all__ = ["EXIT_CODES", "CommandOutput", "emit_error", "fail", "open_output", "parse_day"]
