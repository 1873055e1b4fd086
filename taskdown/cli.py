"""Typer CLI wiring for the Taskdown converter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer

from taskdown import __version__
from taskdown.config import TaskdownConfig, load_config
from taskdown.domain.board import Board
from taskdown.logging_utils import configure_logging, get_logger
from taskdown.parser import parse
from taskdown.serializer import serialize

logger = get_logger(__name__)

app = typer.Typer(help="Jira-style Markdown parser and serializer")


def _version_callback(value: bool) -> None:
    """Print the Taskdown package version when requested."""

    if value:
        typer.echo(f"Taskdown {__version__}")
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _settings(ctx: typer.Context) -> TaskdownConfig:
    root = ctx.find_root()
    if isinstance(root.obj, TaskdownConfig):
        return root.obj
    return TaskdownConfig()


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        _fail(f"File not found: {path}")
    except OSError as exc:
        _fail(f"Unable to read {path}: {exc}")
    except UnicodeDecodeError as exc:
        _fail(f"Unable to decode {path} as UTF-8: {exc}")


def _board_json(board: Board) -> str:
    return json.dumps(board.to_dict(), indent=2, ensure_ascii=False)


@app.callback(invoke_without_command=True)
def _main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the Taskdown version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "",
        "--log-level",
        help="Set Taskdown log level (e.g. info, warning, debug). Overrides TASKDOWN_LOG_LEVEL.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a taskdown.yaml file with parser and serializer settings.",
    ),
) -> None:
    """Global callback to wire shared options like --version and --config."""

    try:
        settings = load_config(config)
    except (FileNotFoundError, ValueError) as exc:
        configure_logging(log_level or None)
        _fail(str(exc))

    configure_logging(log_level or settings.log_level)
    if settings.source is not None:
        logger.debug("Loaded settings from %s", settings.source)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("parse")
def parse_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markdown board file to parse."),
) -> None:
    """Parse Markdown to JSON."""

    settings = _settings(ctx)
    board = parse(_read_text(file), settings.parser)
    logger.debug("Parsed %s into %d epic(s)", file, len(board.epics))
    typer.echo("Parsed board data:")
    typer.echo(_board_json(board))


@app.command("serialize")
def serialize_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON board document to serialize."),
) -> None:
    """Serialize JSON to Markdown."""

    settings = _settings(ctx)
    raw = _read_text(file)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        _fail(f"Invalid JSON in {file}: {exc}")
    except RecursionError:
        _fail(f"Invalid JSON in {file}: nesting is too deep")
    try:
        board = Board.from_mapping(data)
    except ValueError as exc:
        _fail(f"Invalid board document in {file}: {exc}")

    typer.echo("Serialized markdown:")
    typer.echo(serialize(board, settings.serializer))


@app.command("roundtrip")
def roundtrip_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Markdown board file to round-trip."),
) -> None:
    """Parse and serialize back to Markdown."""

    settings = _settings(ctx)
    original = _read_text(file)

    typer.echo(f"\n=== Original Markdown ({file}) ===")
    typer.echo(original)

    board = parse(original, settings.parser)
    typer.echo("\n=== Parsed to JSON ===")
    typer.echo(_board_json(board))

    typer.echo("\n=== Serialized back to Markdown ===")
    typer.echo(serialize(board, settings.serializer))

    summary = board.summary()
    typer.echo("\n=== Summary ===")
    typer.echo(f"Original epics: {summary.epics}")
    typer.echo(f"Total cards: {summary.cards}")
    typer.echo(f"Total acceptance criteria: {summary.acceptance_criteria}")
    typer.echo(f"Total technical tasks: {summary.technical_tasks}")


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help."""

    parent = ctx.parent or ctx
    typer.echo(parent.get_help())


def main() -> None:
    """Entry point used by the console script."""

    app()


if __name__ == "__main__":
    main()
