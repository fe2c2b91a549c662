"""CLI for epresent (present, pages, notes, estimate)."""

import shlex
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from epresent.config import load_config
from epresent.core.frame_level import resolve_frame_level
from epresent.core.importer.json_reader import read_document
from epresent.core.navigator import PageNavigator
from epresent.core.notes import build_notes_index, estimate_speaking_time
from epresent.core.tree.navigation import OutlineIndex
from epresent.errors import InvalidDocumentError, NotFoundError
from epresent.logging_config import configure_logging
from epresent.models.node import Document
from epresent.session import Session
from epresent.terminal import (
    SubprocessMediaPlayer,
    SubprocessViewerFactory,
    TerminalDisplay,
    TerminalRenderer,
)

app = typer.Typer(help="Present outline documents as slide shows in the terminal.")

# Interactive shorthands for session commands.
KEYS: dict[str, str] = {
    "n": "next",
    "p": "previous",
    "t": "top",
    "j": "jump-to",
    "ns": "next-subheading",
    "ps": "previous-subheading",
    "s": "toggle-all-src-blocks",
    "S": "toggle-one-src-block",
    "f": "show-file",
    "a": "advance-or-show-file",
    "v": "show-video",
    "r": "refresh",
    "notes": "show-notes",
    "rebuild-notes": "rebuild-notes",
    "e": "estimate-time",
    "q": "quit",
}

# Commands whose arguments are integers.
_INT_ARGS = {"jump-to", "toggle-one-src-block"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write the log to this file instead of stderr"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _open_document(path: Path) -> Document:
    """Read the document, exiting if it is missing or not an outline."""
    if not path.exists():
        logger.error("Document not found: {}", path)
        raise typer.Exit(1)
    try:
        return read_document(path)
    except InvalidDocumentError as e:
        logger.error("Cannot present {}: {}", path, e)
        raise typer.Exit(1) from e


def parse_command(line: str) -> tuple[str, list[str | int]]:
    """Turn a line of input into a session command and its arguments.

    Raises:
        NotFoundError: If a numeric argument is not a number.
    """
    parts = shlex.split(line) or ["n"]
    name = KEYS.get(parts[0], parts[0])
    args: list[str | int] = list(parts[1:])
    if name in _INT_ARGS:
        numeric = range(len(args))
    elif name == "show-file":
        # FILENAME POSITION SIZE
        numeric = range(2, len(args))
    else:
        numeric = range(0)
    try:
        for i in numeric:
            args[i] = int(parts[1 + i])
    except ValueError as e:
        msg = f"{name} expects a number, got {' '.join(parts[1:])!r}"
        raise NotFoundError(msg) from e
    return name, args


@app.command()
def present(
    path: Path = typer.Argument(..., help="JSON outline document"),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: ~/.config/epresent.json)"),
    ] = None,
    no_color: bool = typer.Option(False, "--no-color", help="Do not style text"),
) -> None:
    """Run an interactive presentation."""
    doc = _open_document(path)
    config = load_config(config_file)
    session = Session(
        doc,
        TerminalRenderer(color=not no_color),
        TerminalDisplay(),
        SubprocessViewerFactory(config.viewer_command),
        SubprocessMediaPlayer(config.player_command),
        config=config,
    )
    session.start()
    while session.running:
        line = typer.prompt("", default="n", show_default=False, prompt_suffix="> ")
        try:
            name, args = parse_command(line)
            session.dispatch(name, *args)
        except NotFoundError as e:
            session.renderer.message(str(e))


@app.command()
def pages(path: Path = typer.Argument(..., help="JSON outline document")) -> None:
    """List the pages of a document."""
    doc = _open_document(path)
    frame_level = resolve_frame_level(doc)
    navigator = PageNavigator(OutlineIndex(doc), frame_level, load_config())
    found = navigator.pages()
    typer.echo(f"{len(found)} pages (frame level {frame_level}):\n")
    for number, node in enumerate(found, start=1):
        typer.echo(f"  {number:3d}  {'  ' * (node.depth - 1)}{node.title}")


@app.command()
def notes(path: Path = typer.Argument(..., help="JSON outline document")) -> None:
    """Print the speaker notes of every top-level section."""
    doc = _open_document(path)
    for title, text in build_notes_index(doc).items():
        typer.echo(f"* {title}")
        if text:
            typer.echo(text.rstrip("\n"))
        typer.echo()


@app.command()
def estimate(
    path: Path = typer.Argument(..., help="JSON outline document"),
    wpm: Annotated[
        int | None,
        typer.Option("--wpm", "-w", min=1, help="Speaking rate in words per minute"),
    ] = None,
) -> None:
    """Estimate the speaking time from the speaker notes."""
    doc = _open_document(path)
    rate = wpm or load_config().words_per_minute
    minutes, words = estimate_speaking_time(doc, rate)
    typer.echo(f"{minutes:g} minutes ({words} words at {rate} wpm)")
