"""Terminal implementations of the renderer, display and external viewers."""

import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from loguru import logger

from epresent.models.state import MaskKind, MaskRegion, PageView

# Erase the screen and home the cursor.
CLEAR_SCREEN = "\x1b[2J\x1b[H"

STYLES: dict[str, dict[str, Any]] = {
    "heading-top": {"fg": typer.colors.CYAN, "bold": True, "underline": True},
    "heading-nested": {"fg": typer.colors.BLUE, "bold": True},
    "bullet": {"fg": typer.colors.YELLOW, "bold": True},
    "title": {"fg": typer.colors.MAGENTA, "bold": True},
    "author": {"fg": typer.colors.GREEN},
    "date": {"dim": True},
}


def apply_masks(text: str, masks: tuple[MaskRegion, ...], *, color: bool = True) -> str:
    """Drop hidden regions from ``text`` and style the styled ones."""
    out: list[str] = []
    cursor = 0
    for region in sorted(masks, key=lambda r: (r.start, r.end)):
        if region.start < cursor:
            # Inside a hidden region already skipped.
            if region.end <= cursor:
                continue
            region = MaskRegion(cursor, region.end, region.kind, region.style)
        out.append(text[cursor : region.start])
        chunk = text[region.start : region.end]
        if region.kind is MaskKind.STYLED:
            out.append(typer.style(chunk, **STYLES.get(region.style or "", {})) if color else chunk)
        cursor = region.end
    out.append(text[cursor:])
    return "".join(out)


class TerminalRenderer:
    """Prints pages to the terminal with typer styling."""

    def __init__(self, *, color: bool = True, clear: bool = True) -> None:
        self.color = color
        self.clear = clear

    def render(self, view: PageView) -> None:
        if self.clear:
            typer.echo(CLEAR_SCREEN, nl=False)
        body = apply_masks(view.text, view.masks, color=self.color)
        pad = " " * view.offset
        header = f"[{view.page_number}] {view.title}"
        if view.indicators:
            glyphs = " ".join(i.glyph for i in view.indicators)
            width = shutil.get_terminal_size().columns
            header = header.ljust(max(width - len(glyphs) - 1, len(header) + 1)) + glyphs
        typer.echo(header)
        for line in body.splitlines():
            typer.echo(pad + line)

    def render_notes(self, text: str) -> None:
        typer.echo(typer.style("--- speaker notes ---", dim=True), err=True)
        typer.echo(text, err=True)

    def message(self, text: str) -> None:
        typer.echo(typer.style(text, fg=typer.colors.RED), err=True)


class TerminalDisplay:
    """A terminal cannot split itself; open splits are tracked but not drawn."""

    def __init__(self) -> None:
        self.splits: dict[int, tuple[str, int]] = {}
        self._next_handle = 0

    def available(self, position: str) -> int:
        size = shutil.get_terminal_size()
        return size.lines if position == "below" else size.columns

    def split(self, position: str, size: int) -> Any:
        handle = self._next_handle
        self._next_handle += 1
        self.splits[handle] = (position, size)
        return handle

    def close(self, handle: Any) -> None:
        logger.debug("Closing viewport {}", handle)
        self.splits.pop(handle, None)

    def focus_main(self) -> None:
        pass


@dataclass
class ExternalViewer:
    """A file handed to a desktop viewer; it has a single page as far as we know."""

    path: Path
    page: int = 1

    def fit_to_width(self) -> None:
        pass

    def fit_to_height(self) -> None:
        pass

    def go_to_page(self, n: int) -> None:
        self.page = n

    def advance(self) -> None:
        self.page = min(self.page + 1, self.total_pages())

    def current_page(self) -> int:
        return self.page

    def total_pages(self) -> int:
        return 1


class SubprocessViewerFactory:
    """Opens files with an external command such as xdg-open."""

    def __init__(self, command: str) -> None:
        self.command = command

    def open(self, path: Path, viewport: Any) -> ExternalViewer:
        args = [*shlex.split(self.command), str(path)]
        logger.debug("Running {}", shlex.join(args))
        subprocess.Popen(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        return ExternalViewer(path)


class SubprocessMediaPlayer:
    """Plays videos with an external player such as mpv."""

    def __init__(self, command: str) -> None:
        self.command = command

    def play(self, path: Path, *, mute: bool = False) -> None:
        args = shlex.split(self.command)
        if mute and Path(args[0]).name == "mpv":
            args.append("--mute=yes")
        args.append(str(path))
        logger.debug("Running {}", shlex.join(args))
        subprocess.Popen(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
