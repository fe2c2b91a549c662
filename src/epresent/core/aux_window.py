"""Auxiliary window: an external file or video shown beside the slide."""

import re
from pathlib import Path
from typing import Any

from loguru import logger

from epresent.config import MUTE, SHOW_AUTO, SHOW_BELOW, SHOW_FILE, SHOW_SIZE, SHOW_VIDEO
from epresent.models.node import DocumentNode
from epresent.models.state import Indicator, IndicatorKind, PresentationState
from epresent.protocols import Display, MediaPlayer, Viewer, ViewerFactory

_LINK_RE = re.compile(r"^\[\[(?:file:)?(?P<target>[^\]]+)\](?:\[[^\]]*\])?\]$")

INDICATOR_GLYPHS: dict[IndicatorKind, str] = {
    IndicatorKind.FILE: "[F]",
    IndicatorKind.VIDEO: "[V]",
}


def strip_link(filename: str) -> str:
    """Remove ``[[file:x][desc]]`` style link decoration from a filename."""
    filename = filename.strip()
    match = _LINK_RE.match(filename)
    return match.group("target") if match else filename


def parse_size(value: str | None) -> int | None:
    """Parse a SHOW_SIZE value; anything but a positive integer means "default"."""
    if value is None:
        return None
    try:
        size = int(value.strip())
    except ValueError:
        logger.warning("Ignoring invalid {} value {!r}", SHOW_SIZE, value)
        return None
    return size if size > 0 else None


def compute_indicators(node: DocumentNode, *, enabled: bool) -> tuple[Indicator, ...]:
    """Edge markers announcing a page's auxiliary file and video."""
    if not enabled or node.flag(SHOW_AUTO):
        return ()
    indicators = []
    if node.metadata.get(SHOW_FILE):
        indicators.append(Indicator(IndicatorKind.FILE, INDICATOR_GLYPHS[IndicatorKind.FILE]))
    if node.metadata.get(SHOW_VIDEO):
        indicators.append(Indicator(IndicatorKind.VIDEO, INDICATOR_GLYPHS[IndicatorKind.VIDEO]))
    return tuple(indicators)


class AuxWindowManager:
    """Opens and closes the secondary viewport for the current page."""

    def __init__(
        self,
        state: PresentationState,
        display: Display,
        viewers: ViewerFactory,
        player: MediaPlayer,
        *,
        base_dir: Path,
    ) -> None:
        self.state = state
        self.display = display
        self.viewers = viewers
        self.player = player
        self.base_dir = base_dir
        self.viewer: Viewer | None = None
        self._viewport: Any = None

    def _resolve(self, filename: str) -> Path:
        path = Path(strip_link(filename)).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        if not path.exists():
            msg = f"Auxiliary file not found: {path}"
            raise FileNotFoundError(msg)
        return path

    def _advanceable(self) -> Viewer | None:
        """The open viewer if it has more than one page to step through."""
        if self.viewer is not None and self.viewer.total_pages() > 1:
            return self.viewer
        return None

    def show_file(
        self,
        filename: str | None = None,
        position: str | None = None,
        size: int | None = None,
    ) -> Path:
        """Open ``filename`` in a split beside or below the slide.

        Missing arguments come from the current page's SHOW_FILE, SHOW_BELOW
        and SHOW_SIZE properties. Showing a multi-page file that is already
        open advances it by one page instead.

        Raises:
            FileNotFoundError: If there is no file to show or it does not exist.
        """
        node = self.state.current_node
        filename = filename or node.metadata.get(SHOW_FILE)
        if not filename:
            msg = f"Page {node.title!r} declares no {SHOW_FILE}"
            raise FileNotFoundError(msg)
        path = self._resolve(filename)

        if self.state.aux_window_open and self.state.aux_target == path:
            viewer = self._advanceable()
            if viewer is not None:
                viewer.advance()
                logger.debug("Advanced {} to page {}", path.name, viewer.current_page())
            self.display.focus_main()
            return path

        if position is None:
            position = "below" if node.flag(SHOW_BELOW) else "right"
        if size is None:
            size = parse_size(node.metadata.get(SHOW_SIZE))
        if size is None:
            size = self.display.available(position) // 2

        viewport = self.display.split(position, size)
        try:
            viewer = self.viewers.open(path, viewport)
        except OSError:
            self.display.close(viewport)
            raise
        self.close_aux_window()
        if position == "below":
            viewer.fit_to_width()
        else:
            viewer.fit_to_height()

        self._viewport = viewport
        self.viewer = viewer
        self.state.aux_window_open = True
        self.state.aux_target = path
        self.display.focus_main()
        logger.debug("Opened {} ({}, size {})", path, position, size)
        return path

    def advance_or_show_file(self) -> Path:
        """Advance the open viewer one page, or open the page's file."""
        viewer = self._advanceable()
        if self.state.aux_window_open and viewer is not None and self.state.aux_target:
            viewer.advance()
            self.display.focus_main()
            return self.state.aux_target
        return self.show_file()

    def show_video(self, filename: str | None = None) -> Path:
        """Play the page's SHOW_VIDEO file in the external media player.

        Raises:
            FileNotFoundError: If there is no video to play or it does not exist.
        """
        node = self.state.current_node
        filename = filename or node.metadata.get(SHOW_VIDEO)
        if not filename:
            msg = f"Page {node.title!r} declares no {SHOW_VIDEO}"
            raise FileNotFoundError(msg)
        path = self._resolve(filename)
        self.player.play(path, mute=node.flag(MUTE))
        logger.debug("Playing {}", path)
        return path

    def close_aux_window(self) -> None:
        """Close the auxiliary window if one is open."""
        if not self.state.aux_window_open:
            return
        self.display.close(self._viewport)
        logger.debug("Closed auxiliary window for {}", self.state.aux_target)
        self._viewport = None
        self.viewer = None
        self.state.aux_window_open = False
        self.state.aux_target = None

    def on_page_settled(self) -> None:
        """Close the previous page's window and auto-show the new page's content."""
        self.close_aux_window()
        node = self.state.current_node
        if not node.flag(SHOW_AUTO):
            return
        if node.metadata.get(SHOW_FILE):
            self.show_file()
        elif node.metadata.get(SHOW_VIDEO):
            self.show_video()
