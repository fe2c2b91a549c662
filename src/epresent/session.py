"""A presentation session: wires navigation, masking, aux windows and notes."""

import inspect
import time
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from epresent.config import PresentationConfig
from epresent.core.aux_window import AuxWindowManager, compute_indicators
from epresent.core.frame_level import resolve_frame_level
from epresent.core.importer.json_reader import read_document
from epresent.core.masking import toggle_src_blocks
from epresent.core.navigator import PageNavigator
from epresent.core.notes import NotesView, build_notes_index, estimate_speaking_time
from epresent.core.reveal import play_slide_in, slide_in_steps
from epresent.core.tree.navigation import OutlineIndex
from epresent.errors import EpresentError, NotFoundError
from epresent.models.node import Document
from epresent.models.state import Indicator, PageView
from epresent.protocols import Display, MediaPlayer, Renderer, ViewerFactory

COMMANDS = (
    "top",
    "next",
    "previous",
    "jump-to",
    "next-subheading",
    "previous-subheading",
    "toggle-all-src-blocks",
    "toggle-one-src-block",
    "show-file",
    "advance-or-show-file",
    "show-video",
    "refresh",
    "quit",
    "estimate-time",
    "show-notes",
    "rebuild-notes",
)


class Session:
    """One presentation of one document.

    Commands run one at a time to completion. A command dispatched while a
    slide-in is playing is queued and handled once playback has finished.
    """

    def __init__(
        self,
        doc: Document,
        renderer: Renderer,
        display: Display,
        viewers: ViewerFactory,
        player: MediaPlayer,
        *,
        config: PresentationConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        width: int = 80,
    ) -> None:
        self.doc = doc
        self.config = config or PresentationConfig()
        self.renderer = renderer
        self.sleep = sleep
        self.width = width

        self.navigator = PageNavigator(OutlineIndex(doc), resolve_frame_level(doc), self.config)
        self.state = self.navigator.state
        base_dir = Path(doc.source_path).parent if doc.source_path else Path.cwd()
        self.aux = AuxWindowManager(self.state, display, viewers, player, base_dir=base_dir)
        self.notes = NotesView(build_notes_index(doc))
        self.notes_visible = False
        self.indicators: tuple[Indicator, ...] = ()
        self.running = False

        self._playing = False
        self._pending: deque[tuple[str, tuple[Any, ...]]] = deque()
        self._handlers: dict[str, Callable[..., object]] = {
            "top": self.top,
            "next": self.next,
            "previous": self.previous,
            "jump-to": self.jump_to,
            "next-subheading": self.next_subheading,
            "previous-subheading": self.previous_subheading,
            "toggle-all-src-blocks": self.toggle_all_src_blocks,
            "toggle-one-src-block": self.toggle_one_src_block,
            "show-file": self.show_file,
            "advance-or-show-file": self.advance_or_show_file,
            "show-video": self.show_video,
            "refresh": self.refresh,
            "quit": self.quit,
            "estimate-time": self.estimate_time,
            "show-notes": self.show_notes,
            "rebuild-notes": self.rebuild_notes,
        }

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> "Session":
        """Open a session on a JSON outline file.

        Raises:
            InvalidDocumentError: If the file is not a structured document.
        """
        return cls(read_document(path), **kwargs)

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Show the first page."""
        self.running = True
        logger.info(
            "Presenting {} pages at frame level {}",
            self.page_count(),
            self.state.frame_level,
        )
        self.top()

    def dispatch(self, command: str, *args: Any) -> bool:
        """Run one session command and return whether the session keeps running.

        Errors are shown as a message and leave the session unchanged.

        Raises:
            NotFoundError: If ``command`` is not a session command or ``args``
                do not fit it.
        """
        handler = self._handlers.get(command)
        if handler is None:
            msg = f"Unknown command {command!r}"
            raise NotFoundError(msg)
        try:
            inspect.signature(handler).bind(*args)
        except TypeError as e:
            msg = f"Bad arguments for {command}: {e}"
            raise NotFoundError(msg) from e
        if self._playing:
            logger.debug("Queued {} until playback finishes", command)
            self._pending.append((command, args))
            return self.running

        try:
            handler(*args)
        except (EpresentError, FileNotFoundError) as e:
            logger.warning("{}: {}", command, e)
            self.renderer.message(str(e))

        while self._pending and not self._playing:
            queued, queued_args = self._pending.popleft()
            self.dispatch(queued, *queued_args)
        return self.running

    # -- rendering -----------------------------------------------------------

    def view(self, *, offset: int = 0) -> PageView:
        layout = self.navigator.layout
        return PageView(
            title=self.state.current_node.title,
            page_number=self.state.page_number,
            text=layout.text,
            masks=self.navigator.masks,
            indicators=self.indicators,
            offset=offset,
        )

    def _render(self, *, animate: bool) -> None:
        steps = 0
        if animate and not self.state.outline_view:
            steps = slide_in_steps(self.state.current_node, self.config)
        if not steps:
            self.renderer.render(self.view())
            return

        self._playing = True
        try:
            play_slide_in(
                steps,
                self.width,
                lambda offset: self.renderer.render(self.view(offset=offset)),
                delay=self.config.slide_in_delay,
                sleep=self.sleep,
            )
        finally:
            self._playing = False

    def _sync_notes(self) -> None:
        if not self.notes_visible:
            return
        top = self.navigator.index.top_level(self.state.current_node)
        try:
            text = self.notes.sync_to_current_page(top.title)
        except NotFoundError:
            logger.debug("No notes section for {!r}", top.title)
            return
        self.renderer.render_notes(text)

    def _page_changed(self) -> None:
        self.indicators = ()
        try:
            self.aux.on_page_settled()
        except FileNotFoundError as e:
            logger.warning("Auto-show failed: {}", e)
            self.renderer.message(str(e))
        self.indicators = compute_indicators(
            self.state.current_node, enabled=self.config.indicators
        )
        self._render(animate=True)
        self._sync_notes()

    # -- commands ------------------------------------------------------------

    def page_count(self) -> int:
        return len(self.navigator.pages())

    def top(self) -> None:
        self.navigator.top()
        self._page_changed()

    def next(self) -> None:
        if self.navigator.next():
            self._page_changed()

    def previous(self) -> None:
        if self.navigator.previous():
            self._page_changed()

    def jump_to(self, n: int) -> None:
        self.navigator.jump_to(n)
        self._page_changed()

    def next_subheading(self) -> None:
        self.navigator.next_subheading()
        self._render(animate=False)

    def previous_subheading(self) -> None:
        self.navigator.previous_subheading()
        self._render(animate=False)

    def toggle_all_src_blocks(self) -> None:
        layout = self.navigator.layout
        self.navigator.masks = toggle_src_blocks(layout, self.config, "all")
        self.state.src_blocks_globally_visible = all(b.visible for b in layout.code_blocks())
        self._render(animate=False)

    def toggle_one_src_block(self, n: int = 1) -> None:
        """Toggle the ``n``-th code block on the page (1-based)."""
        blocks = self.navigator.layout.code_blocks()
        if not 1 <= n <= len(blocks):
            msg = f"No code block {n} on this page ({len(blocks)} present)"
            raise NotFoundError(msg)
        self.navigator.masks = toggle_src_blocks(self.navigator.layout, self.config, blocks[n - 1])
        self._render(animate=False)

    def show_file(
        self, filename: str | None = None, position: str | None = None, size: int | None = None
    ) -> None:
        self.aux.show_file(filename, position, size)

    def advance_or_show_file(self) -> None:
        self.aux.advance_or_show_file()

    def show_video(self, filename: str | None = None) -> None:
        self.aux.show_video(filename)

    def refresh(self) -> None:
        """Recompute folds-preserving layout and masks, then redraw."""
        self.navigator.settle(entering=False)
        self.indicators = compute_indicators(
            self.state.current_node, enabled=self.config.indicators
        )
        self._render(animate=False)
        self._sync_notes()

    def quit(self) -> None:
        self.aux.close_aux_window()
        self.running = False
        logger.info("Presentation finished on page {}", self.state.page_number)

    def estimate_time(self) -> tuple[float, int]:
        wpm = self.config.words_per_minute
        minutes, words = estimate_speaking_time(self.doc, wpm)
        self.renderer.message(f"Estimated {minutes:g} minutes ({words} words at {wpm} wpm)")
        return minutes, words

    def show_notes(self) -> None:
        """Toggle the speaker notes view."""
        self.notes_visible = not self.notes_visible
        self._sync_notes()

    def rebuild_notes(self) -> None:
        self.notes.rebuild(self.doc)
        self._sync_notes()
