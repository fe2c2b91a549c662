"""Protocols for the host display, renderer and external viewers."""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from epresent.models.state import PageView


@runtime_checkable
class Renderer(Protocol):
    """Draws pages; the engine never touches glyphs itself."""

    def render(self, view: PageView) -> None:
        """Draw the page text with its masks and indicators applied."""
        ...

    def render_notes(self, text: str) -> None:
        """Show the speaker notes view narrowed to one section."""
        ...

    def message(self, text: str) -> None:
        """Show a one-line message to the user."""
        ...


@runtime_checkable
class Viewer(Protocol):
    """An external viewer loaded into the auxiliary viewport."""

    def fit_to_width(self) -> None: ...

    def fit_to_height(self) -> None: ...

    def go_to_page(self, n: int) -> None: ...

    def advance(self) -> None: ...

    def current_page(self) -> int: ...

    def total_pages(self) -> int: ...


@runtime_checkable
class Display(Protocol):
    """Window management of the host display system."""

    def available(self, position: str) -> int:
        """Space (lines or columns) available for a split at ``position``."""
        ...

    def split(self, position: str, size: int) -> Any:
        """Split the presentation viewport and return a handle for the new one."""
        ...

    def close(self, handle: Any) -> None:
        """Remove a viewport created by split()."""
        ...

    def focus_main(self) -> None:
        """Return input focus to the presentation viewport."""
        ...


@runtime_checkable
class ViewerFactory(Protocol):
    def open(self, path: Path, viewport: Any) -> Viewer:
        """Load ``path`` into ``viewport`` and return the viewer."""
        ...


@runtime_checkable
class MediaPlayer(Protocol):
    def play(self, path: Path, *, mute: bool = False) -> None:
        """Start playback; fire-and-forget."""
        ...
