"""Per-session presentation state and the values handed to the renderer."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from epresent.models.node import DocumentNode


class MaskKind(Enum):
    HIDDEN = "hidden"
    STYLED = "styled"


@dataclass(frozen=True)
class MaskRegion:
    """A span of the current page text that is hidden or styled.

    Offsets are half-open ``[start, end)``. ``style`` is set only for
    styled regions.
    """

    start: int
    end: int
    kind: MaskKind
    style: str | None = None

    def overlaps(self, other: "MaskRegion") -> bool:
        return self.start < other.end and other.start < self.end


class Fold(Enum):
    """How much of a node the current page shows."""

    EXPANDED = "expanded"
    FOLDED = "folded"
    HIDDEN = "hidden"


class IndicatorKind(Enum):
    FILE = "file"
    VIDEO = "video"


@dataclass(frozen=True)
class Indicator:
    """A marker placed at the page edge announcing auxiliary content."""

    kind: IndicatorKind
    glyph: str
    position: str = "top-right"


@dataclass
class PresentationState:
    """Mutable state of one presentation session.

    Owned by the navigator; every other component reads or updates it
    through the session.
    """

    frame_level: int
    current_node: DocumentNode
    page_number: int = 1
    aux_window_open: bool = False
    aux_target: Path | None = None
    src_blocks_globally_visible: bool = False
    folds: dict[str, Fold] = field(default_factory=dict)
    revealed: list[tuple[str, Fold]] = field(default_factory=list)
    outline_view: bool = False


@dataclass(frozen=True)
class PageView:
    """Everything the renderer needs to draw one page."""

    title: str
    page_number: int
    text: str
    masks: tuple[MaskRegion, ...]
    indicators: tuple[Indicator, ...] = ()
    offset: int = 0
