"""Speaker notes: extraction, the synchronized notes view and timing."""

import io
import math
import re
from dataclasses import dataclass

from loguru import logger

from epresent.core.tree.layout import render_plain
from epresent.errors import NotFoundError
from epresent.models.node import Document, DocumentNode

_WORD_RE = re.compile(r"\w+(?:['’-]\w+)*")

NotesIndex = dict[str, str]


def count_words(text: str) -> int:
    return len(_WORD_RE.findall(text))


def _notes_subtrees(node: DocumentNode) -> list[DocumentNode]:
    """Outermost "Speaker notes" headings at or below ``node``."""
    if node.is_speaker_notes:
        return [node]
    found: list[DocumentNode] = []
    for child in node.children:
        found.extend(_notes_subtrees(child))
    return found


def build_notes_index(doc: Document) -> NotesIndex:
    """Map each top-level heading title to the text of its speaker notes.

    Every top-level heading gets a section, empty if it has no notes.
    Sections sharing a title are accumulated together.
    """
    index: NotesIndex = {}
    for top in doc.nodes:
        index.setdefault(top.title, "")
        for notes in _notes_subtrees(top):
            index[top.title] += render_plain(notes)
    logger.debug("Built notes index with {} sections", len(index))
    return index


def estimate_speaking_time(doc: Document, words_per_minute: int) -> tuple[float, int]:
    """Estimate talk length from the words in every speaker notes subtree.

    Returns:
        (minutes rounded up to the nearest half minute, total word count)
    """
    if words_per_minute <= 0:
        msg = f"words_per_minute must be positive, got {words_per_minute}"
        raise ValueError(msg)
    word_count = sum(
        count_words(render_plain(notes)) for top in doc.nodes for notes in _notes_subtrees(top)
    )
    minutes = math.ceil(2 * word_count / words_per_minute) / 2
    return minutes, word_count


@dataclass
class NotesView:
    """The secondary notes view, narrowed to one section at a time."""

    index: NotesIndex
    section: str | None = None

    @property
    def full_text(self) -> str:
        out = io.StringIO()
        for title, text in self.index.items():
            out.write(f"* {title}\n{text}")
        return out.getvalue()

    def sync_to_current_page(self, top_level_title: str) -> str:
        """Narrow the view to the section for ``top_level_title`` and return its text.

        Raises:
            NotFoundError: If the notes view has no such section.
        """
        if top_level_title not in self.index:
            msg = f"No notes section for {top_level_title!r}"
            raise NotFoundError(msg)
        self.section = top_level_title
        return self.index[top_level_title]

    def rebuild(self, doc: Document) -> None:
        self.index = build_notes_index(doc)
        if self.section not in self.index:
            self.section = None
