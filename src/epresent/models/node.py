"""Domain models for a parsed outline document."""

from dataclasses import dataclass, field

SPEAKER_NOTES_TITLE = "speaker notes"
TITLE_PAGE_TITLE = "title page"


@dataclass(frozen=True)
class TextBlock:
    """A span of plain paragraph text."""

    text: str


@dataclass(eq=False)
class CodeBlock:
    """A source code block.

    ``visible`` is the only field the engine ever mutates. Blocks compare by
    identity so that two blocks with the same source stay distinct.
    """

    language: str
    source: str
    visible: bool = True


@dataclass(frozen=True)
class Drawer:
    """A named drawer such as ``:LOGBOOK:``."""

    name: str
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class Comment:
    """A raw comment line."""

    text: str


@dataclass(frozen=True)
class Keyword:
    """An in-buffer directive line like ``#+TITLE: value``."""

    key: str
    value: str


@dataclass(frozen=True)
class ListBlock:
    """A plain bullet list."""

    items: tuple[str, ...]


Block = TextBlock | CodeBlock | Drawer | Comment | Keyword | ListBlock


@dataclass(frozen=True)
class DocumentNode:
    """A single heading in the document tree."""

    id: str
    title: str
    depth: int
    todo: str | None = None
    tags: tuple[str, ...] = ()
    metadata: dict[str, str] = field(default_factory=dict, hash=False)
    body: tuple[Block, ...] = ()
    children: tuple["DocumentNode", ...] = ()

    @property
    def is_speaker_notes(self) -> bool:
        return self.title.strip().lower() == SPEAKER_NOTES_TITLE

    @property
    def is_title_page(self) -> bool:
        return self.title.strip().lower() == TITLE_PAGE_TITLE

    def flag(self, key: str) -> bool:
        """Return True if the property ``key`` is set to a non-nil value."""
        value = self.metadata.get(key)
        if value is None:
            return False
        return value.strip().lower() not in ("", "nil", "no", "false")

    def code_blocks(self) -> list[CodeBlock]:
        """All code blocks in this node and its descendants, in document order."""
        blocks = [b for b in self.body if isinstance(b, CodeBlock)]
        for child in self.children:
            blocks.extend(child.code_blocks())
        return blocks


@dataclass(frozen=True)
class Document:
    """An already-parsed outline document."""

    nodes: tuple[DocumentNode, ...]
    keywords: tuple[tuple[str, str], ...] = ()
    preamble: tuple[Block, ...] = ()
    source_path: str | None = None

    def keyword(self, key: str) -> str | None:
        """Return the first value declared for a document-level keyword."""
        for k, v in self.keywords:
            if k == key:
                return v
        return None
