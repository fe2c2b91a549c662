"""Lay out a page subtree as text with typed segments.

The segments are what the masking engine works from: every offset of a
MaskRegion refers to the text produced here.
"""

import io
from dataclasses import dataclass
from enum import Enum

from epresent.models.node import (
    Block,
    CodeBlock,
    Comment,
    Document,
    DocumentNode,
    Drawer,
    Keyword,
    ListBlock,
    TextBlock,
)
from epresent.models.state import Fold


class SegmentKind(Enum):
    STARS = "stars"
    TODO = "todo"
    HEADING = "heading"
    TAGS = "tags"
    PROPERTIES = "properties"
    DRAWER = "drawer"
    COMMENT = "comment"
    KEYWORD_PREFIX = "keyword-prefix"
    KEYWORD_VALUE = "keyword-value"
    SRC_DELIMITER = "src-delimiter"
    SRC_BLOCK = "src-block"
    BULLET = "bullet"
    TEXT = "text"
    NOTES = "notes"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    start: int
    end: int
    node_id: str | None = None
    block: CodeBlock | None = None
    key: str | None = None
    top: bool = False


@dataclass(frozen=True)
class PageLayout:
    text: str
    segments: tuple[Segment, ...]

    def code_blocks(self) -> tuple[CodeBlock, ...]:
        """Code blocks laid out on the page, in order."""
        return tuple(
            s.block for s in self.segments if s.kind is SegmentKind.SRC_BLOCK and s.block
        )


class _Writer:
    """StringIO that records segments as it goes."""

    def __init__(self) -> None:
        self.out = io.StringIO()
        self.pos = 0
        self.segments: list[Segment] = []

    def write(self, text: str, kind: SegmentKind | None = None, **extra: object) -> None:
        if kind is not None and text:
            self.segments.append(Segment(kind, self.pos, self.pos + len(text), **extra))
        self.out.write(text)
        self.pos += len(text)

    def layout(self) -> PageLayout:
        return PageLayout(text=self.out.getvalue(), segments=tuple(self.segments))


def _line(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def _write_heading(w: _Writer, node: DocumentNode, *, top: bool) -> None:
    w.write("*" * node.depth + " ", SegmentKind.STARS, node_id=node.id)
    if node.todo:
        w.write(node.todo + " ", SegmentKind.TODO, node_id=node.id)
    w.write(node.title, SegmentKind.HEADING, node_id=node.id, top=top)
    if node.tags:
        w.write(" :" + ":".join(node.tags) + ":", SegmentKind.TAGS, node_id=node.id)
    w.write("\n")


def _write_block(w: _Writer, block: Block, node_id: str | None) -> None:
    if isinstance(block, TextBlock):
        w.write(_line(block.text), SegmentKind.TEXT, node_id=node_id)
    elif isinstance(block, CodeBlock):
        start = w.pos
        w.write(f"#+BEGIN_SRC {block.language}".rstrip() + "\n", SegmentKind.SRC_DELIMITER)
        if block.source:
            w.write(_line(block.source))
        w.write("#+END_SRC\n", SegmentKind.SRC_DELIMITER)
        w.segments.append(
            Segment(SegmentKind.SRC_BLOCK, start, w.pos, node_id=node_id, block=block)
        )
    elif isinstance(block, Drawer):
        lines = "".join(_line(line) for line in block.lines)
        w.write(f":{block.name}:\n{lines}:END:\n", SegmentKind.DRAWER, node_id=node_id)
    elif isinstance(block, Comment):
        w.write(_line(f"# {block.text}"), SegmentKind.COMMENT, node_id=node_id)
    elif isinstance(block, Keyword):
        w.write(f"#+{block.key}: ", SegmentKind.KEYWORD_PREFIX, key=block.key)
        w.write(block.value, SegmentKind.KEYWORD_VALUE, key=block.key)
        w.write("\n")
    elif isinstance(block, ListBlock):
        for item in block.items:
            w.write("-", SegmentKind.BULLET, node_id=node_id)
            w.write(" ")
            w.write(_line(item), SegmentKind.TEXT, node_id=node_id)


def _write_node(w: _Writer, node: DocumentNode, folds: dict[str, Fold], *, top: bool) -> None:
    fold = folds.get(node.id, Fold.EXPANDED)
    if fold is Fold.HIDDEN:
        return

    start = w.pos
    _write_heading(w, node, top=top)
    if fold is Fold.EXPANDED:
        if node.metadata:
            props = "".join(f":{k}: {v}\n" for k, v in node.metadata.items())
            w.write(f":PROPERTIES:\n{props}:END:\n", SegmentKind.PROPERTIES, node_id=node.id)
        for block in node.body:
            _write_block(w, block, node.id)
        for child in node.children:
            _write_node(w, child, folds, top=False)

    if node.is_speaker_notes:
        w.segments.append(Segment(SegmentKind.NOTES, start, w.pos, node_id=node.id))


def layout_page(root: DocumentNode, folds: dict[str, Fold] | None = None) -> PageLayout:
    """Lay out the subtree rooted at ``root`` honoring per-node fold states."""
    w = _Writer()
    _write_node(w, root, folds or {}, top=True)
    return w.layout()


def layout_outline(doc: Document) -> PageLayout:
    """Lay out the document preamble followed by every heading line."""
    w = _Writer()
    for block in doc.preamble:
        _write_block(w, block, None)

    def walk(nodes: tuple[DocumentNode, ...]) -> None:
        for node in nodes:
            if node.is_speaker_notes:
                continue
            _write_heading(w, node, top=node.depth == 1)
            walk(node.children)

    walk(doc.nodes)
    return w.layout()


def render_plain(node: DocumentNode) -> str:
    """Full text of a subtree without headings markup, used for notes."""
    out = io.StringIO()
    for block in node.body:
        if isinstance(block, TextBlock):
            out.write(_line(block.text))
        elif isinstance(block, ListBlock):
            for item in block.items:
                out.write(_line(f"- {item}"))
        elif isinstance(block, CodeBlock):
            out.write(_line(block.source))
    for child in node.children:
        out.write(_line(child.title))
        out.write(render_plain(child))
    return out.getvalue()
