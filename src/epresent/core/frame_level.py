"""Resolve the heading depth that makes a page."""

from loguru import logger

from epresent.config import DEFAULT_FRAME_LEVEL, FRAME_LEVEL_KEYWORD
from epresent.errors import ConfigParseError
from epresent.models.node import Document, DocumentNode


def parse_frame_level(value: str) -> int:
    """Parse a frame-level directive value.

    Raises:
        ConfigParseError: If the value is not a positive integer.
    """
    try:
        level = int(value.strip())
    except ValueError as e:
        msg = f"{FRAME_LEVEL_KEYWORD} must be an integer, got {value!r}"
        raise ConfigParseError(msg) from e
    if level < 1:
        msg = f"{FRAME_LEVEL_KEYWORD} must be at least 1, got {level}"
        raise ConfigParseError(msg)
    return level


def resolve_frame_level(doc: Document) -> int:
    """Return the page-granularity depth declared by the document, default 1."""
    value = doc.keyword(FRAME_LEVEL_KEYWORD)
    if value is None:
        return DEFAULT_FRAME_LEVEL
    try:
        return parse_frame_level(value)
    except ConfigParseError as e:
        logger.warning("{}; using frame level {}", e, DEFAULT_FRAME_LEVEL)
        return DEFAULT_FRAME_LEVEL


def is_page_root(node: DocumentNode, frame_level: int) -> bool:
    """Nodes at or above the frame level each start their own page."""
    return node.depth <= frame_level
