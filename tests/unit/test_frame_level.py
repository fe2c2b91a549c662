"""Tests for resolving the page-granularity depth."""

import pytest

from epresent.core.frame_level import is_page_root, parse_frame_level, resolve_frame_level
from epresent.errors import ConfigParseError
from epresent.models.node import Document, DocumentNode

NODE = DocumentNode(id="0", title="x", depth=1)


def _doc(*keywords: tuple[str, str]) -> Document:
    return Document(nodes=(NODE,), keywords=keywords)


def test_default_frame_level_is_one() -> None:
    assert resolve_frame_level(_doc()) == 1


def test_directive_sets_frame_level(nested: Document) -> None:
    assert resolve_frame_level(nested) == 2


def test_first_directive_wins() -> None:
    doc = _doc(("EPRESENT_FRAME_LEVEL", "3"), ("EPRESENT_FRAME_LEVEL", "2"))
    assert resolve_frame_level(doc) == 3


@pytest.mark.parametrize("value", ["two", "", "0", "-1", "1.5"])
def test_malformed_directive_falls_back_to_default(value: str) -> None:
    assert resolve_frame_level(_doc(("EPRESENT_FRAME_LEVEL", value))) == 1


def test_parse_frame_level_raises_on_garbage() -> None:
    with pytest.raises(ConfigParseError):
        parse_frame_level("deep")
    assert parse_frame_level(" 4 ") == 4


def test_shallower_nodes_are_page_roots() -> None:
    assert is_page_root(DocumentNode(id="0", title="a", depth=1), 2)
    assert is_page_root(DocumentNode(id="0", title="a", depth=2), 2)
    assert not is_page_root(DocumentNode(id="0", title="a", depth=3), 2)
