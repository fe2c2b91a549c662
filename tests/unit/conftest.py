"""Shared test fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from epresent.core.importer.json_reader import parse_document_data
from epresent.models.node import Document

DECK_SOURCE: dict[str, Any] = {
    "keywords": [["TITLE", "My Talk"]],
    "nodes": [
        {
            "title": "Title Page",
            "body": [
                {"type": "keyword", "key": "TITLE", "value": "My Talk"},
                {"type": "keyword", "key": "AUTHOR", "value": "Ada"},
            ],
            "children": [
                {
                    "title": "Speaker notes",
                    "body": [{"type": "text", "text": "Welcome everyone to the talk"}],
                }
            ],
        },
        {
            "title": "Intro",
            "todo": "TODO",
            "tags": ["draft"],
            "properties": {"SHOW_FILE": "fig.pdf"},
            "body": [
                {"type": "text", "text": "Hello world"},
                {"type": "list", "items": ["one", "two"]},
                {"type": "comment", "text": "remember the demo"},
            ],
            "children": [
                {
                    "title": "Speaker notes",
                    "body": [{"type": "text", "text": "Intro notes here"}],
                },
                {"title": "Detail A", "body": [{"type": "text", "text": "a text"}]},
                {
                    "title": "Detail B",
                    "properties": {"VISIBILITY": "all"},
                    "body": [{"type": "text", "text": "b text"}],
                },
            ],
        },
        {
            "title": "Code",
            "body": [
                {"type": "text", "text": "Some code"},
                {"type": "src", "language": "python", "source": "print(1)"},
                {"type": "src", "language": "sh", "source": "ls"},
            ],
        },
        {"title": "End", "properties": {"SHOW_VIDEO": "clip.mp4"}},
    ],
}

NESTED_SOURCE: dict[str, Any] = {
    "keywords": {"EPRESENT_FRAME_LEVEL": "2"},
    "nodes": [
        {
            "title": "Intro",
            "children": [{"title": "Details"}, {"title": "More"}],
        },
        {
            "title": "Part 2",
            "children": [{"title": "Deep", "children": [{"title": "Deeper"}]}],
        },
    ],
}


@pytest.fixture
def deck() -> Document:
    """A frame-level-1 deck: Title Page, Intro, Code, End."""
    return parse_document_data(DECK_SOURCE)


@pytest.fixture
def nested() -> Document:
    """A frame-level-2 document with headings down to depth 3."""
    return parse_document_data(NESTED_SOURCE)


@pytest.fixture
def deck_file(tmp_path: Path) -> Path:
    """The deck written to disk next to its auxiliary files."""
    path = tmp_path / "deck.json"
    path.write_text(json.dumps(DECK_SOURCE))
    (tmp_path / "fig.pdf").write_bytes(b"%PDF-1.4\n")
    (tmp_path / "clip.mp4").write_bytes(b"\x00")
    return path
