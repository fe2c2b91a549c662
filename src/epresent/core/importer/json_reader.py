"""Parse JSON outline files into a Document tree."""

import json
from pathlib import Path
from typing import Any

from epresent.errors import InvalidDocumentError
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


def _parse_block(raw: Any, *, where: str) -> Block:
    if not isinstance(raw, dict):
        msg = f"{where}: block must be an object, got {raw!r}"
        raise InvalidDocumentError(msg)
    kind = raw.get("type")
    try:
        if kind == "text":
            return TextBlock(text=raw["text"])
        if kind == "src":
            return CodeBlock(language=raw.get("language", ""), source=raw["source"])
        if kind == "drawer":
            return Drawer(name=raw["name"], lines=tuple(raw.get("lines", [])))
        if kind == "comment":
            return Comment(text=raw["text"])
        if kind == "keyword":
            return Keyword(key=raw["key"], value=raw.get("value", ""))
        if kind == "list":
            return ListBlock(items=tuple(raw["items"]))
    except KeyError as e:
        msg = f"{where}: {kind} block is missing {e.args[0]!r}"
        raise InvalidDocumentError(msg) from e
    msg = f"{where}: unknown block type {kind!r}"
    raise InvalidDocumentError(msg)


def _parse_node(raw: Any, *, depth: int, node_id: str) -> DocumentNode:
    if not isinstance(raw, dict) or not isinstance(raw.get("title"), str):
        msg = f"Node {node_id}: heading must be an object with a string title"
        raise InvalidDocumentError(msg)

    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        msg = f"Node {node_id}: properties must be an object"
        raise InvalidDocumentError(msg)

    return DocumentNode(
        id=node_id,
        title=raw["title"],
        depth=depth,
        todo=raw.get("todo"),
        tags=tuple(raw.get("tags", [])),
        metadata={str(k): str(v) for k, v in properties.items()},
        body=tuple(_parse_block(b, where=f"Node {node_id}") for b in raw.get("body", [])),
        children=tuple(
            _parse_node(child, depth=depth + 1, node_id=f"{node_id}/{i}")
            for i, child in enumerate(raw.get("children", []))
        ),
    )


def _parse_keywords(raw: Any) -> tuple[tuple[str, str], ...]:
    if isinstance(raw, dict):
        return tuple((str(k), str(v)) for k, v in raw.items())
    if isinstance(raw, list) and all(isinstance(p, list) and len(p) == 2 for p in raw):
        return tuple((str(k), str(v)) for k, v in raw)
    msg = f"keywords must be an object or a list of pairs, got {raw!r}"
    raise InvalidDocumentError(msg)


def parse_document_data(data: Any, *, source_path: str | None = None) -> Document:
    """Parse a decoded JSON outline into a Document.

    Args:
        data: Raw document data (as from a JSON outline file).
        source_path: Where the data came from, used to resolve relative files.

    Returns:
        The Document, with depths starting at 1 and path-style node ids.

    Raises:
        InvalidDocumentError: If the data is not a recognized outline.
    """
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        msg = "Not an outline document: expected an object with a 'nodes' list"
        raise InvalidDocumentError(msg)

    nodes = tuple(
        _parse_node(raw, depth=1, node_id=str(i)) for i, raw in enumerate(data["nodes"])
    )
    if not nodes:
        msg = "Document has no headings to present"
        raise InvalidDocumentError(msg)

    return Document(
        nodes=nodes,
        keywords=_parse_keywords(data.get("keywords", [])),
        preamble=tuple(_parse_block(b, where="Preamble") for b in data.get("preamble", [])),
        source_path=source_path,
    )


def read_document(path: Path) -> Document:
    """Read and parse a JSON outline file.

    Raises:
        InvalidDocumentError: If the file is not valid JSON or not an outline.
        FileNotFoundError: If the file does not exist.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"{path}: not a structured document ({e})"
        raise InvalidDocumentError(msg) from e
    return parse_document_data(data, source_path=str(path))
