"""Tests for tree navigation (pre-order, siblings, ancestors)."""

from epresent.core.tree.navigation import OutlineIndex, iter_preorder
from epresent.models.node import Document


def test_preorder_visits_parents_before_children(nested: Document) -> None:
    titles = [n.title for n in iter_preorder(nested.nodes)]
    assert titles == ["Intro", "Details", "More", "Part 2", "Deep", "Deeper"]


def test_siblings_of_first_and_last_child(nested: Document) -> None:
    index = OutlineIndex(nested)
    details, more = nested.nodes[0].children
    assert index.next_sibling(details) is more
    assert index.previous_sibling(details) is None
    assert index.next_sibling(more) is None
    assert index.next_sibling(nested.nodes[0]) is nested.nodes[1]


def test_outline_search_respects_predicate(nested: Document) -> None:
    index = OutlineIndex(nested)
    more = nested.nodes[0].children[1]
    assert index.next_in_outline(more, lambda n: n.depth == 1) is nested.nodes[1]
    assert index.previous_in_outline(nested.nodes[1], lambda n: True) is more
    deeper = nested.nodes[1].children[0].children[0]
    assert index.next_in_outline(deeper, lambda n: True) is None


def test_ancestors_and_top_level(nested: Document) -> None:
    index = OutlineIndex(nested)
    deeper = nested.nodes[1].children[0].children[0]
    assert [a.title for a in index.ancestors(deeper)] == ["Part 2", "Deep"]
    assert index.top_level(deeper) is nested.nodes[1]
    assert index.top_level(nested.nodes[0]) is nested.nodes[0]
