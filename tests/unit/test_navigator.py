"""Tests for the page navigator."""

import pytest

from epresent.config import PresentationConfig
from epresent.core.importer.json_reader import parse_document_data
from epresent.core.navigator import PageNavigator
from epresent.core.tree.navigation import OutlineIndex
from epresent.errors import NotFoundError
from epresent.models.node import Document
from epresent.models.state import Fold
from epresent.terminal import apply_masks


def _navigator(doc: Document, frame_level: int = 1, **config: object) -> PageNavigator:
    return PageNavigator(OutlineIndex(doc), frame_level, PresentationConfig(**config))


def _visible(nav: PageNavigator) -> str:
    return apply_masks(nav.layout.text, nav.masks, color=False)


def test_top_skips_title_page_without_counting(deck: Document) -> None:
    nav = _navigator(deck)
    nav.top()
    assert nav.state.current_node.title == "Intro"
    assert nav.state.page_number == 1


def test_previous_into_leading_title_page_is_a_noop(deck: Document) -> None:
    nav = _navigator(deck)
    nav.top()
    assert nav.previous() is False
    assert nav.state.current_node.title == "Intro"
    assert nav.state.page_number == 1


def test_title_page_in_the_middle_is_skipped_both_ways() -> None:
    doc = parse_document_data(
        {"nodes": [{"title": "A"}, {"title": "Title page"}, {"title": "B"}]}
    )
    nav = _navigator(doc)
    nav.top()
    nav.next()
    assert (nav.state.current_node.title, nav.state.page_number) == ("B", 2)
    nav.previous()
    assert (nav.state.current_node.title, nav.state.page_number) == ("A", 1)


def test_next_at_last_page_changes_nothing(deck: Document) -> None:
    nav = _navigator(deck)
    nav.jump_to(3)
    assert nav.state.current_node.title == "End"
    masks = nav.masks
    assert nav.next() is False
    assert nav.state.current_node.title == "End"
    assert nav.state.page_number == 3
    assert nav.masks == masks


@pytest.mark.parametrize(("fixture", "frame_level"), [("deck", 1), ("nested", 2)])
def test_next_then_previous_returns_to_same_page(
    fixture: str, frame_level: int, request: pytest.FixtureRequest
) -> None:
    doc = request.getfixturevalue(fixture)
    nav = _navigator(doc, frame_level)
    nav.top()
    while True:
        node, number = nav.state.current_node, nav.state.page_number
        if not nav.next():
            break
        after = nav.state.current_node
        nav.previous()
        assert nav.state.current_node is node
        assert nav.state.page_number == number
        nav.next()
        assert nav.state.current_node is after
        assert nav.state.page_number >= 1


def test_frame_level_two_steps_into_children(nested: Document) -> None:
    nav = _navigator(nested, 2)
    nav.top()
    assert nav.state.current_node.title == "Intro"
    assert nav.state.outline_view
    assert "** Details" in nav.layout.text
    nav.next()
    assert nav.state.current_node.title == "Details"
    assert nav.state.page_number == 2
    assert not nav.state.outline_view


def test_last_child_continues_with_next_page_root(nested: Document) -> None:
    nav = _navigator(nested, 2)
    nav.jump_to(3)
    assert nav.state.current_node.title == "More"
    nav.next()
    assert nav.state.current_node.title == "Part 2"
    nav.next()
    assert nav.state.current_node.title == "Deep"
    assert nav.next() is False


def test_pages_lists_every_page_in_order(deck: Document, nested: Document) -> None:
    assert [n.title for n in _navigator(deck).pages()] == ["Intro", "Code", "End"]
    assert [n.title for n in _navigator(nested, 2).pages()] == [
        "Intro",
        "Details",
        "More",
        "Part 2",
        "Deep",
    ]


def test_jump_to_clamps_to_document(nested: Document) -> None:
    nav = _navigator(nested, 2)
    nav.jump_to(99)
    assert (nav.state.current_node.title, nav.state.page_number) == ("Deep", 5)
    nav.jump_to(0)
    assert (nav.state.current_node.title, nav.state.page_number) == ("Intro", 1)


def test_skip_counting_keeps_page_number(deck: Document) -> None:
    nav = _navigator(deck)
    nav.top()
    nav.next(skip_counting=True)
    assert (nav.state.current_node.title, nav.state.page_number) == ("Code", 1)
    nav.previous()
    assert (nav.state.current_node.title, nav.state.page_number) == ("Intro", 1)


def test_settle_folds_children_and_expands_visible_ones(deck: Document) -> None:
    nav = _navigator(deck)
    nav.top()
    notes, detail_a, detail_b = deck.nodes[1].children
    assert nav.state.folds == {
        notes.id: Fold.FOLDED,
        detail_a.id: Fold.FOLDED,
        detail_b.id: Fold.EXPANDED,
    }
    assert "a text" not in nav.layout.text
    assert "b text" in _visible(nav)


def test_code_blocks_hidden_on_entry_unless_configured(deck: Document) -> None:
    nav = _navigator(deck)
    nav.jump_to(2)
    assert _visible(nav) == "Code\nSome code\n"

    nav = _navigator(deck, src_blocks_visible=True)
    nav.jump_to(2)
    assert _visible(nav) == "Code\nSome code\nprint(1)\nls\n"


STEPWISE_DOC = {
    "nodes": [
        {
            "title": "Steps",
            "properties": {"STEPWISE": "t"},
            "children": [
                {"title": "First", "body": [{"type": "text", "text": "one"}]},
                {"title": "Second"},
            ],
        },
        {
            "title": "Hidden",
            "children": [{"title": "Secret", "properties": {"HIDE": "t"}}, {"title": "Open"}],
        },
    ]
}


def test_stepwise_reveals_headings_one_at_a_time() -> None:
    doc = parse_document_data(STEPWISE_DOC)
    nav = _navigator(doc)
    nav.top()
    assert _visible(nav) == "Steps\n"

    assert nav.next_subheading().title == "First"
    assert _visible(nav) == "Steps\nFirst\n"
    assert nav.next_subheading().title == "Second"
    assert _visible(nav) == "Steps\nFirst\nSecond\n"
    assert nav.next_subheading().title == "First"
    assert _visible(nav) == "Steps\nFirst\none\nSecond\n"

    nav.previous_subheading()
    nav.previous_subheading()
    assert _visible(nav) == "Steps\nFirst\n"


def test_hide_property_starts_child_hidden() -> None:
    doc = parse_document_data(STEPWISE_DOC)
    nav = _navigator(doc)
    nav.jump_to(2)
    assert _visible(nav) == "Hidden\nOpen\n"


def test_subheading_errors_when_nothing_left(deck: Document) -> None:
    nav = _navigator(deck)
    nav.jump_to(3)
    with pytest.raises(NotFoundError):
        nav.next_subheading()
    with pytest.raises(NotFoundError):
        nav.previous_subheading()
