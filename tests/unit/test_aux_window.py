"""Tests for the auxiliary window manager."""

from pathlib import Path

import pytest

from epresent.core.aux_window import (
    AuxWindowManager,
    compute_indicators,
    parse_size,
    strip_link,
)
from epresent.models.node import DocumentNode
from epresent.models.state import IndicatorKind, PresentationState
from tests.unit.fakes import FakeDisplay, FakePlayer, FakeViewerFactory


def _manager(
    tmp_path: Path, node: DocumentNode, *, pages: int = 1
) -> tuple[AuxWindowManager, FakeDisplay, FakeViewerFactory, FakePlayer]:
    display = FakeDisplay(space=40)
    viewers = FakeViewerFactory(pages=pages)
    player = FakePlayer()
    state = PresentationState(frame_level=1, current_node=node)
    return AuxWindowManager(state, display, viewers, player, base_dir=tmp_path), display, viewers, player


def _node(**metadata: str) -> DocumentNode:
    return DocumentNode(id="0", title="Slide", depth=1, metadata=metadata)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("fig.pdf", "fig.pdf"),
        ("[[fig.pdf]]", "fig.pdf"),
        ("[[file:img/fig.png][The figure]]", "img/fig.png"),
        ("  [[file:a.pdf]] ", "a.pdf"),
    ],
)
def test_strip_link(raw: str, expected: str) -> None:
    assert strip_link(raw) == expected


def test_parse_size_ignores_invalid_values() -> None:
    assert parse_size("12") == 12
    assert parse_size("big") is None
    assert parse_size("0") is None
    assert parse_size(None) is None


def test_show_missing_file_raises_and_stays_closed(tmp_path: Path) -> None:
    manager, display, _viewers, _player = _manager(tmp_path, _node())
    with pytest.raises(FileNotFoundError):
        manager.show_file("fig.pdf", "below", 10)
    assert manager.state.aux_window_open is False
    assert display.splits == []


def test_show_file_uses_page_metadata(tmp_path: Path) -> None:
    (tmp_path / "fig.pdf").write_bytes(b"%PDF")
    node = _node(SHOW_FILE="[[file:fig.pdf]]", SHOW_BELOW="t", SHOW_SIZE="12")
    manager, display, viewers, _player = _manager(tmp_path, node)

    path = manager.show_file()

    assert path == tmp_path / "fig.pdf"
    assert display.splits == [("below", 12)]
    assert viewers.opened[0].fits == ["width"]
    assert manager.state.aux_window_open
    assert manager.state.aux_target == path
    assert display.focus_calls == 1


def test_show_file_defaults_to_half_the_space_on_the_right(tmp_path: Path) -> None:
    (tmp_path / "fig.png").write_bytes(b"\x89PNG")
    manager, display, viewers, _player = _manager(tmp_path, _node())
    manager.show_file("fig.png")
    assert display.splits == [("right", 20)]
    assert viewers.opened[0].fits == ["height"]


def test_repeated_show_advances_multi_page_file(tmp_path: Path) -> None:
    (tmp_path / "deck.pdf").write_bytes(b"%PDF")
    manager, display, viewers, _player = _manager(tmp_path, _node(SHOW_FILE="deck.pdf"), pages=3)
    manager.show_file()
    manager.show_file()
    assert len(display.splits) == 1
    assert viewers.opened[0].current_page() == 2
    manager.advance_or_show_file()
    assert viewers.opened[0].current_page() == 3


def test_advance_or_show_opens_when_closed(tmp_path: Path) -> None:
    (tmp_path / "deck.pdf").write_bytes(b"%PDF")
    manager, display, _viewers, _player = _manager(tmp_path, _node(SHOW_FILE="deck.pdf"))
    manager.advance_or_show_file()
    assert manager.state.aux_window_open
    assert len(display.splits) == 1


def test_failed_viewer_keeps_previous_window(tmp_path: Path) -> None:
    (tmp_path / "a.pdf").write_bytes(b"%PDF")
    (tmp_path / "b.pdf").write_bytes(b"%PDF")
    manager, display, viewers, _player = _manager(tmp_path, _node())
    manager.show_file("a.pdf")
    viewers.fail = True
    with pytest.raises(FileNotFoundError):
        manager.show_file("b.pdf")
    assert manager.state.aux_window_open is True
    assert manager.state.aux_target == tmp_path / "a.pdf"
    assert display.open_handles == {1}


def test_close_is_idempotent(tmp_path: Path) -> None:
    (tmp_path / "fig.pdf").write_bytes(b"%PDF")
    manager, display, _viewers, _player = _manager(tmp_path, _node(SHOW_FILE="fig.pdf"))
    manager.close_aux_window()
    manager.show_file()
    manager.close_aux_window()
    manager.close_aux_window()
    assert manager.state.aux_window_open is False
    assert display.open_handles == set()


def test_page_settle_auto_shows_file(tmp_path: Path) -> None:
    (tmp_path / "fig.pdf").write_bytes(b"%PDF")
    manager, display, _viewers, _player = _manager(
        tmp_path, _node(SHOW_FILE="fig.pdf", SHOW_AUTO="t")
    )
    manager.on_page_settled()
    assert manager.state.aux_window_open
    manager.state.current_node = _node()
    manager.on_page_settled()
    assert manager.state.aux_window_open is False
    assert display.open_handles == set()


def test_show_video_passes_mute(tmp_path: Path) -> None:
    (tmp_path / "clip.mp4").write_bytes(b"\x00")
    manager, _display, _viewers, player = _manager(
        tmp_path, _node(SHOW_VIDEO="clip.mp4", MUTE="t")
    )
    manager.show_video()
    assert player.played == [(tmp_path / "clip.mp4", True)]


def test_show_video_without_metadata_raises(tmp_path: Path) -> None:
    manager, _display, _viewers, player = _manager(tmp_path, _node())
    with pytest.raises(FileNotFoundError):
        manager.show_video()
    assert player.played == []


def test_indicators_for_file_and_video() -> None:
    node = _node(SHOW_FILE="a.pdf", SHOW_VIDEO="b.mp4")
    kinds = [i.kind for i in compute_indicators(node, enabled=True)]
    assert kinds == [IndicatorKind.FILE, IndicatorKind.VIDEO]
    assert compute_indicators(node, enabled=False) == ()
    auto = _node(SHOW_FILE="a.pdf", SHOW_AUTO="t")
    assert compute_indicators(auto, enabled=True) == ()
    assert compute_indicators(_node(), enabled=True) == ()
