"""Visibility masking: decide what page text is hidden, styled or shown.

Masks are a pure function of the page layout and the config. Code block
visibility lives on each block's ``visible`` flag, so a recompute never
loses a toggle and toggling twice restores the original region set.
"""

from enum import Enum
from typing import Literal

from loguru import logger

from epresent.config import STYLED_KEYWORDS, PresentationConfig
from epresent.core.tree.layout import PageLayout, Segment, SegmentKind
from epresent.errors import NotFoundError
from epresent.models.node import CodeBlock, DocumentNode
from epresent.models.state import MaskKind, MaskRegion

HEADING_TOP_STYLE = "heading-top"
HEADING_NESTED_STYLE = "heading-nested"
BULLET_STYLE = "bullet"


class SrcToggle(Enum):
    """Requested code block state: force shown, force hidden, or invert."""

    SHOW = "show"
    HIDE = "hide"
    TOGGLE = "toggle"


def decide_src_visible(visible: bool, requested: SrcToggle) -> bool:
    """Return the new visibility of a code block.

    ======= ====== ====== ======
    current SHOW   HIDE   TOGGLE
    ======= ====== ====== ======
    shown   shown  hidden hidden
    hidden  shown  hidden shown
    ======= ====== ====== ======
    """
    if requested is SrcToggle.SHOW:
        return True
    if requested is SrcToggle.HIDE:
        return False
    return not visible


def _hidden(seg: Segment) -> MaskRegion:
    return MaskRegion(seg.start, seg.end, MaskKind.HIDDEN)


def _styled(seg: Segment, style: str) -> MaskRegion:
    return MaskRegion(seg.start, seg.end, MaskKind.STYLED, style)


def _regions_for(seg: Segment, config: PresentationConfig) -> list[MaskRegion]:
    kind = seg.kind
    if kind is SegmentKind.STARS:
        return [_hidden(seg)] if config.hide_stars else []
    if kind is SegmentKind.HEADING:
        if not config.hide_stars:
            return []
        return [_styled(seg, HEADING_TOP_STYLE if seg.top else HEADING_NESTED_STYLE)]
    if kind is SegmentKind.TODO:
        return [_hidden(seg)] if config.hide_todos else []
    if kind is SegmentKind.TAGS:
        return [_hidden(seg)] if config.hide_tags else []
    if kind in (SegmentKind.PROPERTIES, SegmentKind.DRAWER):
        return [_hidden(seg)] if config.hide_properties else []
    if kind in (SegmentKind.COMMENT, SegmentKind.SRC_DELIMITER):
        return [_hidden(seg)] if config.hide_comments else []
    if kind is SegmentKind.KEYWORD_PREFIX:
        return [_hidden(seg)] if config.hide_comments else []
    if kind is SegmentKind.KEYWORD_VALUE:
        style = STYLED_KEYWORDS.get(seg.key or "")
        if style is not None:
            return [_styled(seg, style)]
        return [_hidden(seg)] if config.hide_comments else []
    if kind is SegmentKind.BULLET:
        return [_styled(seg, BULLET_STYLE)] if config.style_bullets else []
    if kind is SegmentKind.SRC_BLOCK:
        return [_hidden(seg)] if seg.block is not None and not seg.block.visible else []
    if kind is SegmentKind.NOTES:
        return [_hidden(seg)]
    return []


def _merge(spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start < merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _subtract(region: MaskRegion, hidden: list[tuple[int, int]]) -> list[MaskRegion]:
    """Cut the hidden spans out of a styled region."""
    pieces: list[MaskRegion] = []
    cursor = region.start
    for start, end in hidden:
        if end <= cursor or start >= region.end:
            continue
        if start > cursor:
            pieces.append(MaskRegion(cursor, start, MaskKind.STYLED, region.style))
        cursor = max(cursor, end)
    if cursor < region.end:
        pieces.append(MaskRegion(cursor, region.end, MaskKind.STYLED, region.style))
    return pieces


def resolve_conflicts(regions: list[MaskRegion]) -> tuple[MaskRegion, ...]:
    """Make a region set consistent.

    Overlapping hidden regions are merged. Styled text under a hidden region
    is removed, so no hidden bound ever falls inside a styled region.
    """
    hidden = _merge([(r.start, r.end) for r in regions if r.kind is MaskKind.HIDDEN])
    result = [MaskRegion(s, e, MaskKind.HIDDEN) for s, e in hidden]
    for region in regions:
        if region.kind is MaskKind.STYLED:
            result.extend(_subtract(region, hidden))
    return tuple(sorted(set(result), key=lambda r: (r.start, r.end, r.kind.value, r.style or "")))


def recompute_masks(layout: PageLayout, config: PresentationConfig) -> tuple[MaskRegion, ...]:
    """Compute the full mask region set for a laid-out page from scratch."""
    regions: list[MaskRegion] = []
    for seg in layout.segments:
        regions.extend(_regions_for(seg, config))
    masks = resolve_conflicts(regions)
    logger.debug("Recomputed {} mask regions", len(masks))
    return masks


def src_block_span(layout: PageLayout, block: CodeBlock) -> tuple[int, int]:
    """Start and end offsets of a code block on the page."""
    for seg in layout.segments:
        if seg.kind is SegmentKind.SRC_BLOCK and seg.block is block:
            return seg.start, seg.end
    msg = "Code block is not on the current page"
    raise NotFoundError(msg)


def plan_src_toggle(
    layout: PageLayout,
    target: Literal["all"] | CodeBlock,
    requested: SrcToggle,
) -> list[tuple[CodeBlock, bool]]:
    """Decide the new visibility of every affected code block without applying it.

    Raises:
        NotFoundError: If the page has no code block, or ``target`` is not on it.
    """
    blocks = layout.code_blocks()
    if not blocks:
        msg = "No code block on this page"
        raise NotFoundError(msg)
    if isinstance(target, CodeBlock):
        src_block_span(layout, target)
        blocks = (target,)
    return [(b, decide_src_visible(b.visible, requested)) for b in blocks]


def toggle_src_blocks(
    layout: PageLayout,
    config: PresentationConfig,
    target: Literal["all"] | CodeBlock = "all",
    requested: SrcToggle = SrcToggle.TOGGLE,
) -> tuple[MaskRegion, ...]:
    """Show, hide or invert code blocks and return the updated masks.

    Nothing is changed when NotFoundError is raised.
    """
    plan = plan_src_toggle(layout, target, requested)
    for block, visible in plan:
        block.visible = visible
    logger.debug("Toggled {} code block(s) with {}", len(plan), requested.value)
    return recompute_masks(layout, config)


def set_page_src_visibility(root: DocumentNode, visible: bool) -> None:
    """Reset every code block under ``root`` to ``visible`` on page entry."""
    for block in root.code_blocks():
        block.visible = visible
