"""Page navigation over the heading tree."""

from collections.abc import Callable

from loguru import logger

from epresent.config import HIDE, STEPWISE, VISIBILITY, VISIBLE_BY_DEFAULT, PresentationConfig
from epresent.core.frame_level import is_page_root
from epresent.core.masking import recompute_masks, set_page_src_visibility
from epresent.core.tree.layout import PageLayout, layout_outline, layout_page
from epresent.core.tree.navigation import OutlineIndex
from epresent.errors import NotFoundError
from epresent.models.node import DocumentNode
from epresent.models.state import Fold, MaskRegion, PresentationState

Step = Callable[[DocumentNode], DocumentNode | None]


def child_fold(child: DocumentNode, *, stepwise: bool) -> Fold:
    """Initial fold of a page root's child when the page is entered."""
    if stepwise or child.flag(HIDE):
        return Fold.HIDDEN
    if child.metadata.get(VISIBILITY, "").strip().lower() in VISIBLE_BY_DEFAULT:
        return Fold.EXPANDED
    return Fold.FOLDED


class PageNavigator:
    """Tracks the current page and moves between pages.

    A page root is any heading at or above the frame level. Headings titled
    "Title Page" only host introductory notes and are skipped whenever they
    would be displayed, in either direction, without being counted.
    """

    def __init__(
        self, index: OutlineIndex, frame_level: int, config: PresentationConfig
    ) -> None:
        self.index = index
        self.config = config
        self.state = PresentationState(
            frame_level=frame_level,
            current_node=index.doc.nodes[0],
            src_blocks_globally_visible=config.src_blocks_visible,
        )
        self.layout = PageLayout(text="", segments=())
        self.masks: tuple[MaskRegion, ...] = ()

    @property
    def frame_level(self) -> int:
        return self.state.frame_level

    def _is_page_root(self, node: DocumentNode) -> bool:
        return is_page_root(node, self.frame_level) and not node.is_speaker_notes

    def _step_forward(self, node: DocumentNode) -> DocumentNode | None:
        # Above the frame level this is the next heading in outline order; at the
        # frame level it is the next sibling, or the next page root after the last one.
        return self.index.next_in_outline(node, self._is_page_root)

    def _step_backward(self, node: DocumentNode) -> DocumentNode | None:
        return self.index.previous_in_outline(node, self._is_page_root)

    @staticmethod
    def _land(node: DocumentNode | None, step: Step) -> DocumentNode | None:
        while node is not None and node.is_title_page:
            node = step(node)
        return node

    def pages(self) -> list[DocumentNode]:
        """Every page in the order next() visits them from the top."""
        first = self.index.doc.nodes[0]
        node = self._land(first, self._step_forward) or first
        pages: list[DocumentNode] = []
        while node is not None:
            pages.append(node)
            node = self._land(self._step_forward(node), self._step_forward)
        return pages

    def _move_to_top(self) -> None:
        first = self.index.doc.nodes[0]
        self.state.current_node = self._land(first, self._step_forward) or first
        self.state.page_number = 1

    def _move_next(self, skip_counting: bool) -> bool:
        target = self._land(self._step_forward(self.state.current_node), self._step_forward)
        if target is None:
            logger.debug("Already on the last page")
            return False
        self.state.current_node = target
        if not skip_counting:
            self.state.page_number += 1
        return True

    def _move_previous(self, skip_counting: bool) -> bool:
        target = self._land(self._step_backward(self.state.current_node), self._step_backward)
        if target is None:
            logger.debug("Already on the first page")
            return False
        self.state.current_node = target
        if not skip_counting and self.state.page_number > 1:
            self.state.page_number -= 1
        return True

    def top(self) -> None:
        """Go to the first page."""
        self._move_to_top()
        self.settle()

    def next(self, skip_counting: bool = False) -> bool:
        """Go to the next page. Returns False, changing nothing, on the last page."""
        moved = self._move_next(skip_counting)
        if moved:
            self.settle()
        return moved

    def previous(self, skip_counting: bool = False) -> bool:
        """Go to the previous page. Returns False, changing nothing, on the first page."""
        moved = self._move_previous(skip_counting)
        if moved:
            self.settle()
        return moved

    def jump_to(self, n: int) -> None:
        """Go to page ``n``, or the last page if the document is shorter."""
        self._move_to_top()
        for _ in range(max(n, 1) - 1):
            if not self._move_next(False):
                break
        self.settle()

    def settle(self, *, entering: bool = True) -> None:
        """Narrow to the current page, set up folds and recompute masks.

        Page roots above the frame level show the whole outline instead.
        ``entering`` resets folds and code block visibility; a refresh keeps them.
        """
        state = self.state
        node = state.current_node
        state.outline_view = node.depth < self.frame_level
        if state.outline_view:
            state.folds = {}
            state.revealed = []
            self.layout = layout_outline(self.index.doc)
        else:
            if entering:
                stepwise = node.flag(STEPWISE)
                state.folds = {
                    child.id: child_fold(child, stepwise=stepwise) for child in node.children
                }
                state.revealed = []
                set_page_src_visibility(node, state.src_blocks_globally_visible)
            self.layout = layout_page(node, state.folds)
        self.masks = recompute_masks(self.layout, self.config)
        logger.debug(
            "Page {}: {!r} (depth {}, outline={})",
            state.page_number,
            node.title,
            node.depth,
            state.outline_view,
        )

    def _revealable(self) -> list[DocumentNode]:
        if self.state.outline_view:
            return []
        return [c for c in self.state.current_node.children if not c.is_speaker_notes]

    def next_subheading(self) -> DocumentNode:
        """Reveal the next child heading one step (hidden to heading, heading to full).

        Raises:
            NotFoundError: If every child is already fully shown.
        """
        folds = self.state.folds
        children = self._revealable()
        # Headings still hidden appear first, then folded ones expand.
        ordered = [c for c in children if folds.get(c.id) is Fold.HIDDEN] + [
            c for c in children if folds.get(c.id) is Fold.FOLDED
        ]
        if not ordered:
            msg = "No further subheading on this page"
            raise NotFoundError(msg)
        child = ordered[0]
        fold = folds[child.id]
        folds[child.id] = Fold.FOLDED if fold is Fold.HIDDEN else Fold.EXPANDED
        self.state.revealed.append((child.id, fold))
        self.settle(entering=False)
        return child

    def previous_subheading(self) -> DocumentNode:
        """Undo the most recent subheading reveal.

        Raises:
            NotFoundError: If nothing has been revealed on this page.
        """
        if not self.state.revealed:
            msg = "No revealed subheading on this page"
            raise NotFoundError(msg)
        node_id, fold = self.state.revealed.pop()
        self.state.folds[node_id] = fold
        self.settle(entering=False)
        return next(c for c in self.state.current_node.children if c.id == node_id)
