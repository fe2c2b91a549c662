"""Timed slide-in reveal of a page."""

import time
from collections.abc import Callable, Iterator

from loguru import logger

from epresent.config import SLIDE_IN, PresentationConfig
from epresent.models.node import DocumentNode


def slide_in_steps(node: DocumentNode, config: PresentationConfig) -> int:
    """Number of frames to play for ``node``; 0 when it does not slide in."""
    if not node.flag(SLIDE_IN):
        return 0
    value = node.metadata[SLIDE_IN].strip()
    if value.isdigit() and int(value) > 0:
        return int(value)
    return config.slide_in_steps


def slide_in_offsets(steps: int, width: int) -> Iterator[int]:
    """Left offsets of each frame, ending flush at 0."""
    for step in range(steps, 0, -1):
        yield (step - 1) * width // steps


def play_slide_in(
    steps: int,
    width: int,
    draw: Callable[[int], None],
    *,
    delay: float,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Draw ``steps`` frames sliding the page in from the right.

    Each frame is followed by a blocking sleep of ``delay`` seconds. There is
    no way to cancel playback part way through.

    Returns:
        The number of frames drawn.
    """
    frames = 0
    for offset in slide_in_offsets(steps, width):
        draw(offset)
        sleep(delay)
        frames += 1
    logger.debug("Slide-in played {} frames", frames)
    return frames
