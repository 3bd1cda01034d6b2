"""Frame composition: chain effects on the base image, then quantise."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import reduce

import numpy as np

from .animation import Frame
from .effects import Effect, apply_effect
from .errors import error_context
from .palette import Palette, quantize

logger = logging.getLogger(__name__)


def compose(
    base: np.ndarray,
    effects: Sequence[Effect],
    frame_index: int,
    frame_count: int,
    direction: int = 1,
) -> np.ndarray:
    """Apply ``effects`` in order, each consuming the previous result.

    Every effect sees the same frame index and frame count. An empty chain
    returns a copy of ``base``.
    """

    def step(image: np.ndarray, effect: Effect) -> np.ndarray:
        with error_context(
            f"apply effect {effect.value}",
            context={"effect": effect.value, "frame": frame_index},
            logger=logger,
        ):
            return apply_effect(effect, image, frame_index, frame_count, direction)

    return reduce(step, effects, base.copy())


def render_frame(
    base: np.ndarray,
    effects: Sequence[Effect],
    frame_index: int,
    frame_count: int,
    palette: Palette,
    delay_cs: int,
    direction: int = 1,
) -> Frame:
    """Compose one frame and quantise it against the shared palette."""
    composed = compose(base, effects, frame_index, frame_count, direction)
    indices = quantize(composed, palette)
    logger.debug(f"Rendered frame {frame_index + 1}/{frame_count}")
    return Frame(indices=indices, delay_cs=delay_cs)
