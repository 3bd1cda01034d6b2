"""Inverse-mapping nearest-neighbour resampler.

Geometric effects describe, for every destination pixel, the floating-point
source coordinate it comes from. :func:`sample` truncates those coordinates
toward zero and copies the source pixel. What happens to coordinates that
land outside the source is an explicit per-effect choice: most effects leave
the destination pixel transparent, ripple and resize clamp to the edge.
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from .color import round_half_up
from .errors import ShapeError, ValidationError

logger = logging.getLogger(__name__)


class OutOfBounds(Enum):
    """What to do with a destination pixel whose source lies outside the image."""

    TRANSPARENT = "transparent"
    CLAMP = "clamp"


def destination_grid(height: int, width: int) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(xs, ys)`` float coordinate grids of shape ``(height, width)``."""
    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )
    return xs, ys


def sample(
    src: np.ndarray,
    sx: np.ndarray,
    sy: np.ndarray,
    out_of_bounds: OutOfBounds = OutOfBounds.TRANSPARENT,
) -> np.ndarray:
    """Nearest-neighbour sample ``src`` at the coordinates ``(sx, sy)``.

    Args:
        src: ``(h, w, 4)`` uint8 source image
        sx: Source x coordinate for each destination pixel
        sy: Source y coordinate for each destination pixel
        out_of_bounds: Policy for coordinates outside the source

    Returns:
        New ``sx.shape + (4,)`` uint8 image
    """
    src_h, src_w = src.shape[:2]
    ix = np.trunc(sx).astype(np.int64)
    iy = np.trunc(sy).astype(np.int64)

    if out_of_bounds is OutOfBounds.CLAMP:
        ix = np.clip(ix, 0, src_w - 1)
        iy = np.clip(iy, 0, src_h - 1)
        return src[iy, ix]

    dst = np.zeros(sx.shape + (4,), dtype=np.uint8)
    inside = (ix >= 0) & (ix < src_w) & (iy >= 0) & (iy < src_h)
    dst[inside] = src[iy[inside], ix[inside]]
    return dst


def resize(image: np.ndarray, target_width: int) -> np.ndarray:
    """Nearest-neighbour resize to ``target_width``, preserving aspect ratio.

    The target height is ``round(target_width * src_height / src_width)``,
    never less than one pixel.

    Raises:
        ShapeError: If the source has zero width or height
        ValidationError: If ``target_width`` is not positive
    """
    src_h, src_w = image.shape[:2]
    if src_w == 0 or src_h == 0:
        raise ShapeError(
            f"source image has zero dimensions (got {src_w}x{src_h})",
            context={"width": src_w, "height": src_h},
        )
    if target_width <= 0:
        raise ValidationError(
            f"Resize width must be positive, got {target_width}",
            context={"target_width": target_width},
        )

    target_height = max(1, round_half_up(target_width * src_h / src_w))
    scale_x = src_w / target_width
    scale_y = src_h / target_height

    ix = np.minimum(np.trunc(np.arange(target_width) * scale_x).astype(np.int64), src_w - 1)
    iy = np.minimum(np.trunc(np.arange(target_height) * scale_y).astype(np.int64), src_h - 1)

    logger.debug(f"Resizing {src_w}x{src_h} -> {target_width}x{target_height}")
    return image[iy[:, np.newaxis], ix[np.newaxis, :]]
