"""Per-frame pixel transforms.

Every effect is a pure function ``(image, frame_index, frame_count) -> image``
over ``(h, w, 4)`` uint8 RGBA arrays. The only inputs besides the image are
the frame index and frame count, so the same arguments always produce the
same output. Effects never modify their input.

The set of effects is closed: :class:`Effect` enumerates them and
:data:`EFFECT_FUNCTIONS` maps each member to its implementation.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from enum import Enum

import numpy as np

from .color import hsv_to_rgb, hsv_to_rgb_array, rgb_to_hsv_array
from .config import DEFAULT_EFFECT_CONFIG
from .errors import ShapeError, ValidationError
from .sampling import OutOfBounds, destination_grid, sample


class Effect(Enum):
    """Available effects, valued by their command-line name."""

    ROTATE = "360"
    HUE = "hue"
    ZOOM = "zoom"
    PIXELATE = "pixelate"
    TINT = "tint-rgb"
    VIBES = "vibes"
    KALEIDOSCOPE = "kaleidoscope"
    RIPPLE = "ripple"

    @property
    def description(self) -> str:
        return EFFECT_DESCRIPTIONS[self]


EFFECT_DESCRIPTIONS: dict[Effect, str] = {
    Effect.ROTATE: "Rotate image 360 degrees (square images only)",
    Effect.HUE: "Cycle through the hue range",
    Effect.ZOOM: "Zoom into the centre, up to 6x",
    Effect.PIXELATE: "Gradually pixelate down to a 4x4 grid",
    Effect.TINT: "Blend a 50% colour layer cycling through the spectrum",
    Effect.VIBES: "Rotate highlighter tints across the four image quarters",
    Effect.KALEIDOSCOPE: "Rotating 8-segment mirrored kaleidoscope",
    Effect.RIPPLE: "Ripple wave distortion emanating from the centre",
}


# ---------------------------------------------------------------------------
# Parameter schedules
# ---------------------------------------------------------------------------


def progress(frame_index: int, frame_count: int) -> float:
    """Linear progress 0..1 across the animation (0 for single-frame runs)."""
    if frame_count == 1:
        return 0.0
    return frame_index / (frame_count - 1)


def cycle_angle(frame_index: int, frame_count: int) -> float:
    """Angle in radians for frame ``frame_index`` of a full turn."""
    return frame_index * 2.0 * math.pi / frame_count


def rotation_angle(frame_index: int, frame_count: int, direction: int = 1) -> float:
    """Rotation for ``frame_index``; direction 1 is clockwise, -1 anticlockwise."""
    return cycle_angle(frame_index, frame_count) * direction


def hue_shift(frame_index: int, frame_count: int) -> float:
    """Hue offset in degrees for ``frame_index``."""
    return frame_index * 360.0 / frame_count


def zoom_factor(frame_index: int, frame_count: int) -> float:
    cfg = DEFAULT_EFFECT_CONFIG
    return cfg.ZOOM_MIN + (cfg.ZOOM_MAX - cfg.ZOOM_MIN) * progress(frame_index, frame_count)


def pixelate_block_size(width: int, height: int, frame_index: int, frame_count: int) -> float:
    """Block edge length, growing from 1 to ``min(width, height) / 4``."""
    grid = DEFAULT_EFFECT_CONFIG.PIXELATE_GRID
    max_block = min(width / grid, height / grid)
    return 1.0 + (max_block - 1.0) * progress(frame_index, frame_count)


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


def rotate(
    image: np.ndarray, frame_index: int, frame_count: int, direction: int = 1
) -> np.ndarray:
    """Rotate a square image about its centre.

    Raises:
        ShapeError: If the image is not square
    """
    height, width = image.shape[:2]
    if width != height:
        raise ShapeError(
            f"image must be square (got {width}x{height})",
            context={"width": width, "height": height},
        )

    angle = rotation_angle(frame_index, frame_count, direction)
    center = width / 2.0
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    xs, ys = destination_grid(height, width)
    dx = xs - center
    dy = ys - center

    # Inverse rotation maps each destination pixel back into the source
    sx = dx * cos_a + dy * sin_a + width / 2.0
    sy = -dx * sin_a + dy * cos_a + height / 2.0

    outside = (sx < 0) | (sx >= width) | (sy < 0) | (sy >= height)
    sx = np.where(outside, -1.0, sx)
    sy = np.where(outside, -1.0, sy)

    return sample(image, sx, sy, OutOfBounds.TRANSPARENT)


def hue(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Shift every pixel's hue by ``frame_index * 360 / frame_count`` degrees."""
    shift = hue_shift(frame_index, frame_count)

    h, s, v = rgb_to_hsv_array(image[..., :3])
    h = np.fmod(h + shift, 360.0)
    h = np.where(h < 0, h + 360.0, h)

    result = np.empty_like(image)
    result[..., :3] = hsv_to_rgb_array(h, s, v)
    result[..., 3] = image[..., 3]
    return result


def zoom(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Magnify the centre of the image, from 1x on the first frame to 6x on the last."""
    factor = zoom_factor(frame_index, frame_count)
    if factor <= 1.0:
        return image.copy()

    height, width = image.shape[:2]
    region_w = width / factor
    region_h = height / factor
    min_x = width / 2.0 - region_w / 2.0
    min_y = height / 2.0 - region_h / 2.0

    xs, ys = destination_grid(height, width)
    sx = min_x + (xs / width) * region_w
    sy = min_y + (ys / height) * region_h

    return sample(image, sx, sy, OutOfBounds.TRANSPARENT)


def pixelate(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Replace square blocks with their mean colour; blocks grow each frame.

    Block boundaries fall at ``int(k * block_size)``; the last row and column
    of blocks are cut off at the image edge. Means use integer division.
    """
    height, width = image.shape[:2]
    block = pixelate_block_size(width, height, frame_index, frame_count)
    if block <= 1.0:
        return image.copy()

    blocks_x = math.ceil(width / block)
    blocks_y = math.ceil(height / block)
    starts_x = np.trunc(np.arange(blocks_x) * block).astype(np.int64)
    starts_y = np.trunc(np.arange(blocks_y) * block).astype(np.int64)
    lengths_x = np.diff(np.append(starts_x, width))
    lengths_y = np.diff(np.append(starts_y, height))

    sums = np.add.reduceat(image.astype(np.uint64), starts_y, axis=0)
    sums = np.add.reduceat(sums, starts_x, axis=1)
    counts = (lengths_y[:, np.newaxis] * lengths_x[np.newaxis, :]).astype(np.uint64)
    means = (sums // counts[..., np.newaxis]).astype(np.uint8)

    return np.repeat(np.repeat(means, lengths_y, axis=0), lengths_x, axis=1)


def _blend(region: np.ndarray, color: tuple[int, int, int]) -> np.ndarray:
    """Overlay a solid colour at the configured opacity, truncating; alpha kept."""
    opacity = DEFAULT_EFFECT_CONFIG.BLEND_OPACITY
    tint = np.array(color, dtype=np.float64)

    blended = region.copy()
    mixed = region[..., :3].astype(np.float64) * (1.0 - opacity) + tint * opacity
    blended[..., :3] = np.trunc(mixed).astype(np.uint8)
    return blended


def tint(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Blend a fully saturated colour whose hue cycles once over the animation."""
    color = hsv_to_rgb(hue_shift(frame_index, frame_count), 1.0, 1.0)
    return _blend(image, color)


def vibes(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Tint each quarter with a highlighter colour; colours rotate every frame."""
    colors = DEFAULT_EFFECT_CONFIG.VIBES_COLORS
    height, width = image.shape[:2]
    half_w = width // 2
    half_h = height // 2

    # (y0, y1, x0, x1) for top-left, top-right, bottom-left, bottom-right
    quarters = [
        (0, half_h, 0, half_w),
        (0, half_h, half_w, width),
        (half_h, height, 0, half_w),
        (half_h, height, half_w, width),
    ]

    result = image.copy()
    for quarter, (y0, y1, x0, x1) in enumerate(quarters):
        color = colors[(frame_index + quarter) % len(colors)]
        result[y0:y1, x0:x1] = _blend(image[y0:y1, x0:x1], color)
    return result


def kaleidoscope(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Mirror one rotating wedge of the image into eight segments."""
    segments = DEFAULT_EFFECT_CONFIG.KALEIDOSCOPE_SEGMENTS
    height, width = image.shape[:2]
    cx = width / 2.0
    cy = height / 2.0
    rotation = cycle_angle(frame_index, frame_count)
    span = 2.0 * math.pi / segments
    half_span = math.pi / segments

    xs, ys = destination_grid(height, width)
    dx = xs - cx
    dy = ys - cy
    angle = np.arctan2(dy, dx) + rotation
    distance = np.sqrt(dx * dx + dy * dy)

    folded = np.fmod(angle, span)
    folded = np.where(folded < 0, folded + span, folded)
    folded = np.where(folded > half_span, span - folded, folded)

    src_angle = folded - rotation
    sx = cx + distance * np.cos(src_angle)
    sy = cy + distance * np.sin(src_angle)

    return sample(image, sx, sy, OutOfBounds.TRANSPARENT)


def ripple(image: np.ndarray, frame_index: int, frame_count: int) -> np.ndarray:
    """Displace pixels radially along a travelling sine wave.

    Sources that fall outside the image are clamped to the nearest edge
    pixel, so ripple never leaves transparent gaps.
    """
    cfg = DEFAULT_EFFECT_CONFIG
    height, width = image.shape[:2]
    cx = width / 2.0
    cy = height / 2.0
    phase = cycle_angle(frame_index, frame_count)

    xs, ys = destination_grid(height, width)
    dx = xs - cx
    dy = ys - cy
    distance = np.sqrt(dx * dx + dy * dy)
    displacement = cfg.RIPPLE_AMPLITUDE * np.sin(distance * cfg.RIPPLE_FREQUENCY - phase)
    angle = np.arctan2(dy, dx)

    displaced = distance + displacement
    sx = cx + displaced * np.cos(angle)
    sy = cy + displaced * np.sin(angle)

    return sample(image, sx, sy, OutOfBounds.CLAMP)


EffectFunction = Callable[..., np.ndarray]

EFFECT_FUNCTIONS: dict[Effect, EffectFunction] = {
    Effect.ROTATE: rotate,
    Effect.HUE: hue,
    Effect.ZOOM: zoom,
    Effect.PIXELATE: pixelate,
    Effect.TINT: tint,
    Effect.VIBES: vibes,
    Effect.KALEIDOSCOPE: kaleidoscope,
    Effect.RIPPLE: ripple,
}


def parse_effects(names: Iterable[str | Effect]) -> list[Effect]:
    """Convert effect names (or members) into :class:`Effect` members.

    Raises:
        ValidationError: If a name is not a known effect
    """
    effects = []
    for name in names:
        if isinstance(name, Effect):
            effects.append(name)
            continue
        try:
            effects.append(Effect(name))
        except ValueError:
            raise ValidationError(
                f"Unknown effect: {name}",
                context={"effect": name, "valid": [e.value for e in Effect]},
            ) from None
    return effects


def apply_effect(
    effect: Effect,
    image: np.ndarray,
    frame_index: int,
    frame_count: int,
    direction: int = 1,
) -> np.ndarray:
    """Run one effect for one frame."""
    if frame_count <= 0:
        raise ValidationError(
            f"Number of frames must be positive, got {frame_count}",
            context={"frame_count": frame_count},
        )

    func = EFFECT_FUNCTIONS[effect]
    if effect is Effect.ROTATE:
        return func(image, frame_index, frame_count, direction=direction)
    return func(image, frame_index, frame_count)
