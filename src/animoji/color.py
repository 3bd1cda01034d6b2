"""RGB <-> HSV conversion used by the hue and tint effects.

Hue is expressed in degrees [0, 360), saturation and value in [0, 1].
Conversions back to RGB round half away from zero, so the six primary and
secondary hues (0, 60, 120, 180, 240, 300) survive a round trip exactly.
Scalar and NumPy array forms share the same arithmetic.
"""

from __future__ import annotations

import math

import numpy as np


def round_half_up(value: float) -> int:
    """Round a non-negative float to the nearest integer, halves going up.

    Python's built-in ``round`` uses banker's rounding (``round(12.5) == 12``),
    which is not what frame delays, resize heights or colour channels expect.
    """
    floor = math.floor(value)
    return int(floor + 1) if value - floor >= 0.5 else int(floor)


def round_half_up_array(values: np.ndarray) -> np.ndarray:
    """Vectorised :func:`round_half_up`."""
    floor = np.floor(values)
    return np.where(values - floor >= 0.5, floor + 1.0, floor)


def rgb_to_hsv(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit RGB to (hue, saturation, value).

    Achromatic colours (all channels equal) get hue 0.
    """
    rf = r / 255.0
    gf = g / 255.0
    bf = b / 255.0

    max_c = max(rf, gf, bf)
    min_c = min(rf, gf, bf)
    delta = max_c - min_c

    v = max_c
    s = 0.0 if max_c == 0 else delta / max_c

    if delta == 0:
        h = 0.0
    elif max_c == rf:
        h = 60.0 * math.fmod((gf - bf) / delta + 6.0, 6.0)
    elif max_c == gf:
        h = 60.0 * ((bf - rf) / delta + 2.0)
    else:
        h = 60.0 * ((rf - gf) / delta + 4.0)

    if h < 0:
        h += 360.0

    return h, s, v


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[int, int, int]:
    """Convert (hue, saturation, value) to 8-bit RGB."""
    c = v * s
    x = c * (1.0 - abs(math.fmod(h / 60.0, 2.0) - 1.0))
    m = v - c

    if h < 60:
        rf, gf, bf = c, x, 0.0
    elif h < 120:
        rf, gf, bf = x, c, 0.0
    elif h < 180:
        rf, gf, bf = 0.0, c, x
    elif h < 240:
        rf, gf, bf = 0.0, x, c
    elif h < 300:
        rf, gf, bf = x, 0.0, c
    else:
        rf, gf, bf = c, 0.0, x

    return (
        round_half_up((rf + m) * 255.0),
        round_half_up((gf + m) * 255.0),
        round_half_up((bf + m) * 255.0),
    )


def rgb_to_hsv_array(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Array form of :func:`rgb_to_hsv` for an ``(..., 3)`` uint8 array."""
    rgb_f = rgb.astype(np.float64) / 255.0
    rf, gf, bf = rgb_f[..., 0], rgb_f[..., 1], rgb_f[..., 2]

    max_c = rgb_f.max(axis=-1)
    min_c = rgb_f.min(axis=-1)
    delta = max_c - min_c

    v = max_c
    s = np.where(max_c == 0, 0.0, delta / np.where(max_c == 0, 1.0, max_c))

    safe_delta = np.where(delta == 0, 1.0, delta)
    h_red = 60.0 * np.fmod((gf - bf) / safe_delta + 6.0, 6.0)
    h_green = 60.0 * ((bf - rf) / safe_delta + 2.0)
    h_blue = 60.0 * ((rf - gf) / safe_delta + 4.0)

    # Red wins ties with green, green wins ties with blue
    h = np.where(max_c == rf, h_red, np.where(max_c == gf, h_green, h_blue))
    h = np.where(delta == 0, 0.0, h)
    h = np.where(h < 0, h + 360.0, h)

    return h, s, v


def hsv_to_rgb_array(h: np.ndarray, s: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Array form of :func:`hsv_to_rgb`; returns an ``(..., 3)`` uint8 array."""
    h = np.asarray(h, dtype=np.float64)
    c = v * s
    x = c * (1.0 - np.abs(np.fmod(h / 60.0, 2.0) - 1.0))
    m = v - c
    zero = np.zeros_like(c)

    sectors = [h < 60, h < 120, h < 180, h < 240, h < 300]
    rf = np.select(sectors, [c, x, zero, zero, x], default=c)
    gf = np.select(sectors, [x, c, c, x, zero], default=zero)
    bf = np.select(sectors, [zero, zero, x, c, c], default=x)

    rgb = np.stack([rf + m, gf + m, bf + m], axis=-1) * 255.0
    return np.clip(round_half_up_array(rgb), 0, 255).astype(np.uint8)
