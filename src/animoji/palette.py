"""Shared colour palette and nearest-colour quantisation.

One palette is built from the base image before any frame is rendered and
reused, unchanged, for every frame. Colours that effects introduce outside
the sampled set are mapped to the nearest palette entry.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import DEFAULT_EFFECT_CONFIG

RGBA = tuple[int, int, int, int]

FALLBACK_COLORS: tuple[RGBA, ...] = ((255, 255, 255, 255), (0, 0, 0, 255))

# Unique colours compared against the palette per batch
_QUANTIZE_CHUNK = 4096


@dataclass(frozen=True)
class Palette:
    """Ordered, deduplicated RGBA colours (at most 256, never empty)."""

    colors: tuple[RGBA, ...]

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("Palette must contain at least one color")
        if len(self.colors) > 256:
            raise ValueError(f"Palette holds at most 256 colors, got {len(self.colors)}")

    def __len__(self) -> int:
        return len(self.colors)

    def as_array(self) -> np.ndarray:
        """Palette as a ``(n, 4)`` uint8 array."""
        return np.array(self.colors, dtype=np.uint8).reshape(-1, 4)

    @property
    def transparent_index(self) -> int | None:
        """Index of the first fully transparent entry, if any."""
        for index, color in enumerate(self.colors):
            if color[3] == 0:
                return index
        return None

    def rgb_bytes(self) -> list[int]:
        """Flat ``[r, g, b, r, g, b, ...]`` list as expected by ``Image.putpalette``."""
        return [channel for color in self.colors for channel in color[:3]]


def build_palette(
    image: np.ndarray,
    stride: int = DEFAULT_EFFECT_CONFIG.PALETTE_STRIDE,
    max_colors: int = DEFAULT_EFFECT_CONFIG.PALETTE_MAX_COLORS,
) -> Palette:
    """Collect first-seen colours from a strided row-major scan of ``image``.

    Args:
        image: ``(h, w, 4)`` uint8 RGBA array
        stride: Sampling step along both axes
        max_colors: Scan stops once this many unique colours are found

    Returns:
        Palette in first-seen order, or black and white when the scan found nothing
    """
    if stride <= 0:
        raise ValueError(f"stride must be positive, got {stride}")

    samples = image[::stride, ::stride].reshape(-1, 4)
    if samples.shape[0] == 0:
        return Palette(FALLBACK_COLORS)

    unique_colors, first_seen = np.unique(samples, axis=0, return_index=True)
    order = np.argsort(first_seen, kind="stable")[:max_colors]

    colors = tuple(
        tuple(int(channel) for channel in unique_colors[i]) for i in order
    )
    return Palette(colors)  # type: ignore[arg-type]


def quantize(image: np.ndarray, palette: Palette) -> np.ndarray:
    """Map every pixel to the index of its nearest palette colour.

    Distance is squared Euclidean over RGBA; ties go to the lowest index.

    Returns:
        ``(h, w)`` uint8 array of palette indices
    """
    height, width = image.shape[:2]
    flat = image.reshape(-1, 4)
    if flat.shape[0] == 0:
        return np.zeros((height, width), dtype=np.uint8)

    unique_colors, inverse = np.unique(flat, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)

    palette_arr = palette.as_array().astype(np.int64)
    nearest = np.empty(unique_colors.shape[0], dtype=np.uint8)

    for start in range(0, unique_colors.shape[0], _QUANTIZE_CHUNK):
        chunk = unique_colors[start : start + _QUANTIZE_CHUNK].astype(np.int64)
        diff = chunk[:, np.newaxis, :] - palette_arr[np.newaxis, :, :]
        distances = np.einsum("ijk,ijk->ij", diff, diff)
        nearest[start : start + chunk.shape[0]] = np.argmin(distances, axis=1)

    return nearest[inverse].reshape(height, width)


def dequantize(indices: np.ndarray, palette: Palette) -> np.ndarray:
    """Expand a palette-index array back to RGBA."""
    return palette.as_array()[indices]
