"""Quantised frames and their assembly into an animation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .color import round_half_up
from .errors import ValidationError
from .palette import Palette, dequantize


@dataclass(frozen=True, eq=False)
class Frame:
    """One quantised frame.

    Attributes:
        indices: ``(h, w)`` uint8 palette indices, read-only
        delay_cs: Display duration in hundredths of a second
    """

    indices: np.ndarray
    delay_cs: int

    def __post_init__(self) -> None:
        if self.indices.ndim != 2:
            raise ValueError(f"indices must be 2-D, got shape {self.indices.shape}")
        if self.delay_cs < 0:
            raise ValueError(f"delay_cs must be >= 0, got {self.delay_cs}")
        indices = np.array(self.indices, dtype=np.uint8, copy=True)
        indices.setflags(write=False)
        object.__setattr__(self, "indices", indices)

    @property
    def size(self) -> tuple[int, int]:
        """(width, height)"""
        return self.indices.shape[1], self.indices.shape[0]

    def to_rgba(self, palette: Palette) -> np.ndarray:
        return dequantize(self.indices, palette)


@dataclass
class Animation:
    """Ordered frames sharing one palette, ready for encoding."""

    frames: list[Frame]
    palette: Palette
    loop: int = 0  # 0 = loop forever
    reversed_order: bool = field(default=False)

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def size(self) -> tuple[int, int]:
        if not self.frames:
            return 0, 0
        return self.frames[0].size

    @property
    def durations_cs(self) -> list[int]:
        return [frame.delay_cs for frame in self.frames]

    @property
    def durations_ms(self) -> list[int]:
        """Per-frame durations in milliseconds (Pillow's unit)."""
        return [frame.delay_cs * 10 for frame in self.frames]

    def reversed(self) -> Animation:
        """New animation with the frame order reversed; frames are shared."""
        return Animation(
            frames=list(reversed(self.frames)),
            palette=self.palette,
            loop=self.loop,
            reversed_order=not self.reversed_order,
        )


def frame_delay(rate: int) -> int:
    """Per-frame delay in hundredths of a second for ``rate`` frames per second.

    Raises:
        ValidationError: If rate is not positive
    """
    if rate <= 0:
        raise ValidationError(f"Frame rate must be positive, got {rate}", context={"rate": rate})
    return round_half_up(100.0 / rate)


def assemble(frames: Iterable[Frame], palette: Palette, reverse: bool = False) -> Animation:
    """Collect frames in generation order, optionally reversing the sequence."""
    animation = Animation(frames=list(frames), palette=palette)
    if reverse:
        animation = animation.reversed()
    return animation
