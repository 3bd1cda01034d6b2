"""Configuration settings for animoji."""

import os
from dataclasses import dataclass, field

from .errors import ValidationError


@dataclass
class EffectConfig:
    """Constants shared by the effect library and the palette builder."""

    # Zoom interpolates linearly between these factors across the animation
    ZOOM_MIN: float = 1.0
    ZOOM_MAX: float = 6.0

    # Number of mirrored wedges in the kaleidoscope
    KALEIDOSCOPE_SEGMENTS: int = 8

    # Ripple displacement in pixels and radial frequency (radians per pixel)
    RIPPLE_AMPLITUDE: float = 5.0
    RIPPLE_FREQUENCY: float = 0.1

    # Opacity of the tint layer in tint-rgb and vibes
    BLEND_OPACITY: float = 0.5

    # Highlighter colours for vibes: pink, yellow, lime, cyan
    VIBES_COLORS: list[tuple[int, int, int]] | None = None

    # Largest pixelate block is min(width, height) / PIXELATE_GRID
    PIXELATE_GRID: int = 4

    # Palette sampling stride (both axes) and size cap
    PALETTE_STRIDE: int = 4
    PALETTE_MAX_COLORS: int = 256

    def __post_init__(self) -> None:
        if self.VIBES_COLORS is None:
            self.VIBES_COLORS = [
                (255, 20, 147),
                (255, 255, 0),
                (50, 255, 50),
                (0, 200, 255),
            ]

        if self.ZOOM_MIN <= 0 or self.ZOOM_MAX < self.ZOOM_MIN:
            raise ValueError(
                f"Zoom range must satisfy 0 < ZOOM_MIN <= ZOOM_MAX, got {self.ZOOM_MIN}..{self.ZOOM_MAX}"
            )

        if self.KALEIDOSCOPE_SEGMENTS <= 0:
            raise ValueError(
                f"KALEIDOSCOPE_SEGMENTS must be positive, got {self.KALEIDOSCOPE_SEGMENTS}"
            )

        if not 0.0 <= self.BLEND_OPACITY <= 1.0:
            raise ValueError(
                f"BLEND_OPACITY must be between 0 and 1, got {self.BLEND_OPACITY}"
            )

        if len(self.VIBES_COLORS) != 4:
            raise ValueError(
                f"VIBES_COLORS needs one colour per quarter, got {len(self.VIBES_COLORS)}"
            )

        if self.PIXELATE_GRID <= 0:
            raise ValueError(f"PIXELATE_GRID must be positive, got {self.PIXELATE_GRID}")

        if self.PALETTE_STRIDE <= 0:
            raise ValueError(f"PALETTE_STRIDE must be positive, got {self.PALETTE_STRIDE}")

        # GIF colour tables hold at most 256 entries
        if not 1 <= self.PALETTE_MAX_COLORS <= 256:
            raise ValueError(
                f"PALETTE_MAX_COLORS must be between 1 and 256, got {self.PALETTE_MAX_COLORS}"
            )


@dataclass
class CLIDefaults:
    """Default values for CLI options with environment variable overrides."""

    # Override with: ANIMOJI_FRAMES
    FRAMES: int = 12

    # Frames per second. Override with: ANIMOJI_RATE
    RATE: int = 6

    # Target width in pixels, 0 keeps the source size. Override with: ANIMOJI_RESIZE
    RESIZE: int = 0

    # Override with: ANIMOJI_LOG_LEVEL
    LOG_LEVEL: str = "WARNING"

    def __post_init__(self) -> None:
        """Apply environment variable overrides after initialization."""
        env_overrides = {
            "FRAMES": ("ANIMOJI_FRAMES", int),
            "RATE": ("ANIMOJI_RATE", int),
            "RESIZE": ("ANIMOJI_RESIZE", int),
            "LOG_LEVEL": ("ANIMOJI_LOG_LEVEL", str),
        }

        for attr_name, (env_var_name, cast) in env_overrides.items():
            env_value = os.getenv(env_var_name)
            if env_value:
                try:
                    setattr(self, attr_name, cast(env_value))
                except ValueError as e:
                    raise ValueError(
                        f"Invalid value for {env_var_name}: {env_value!r}"
                    ) from e

        self.LOG_LEVEL = self.LOG_LEVEL.upper()


@dataclass
class AnimationRequest:
    """Validated parameter bundle for one animation run.

    Validation happens here as well as in the CLI because library callers
    build requests directly.
    """

    effects: list = field(default_factory=list)
    frame_count: int = 12
    rate: int = 6
    reverse: bool = False
    resize_width: int = 0
    rotation_direction: int = 1
    workers: int = 1

    def __post_init__(self) -> None:
        # Import here to avoid circular imports
        from .effects import parse_effects

        if isinstance(self.effects, str):
            self.effects = [self.effects]
        self.effects = parse_effects(self.effects)

        if not isinstance(self.frame_count, int) or self.frame_count <= 0:
            raise ValidationError(
                f"Number of frames must be positive, got {self.frame_count}",
                context={"frame_count": self.frame_count},
            )

        if not isinstance(self.rate, int) or self.rate <= 0:
            raise ValidationError(
                f"Frame rate must be positive, got {self.rate}",
                context={"rate": self.rate},
            )

        if not isinstance(self.resize_width, int) or self.resize_width < 0:
            raise ValidationError(
                f"Resize width must be non-negative, got {self.resize_width}",
                context={"resize_width": self.resize_width},
            )

        if self.rotation_direction not in (1, -1):
            raise ValidationError(
                f"Rotation direction must be 1 or -1, got {self.rotation_direction}",
                context={"rotation_direction": self.rotation_direction},
            )

        if not isinstance(self.workers, int) or self.workers < 1:
            raise ValidationError(
                f"Worker count must be at least 1, got {self.workers}",
                context={"workers": self.workers},
            )


# Default configuration instances
DEFAULT_EFFECT_CONFIG = EffectConfig()
DEFAULT_CLI_DEFAULTS = CLIDefaults()
