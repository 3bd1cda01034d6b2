"""animoji - turn a still image into a looping animated GIF."""

__version__: str = "0.1.0"

# Public re-exports for convenience ---------------------------------------------------

from .animation import Animation, Frame, assemble, frame_delay
from .color import hsv_to_rgb, rgb_to_hsv
from .compositor import compose, render_frame
from .config import AnimationRequest, EffectConfig
from .effects import EFFECT_FUNCTIONS, Effect, apply_effect, parse_effects
from .errors import (
    AnimojiError,
    DecodeError,
    EncodeError,
    ProcessingError,
    ShapeError,
    ValidationError,
)
from .palette import Palette, build_palette, quantize
from .pipeline import generate_animation
from .sampling import OutOfBounds, resize

__all__ = [
    "EFFECT_FUNCTIONS",
    "Animation",
    "AnimationRequest",
    "AnimojiError",
    "DecodeError",
    "Effect",
    "EffectConfig",
    "EncodeError",
    "Frame",
    "OutOfBounds",
    "Palette",
    "ProcessingError",
    "ShapeError",
    "ValidationError",
    "apply_effect",
    "assemble",
    "build_palette",
    "compose",
    "frame_delay",
    "generate_animation",
    "hsv_to_rgb",
    "parse_effects",
    "quantize",
    "render_frame",
    "resize",
    "rgb_to_hsv",
]
