"""Image decoding, GIF encoding, atomic writes and logging setup."""

from __future__ import annotations

import io
import logging
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from shutil import move
from typing import Any, BinaryIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from .animation import Animation
from .errors import DecodeError, EncodeError, error_context

logger = logging.getLogger(__name__)

SUPPORTED_INPUT_FORMATS = frozenset({"PNG", "JPEG"})

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "WARNING", log_file: Path | None = None) -> logging.Logger:
    """Set up logging for animoji.

    Log records go to stderr so that a GIF written to stdout stays clean.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives the same records

    Returns:
        The package logger
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    return logging.getLogger("animoji")


@contextmanager
def atomic_write(target_path: Path, mode: str = "wb"):
    """Context manager for atomic file writes using temporary files.

    Args:
        target_path: Final path where file should be written
        mode: File open mode

    Yields:
        File handle for writing
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode=mode, dir=target_path.parent, delete=False, suffix=f".tmp_{target_path.name}"
    ) as temp_file:
        try:
            yield temp_file
            temp_file.flush()
        except Exception:
            Path(temp_file.name).unlink(missing_ok=True)
            raise
    move(temp_file.name, target_path)


# Pillow modes holding 16- or 32-bit greyscale samples
_WIDE_GREY_MODES = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})


def image_from_pil(img: Image.Image) -> np.ndarray:
    """Convert a Pillow image to an ``(h, w, 4)`` uint8 RGBA array.

    16-bit greyscale samples keep their high byte. ``convert("RGBA")``
    would clip them to 255 instead of scaling.
    """
    if img.mode in _WIDE_GREY_MODES:
        samples = np.asarray(img).astype(np.int64)
        grey = np.clip(samples >> 8, 0, 255).astype(np.uint8)
        image = np.empty(grey.shape + (4,), dtype=np.uint8)
        image[..., :3] = grey[..., np.newaxis]
        image[..., 3] = 255
        return image
    return np.array(img.convert("RGBA"), dtype=np.uint8)


def load_image(source: Path | str | BinaryIO) -> np.ndarray:
    """Decode a PNG or JPEG image from a path or binary stream.

    Streams are read fully into memory first, so non-seekable input such as
    stdin works.

    Raises:
        DecodeError: If the source cannot be read or is not a PNG/JPEG image
    """
    label = str(source) if isinstance(source, (str, Path)) else "<stream>"

    with error_context("decode image", DecodeError, context={"source": label}, logger=logger):
        if isinstance(source, (str, Path)):
            stream: BinaryIO = open(Path(source), "rb")
        else:
            stream = io.BytesIO(source.read())

        with stream:
            try:
                with Image.open(stream) as img:
                    if img.format not in SUPPORTED_INPUT_FORMATS:
                        raise DecodeError(
                            f"unsupported image format: {img.format}",
                            context={"source": label, "format": img.format},
                        )
                    img.load()
                    image = image_from_pil(img)
            except UnidentifiedImageError as e:
                raise DecodeError(
                    f"failed to decode image: {e}", cause=e, context={"source": label}
                ) from e

    logger.info(f"Loaded {label}: {image.shape[1]}x{image.shape[0]}")
    return image


def to_pil_frames(animation: Animation) -> list[Image.Image]:
    """Paletted Pillow images for every frame, all carrying the shared palette."""
    palette_bytes = animation.palette.rgb_bytes()
    images = []
    for frame in animation.frames:
        width, height = frame.size
        img = Image.frombytes("P", (width, height), np.ascontiguousarray(frame.indices).tobytes())
        img.putpalette(palette_bytes)
        images.append(img)
    return images


def _gif_save_options(animation: Animation, frames: list[Image.Image]) -> dict[str, Any]:
    options: dict[str, Any] = {
        "format": "GIF",
        "save_all": True,
        "append_images": frames[1:],
        "duration": animation.durations_ms,
        "loop": animation.loop,
        "optimize": False,
    }
    transparent_index = animation.palette.transparent_index
    if transparent_index is not None:
        options["transparency"] = transparent_index
    return options


def encode_animation(animation: Animation, target: Path | str | BinaryIO) -> None:
    """Write ``animation`` as a looping GIF to a path or binary stream.

    Paths are written atomically; a failed encode leaves no partial file.

    Pillow merges a frame that is identical to the one before it into that
    frame and adds up their durations, so an animation that never changes
    (e.g. hue over a one-colour palette) is stored as a single frame with
    the total duration. No disposal method is set: transparent pixels of a
    frame show whatever the previous frame left there.

    Raises:
        EncodeError: If the animation is empty or writing fails
    """
    if not animation.frames:
        raise EncodeError("animation has no frames")

    label = str(target) if isinstance(target, (str, Path)) else "<stream>"
    with error_context("write GIF", EncodeError, context={"target": label}, logger=logger):
        frames = to_pil_frames(animation)
        options = _gif_save_options(animation, frames)

        if isinstance(target, (str, Path)):
            with atomic_write(Path(target)) as f:
                frames[0].save(f, **options)
        else:
            frames[0].save(target, **options)
            target.flush()

    logger.info(f"Wrote {len(animation)} frames to {label}")
