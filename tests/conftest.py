"""Shared fixtures: small synthetic RGBA images and their encoded forms."""

import io
import logging

import numpy as np
import pytest
from PIL import Image


def solid_image(width: int, height: int, color: tuple[int, int, int, int]) -> np.ndarray:
    """Create a ``(height, width, 4)`` uint8 image filled with one colour."""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[...] = color
    return image


def quadrant_image(size: int = 16) -> np.ndarray:
    """Square image with red, green, blue and white quadrants (TL, TR, BL, BR)."""
    image = np.zeros((size, size, 4), dtype=np.uint8)
    half = size // 2
    image[:half, :half] = (255, 0, 0, 255)
    image[:half, half:] = (0, 255, 0, 255)
    image[half:, :half] = (0, 0, 255, 255)
    image[half:, half:] = (255, 255, 255, 255)
    return image


def encode_png(image: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_square():
    """64x64 opaque solid red."""
    return solid_image(64, 64, (255, 0, 0, 255))


@pytest.fixture
def checkerboard():
    """8x8 single-pixel black/white checkerboard."""
    ys, xs = np.mgrid[0:8, 0:8]
    values = (((xs + ys) % 2) * 255).astype(np.uint8)
    image = np.zeros((8, 8, 4), dtype=np.uint8)
    image[..., 0] = values
    image[..., 1] = values
    image[..., 2] = values
    image[..., 3] = 255
    return image


@pytest.fixture
def gradient_image():
    """32x32 opaque gradient: red follows x, green follows y."""
    ys, xs = np.mgrid[0:32, 0:32]
    image = np.zeros((32, 32, 4), dtype=np.uint8)
    image[..., 0] = xs * 8
    image[..., 1] = ys * 8
    image[..., 2] = 128
    image[..., 3] = 255
    return image


@pytest.fixture
def quadrants():
    return quadrant_image(16)


@pytest.fixture
def png_file(tmp_path, quadrants):
    """Quadrant image saved as PNG."""
    path = tmp_path / "quadrants.png"
    path.write_bytes(encode_png(quadrants))
    return path


@pytest.fixture
def wide_png_file(tmp_path):
    """Non-square 20x10 PNG."""
    path = tmp_path / "wide.png"
    path.write_bytes(encode_png(solid_image(20, 10, (10, 20, 30, 255))))
    return path


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Drop the handlers setup_logging attaches to the root logger."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)
