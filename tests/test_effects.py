"""Tests for animoji.effects module."""

import math

import numpy as np
import pytest

from animoji.effects import (
    EFFECT_FUNCTIONS,
    Effect,
    apply_effect,
    cycle_angle,
    hue,
    hue_shift,
    kaleidoscope,
    parse_effects,
    pixelate,
    pixelate_block_size,
    ripple,
    rotate,
    rotation_angle,
    tint,
    vibes,
    zoom,
    zoom_factor,
)
from animoji.errors import ShapeError, ValidationError
from conftest import quadrant_image, solid_image

RED = (255, 0, 0, 255)


def _pixel(image, x, y):
    return tuple(int(c) for c in image[y, x])


class TestEffectRegistry:
    """Tests for the Effect enum and name parsing."""

    def test_every_effect_has_a_function_and_description(self):
        """Test that the effect mapping is complete."""
        assert set(EFFECT_FUNCTIONS) == set(Effect)
        for effect in Effect:
            assert effect.description

    def test_command_line_names(self):
        """Test the names accepted on the command line."""
        assert [e.value for e in Effect] == [
            "360",
            "hue",
            "zoom",
            "pixelate",
            "tint-rgb",
            "vibes",
            "kaleidoscope",
            "ripple",
        ]

    def test_parse_effects_keeps_order_and_duplicates(self):
        """Test that parsing keeps order and repeated effects."""
        assert parse_effects(["ripple", "360", "ripple"]) == [
            Effect.RIPPLE,
            Effect.ROTATE,
            Effect.RIPPLE,
        ]

    def test_parse_effects_accepts_members(self):
        """Test that Effect members pass through parsing."""
        assert parse_effects([Effect.HUE, "zoom"]) == [Effect.HUE, Effect.ZOOM]

    def test_parse_effects_unknown_name(self):
        """Test that an unknown name raises ValidationError."""
        with pytest.raises(ValidationError, match="Unknown effect: sparkle"):
            parse_effects(["hue", "sparkle"])

    def test_apply_effect_rejects_zero_frames(self, quadrants):
        """Test that frame_count must be positive."""
        with pytest.raises(ValidationError, match="Number of frames must be positive"):
            apply_effect(Effect.HUE, quadrants, 0, 0)


class TestSchedules:
    """Tests for the per-frame parameter schedules."""

    def test_cycle_angle(self):
        """Test the per-frame angle of a full cycle."""
        assert cycle_angle(0, 12) == 0.0
        assert cycle_angle(3, 12) == pytest.approx(math.pi / 2)

    def test_rotation_direction(self):
        """Test that direction -1 turns anticlockwise."""
        assert rotation_angle(1, 4, -1) == pytest.approx(-math.pi / 2)

    def test_hue_shift(self):
        """Test the hue shift in degrees for a frame."""
        assert hue_shift(3, 12) == pytest.approx(90.0)

    def test_zoom_factor_range(self):
        """Test that zoom runs from 1x to 6x."""
        assert zoom_factor(0, 12) == pytest.approx(1.0)
        assert zoom_factor(11, 12) == pytest.approx(6.0)
        assert zoom_factor(0, 1) == pytest.approx(1.0)

    def test_pixelate_block_size_range(self):
        """Test that blocks grow from 1 to a quarter of the shorter side."""
        assert pixelate_block_size(64, 64, 0, 12) == pytest.approx(1.0)
        assert pixelate_block_size(64, 64, 11, 12) == pytest.approx(16.0)
        # Limited by the shorter side
        assert pixelate_block_size(64, 32, 11, 12) == pytest.approx(8.0)


class TestPurity:
    """Effects are deterministic and never modify their input."""

    @pytest.mark.parametrize("effect", list(Effect))
    def test_input_untouched_and_repeatable(self, effect):
        """Test that each effect leaves its input alone and is deterministic."""
        image = quadrant_image(16)
        before = image.copy()

        first = apply_effect(effect, image, 2, 5)
        second = apply_effect(effect, image, 2, 5)

        assert np.array_equal(image, before)
        assert np.array_equal(first, second)
        assert first.shape == image.shape
        assert first.dtype == np.uint8
        assert first is not image


class TestPeriodicity:
    """Cyclic effects come back to their first frame after frame_count frames."""

    @pytest.mark.parametrize("effect_fn", [hue, tint])
    @pytest.mark.parametrize("frame_count", [4, 12])
    def test_colour_cycle_period(self, gradient_image, effect_fn, frame_count):
        """Test that frame N of N equals frame 0 for hue and tint-rgb."""
        assert np.array_equal(
            effect_fn(gradient_image, frame_count, frame_count),
            effect_fn(gradient_image, 0, frame_count),
        )

    def test_rotation_period(self, quadrants):
        """Test that a full turn matches frame 0 apart from float noise on colour edges."""
        full_turn = rotate(quadrants, 12, 12)
        start = rotate(quadrants, 0, 12)

        differs = np.any(full_turn != start, axis=2)
        assert differs.sum() < 32
        # sin(2*pi) is not exactly zero, so a few coordinates truncate one pixel
        # lower; that only shows on the image border and the quadrant boundary
        for y, x in zip(*np.nonzero(differs)):
            assert x in (0, 8) or y in (0, 8)


class TestRotate:
    """Tests for the 360 effect."""

    def test_first_frame_is_identity(self, quadrants):
        """Test that the first frame is an unchanged copy."""
        assert np.array_equal(rotate(quadrants, 0, 12), quadrants)

    def test_quarter_turn_clockwise(self, quadrants):
        """Test a clockwise quarter turn."""
        result = rotate(quadrants, 1, 4)
        # Top-left red quadrant moves to the top-right
        assert _pixel(result, 12, 3) == RED
        assert _pixel(result, 3, 3) != RED

    def test_quarter_turn_anticlockwise(self, quadrants):
        """Test an anticlockwise quarter turn."""
        result = rotate(quadrants, 1, 4, direction=-1)
        # Top-left red quadrant moves to the bottom-left
        assert _pixel(result, 3, 12) == RED
        assert _pixel(result, 12, 3) != RED

    def test_corners_become_transparent(self, quadrants):
        """Test that pixels rotated in from outside are transparent."""
        result = rotate(quadrants, 1, 8)
        assert _pixel(result, 0, 0)[3] == 0
        assert _pixel(result, 8, 8)[3] == 255

    def test_non_square_rejected(self):
        """Test that rotate needs a square image."""
        with pytest.raises(ShapeError, match="image must be square"):
            rotate(solid_image(20, 10, RED), 1, 4)


class TestHue:
    """Tests for the hue effect."""

    @pytest.mark.parametrize(
        "frame_index,expected",
        [
            (0, (255, 0, 0)),
            (1, (128, 255, 0)),
            (2, (0, 255, 255)),
            (3, (128, 0, 255)),
        ],
    )
    def test_red_square_over_four_frames(self, red_square, frame_index, expected):
        """Test hue shifts of a red square over four frames."""
        result = hue(red_square, frame_index, 4)
        assert (result[..., :3] == expected).all()
        assert (result[..., 3] == 255).all()

    def test_alpha_preserved(self):
        """Test that hue keeps alpha."""
        image = solid_image(4, 4, (0, 0, 255, 42))
        result = hue(image, 1, 3)
        assert (result[..., 3] == 42).all()

    def test_greys_unchanged(self):
        """Test that achromatic pixels are unaffected by hue."""
        image = solid_image(4, 4, (90, 90, 90, 255))
        assert np.array_equal(hue(image, 5, 12), image)


class TestZoom:
    """Tests for the zoom effect."""

    def test_first_frame_is_identity(self, gradient_image):
        """Test that the first frame is an unchanged copy."""
        assert np.array_equal(zoom(gradient_image, 0, 12), gradient_image)

    def test_last_frame_magnifies_centre(self):
        """Test that the last frame only shows the centre pixels."""
        ys, xs = np.mgrid[0:12, 0:12]
        image = np.zeros((12, 12, 4), dtype=np.uint8)
        image[..., 0] = xs
        image[..., 1] = ys
        image[..., 3] = 255

        result = zoom(image, 11, 12)
        assert set(np.unique(result[..., 0]).tolist()) <= {5, 6}
        assert set(np.unique(result[..., 1]).tolist()) <= {5, 6}
        assert (result[..., 3] == 255).all()


class TestPixelate:
    """Tests for the pixelate effect."""

    def test_first_frame_is_identity(self, gradient_image):
        """Test that the first frame is an unchanged copy."""
        assert np.array_equal(pixelate(gradient_image, 0, 12), gradient_image)

    def test_checkerboard_averages_to_grey(self, checkerboard):
        """Test 2x2 blocks of a checkerboard averaging to grey."""
        result = pixelate(checkerboard, 1, 2)
        assert (result == (127, 127, 127, 255)).all()

    def test_fractional_block_size(self):
        """Test block boundaries for a non-integer block size."""
        ys, xs = np.mgrid[0:10, 0:10]
        image = np.zeros((10, 10, 4), dtype=np.uint8)
        image[..., 0] = xs
        image[..., 3] = 255

        # block size 1.75: blocks start at 0, 1, 3, 5, 7, 8
        result = pixelate(image, 1, 3)
        assert result[0, :, 0].tolist() == [0, 1, 1, 3, 3, 5, 5, 7, 8, 8]
        assert result[9, :, 0].tolist() == [0, 1, 1, 3, 3, 5, 5, 7, 8, 8]

    def test_blocks_are_uniform(self, gradient_image):
        """Test that every block is a single colour."""
        result = pixelate(gradient_image, 11, 12)
        # block size 8 on a 32x32 image
        for by in range(0, 32, 8):
            for bx in range(0, 32, 8):
                block = result[by : by + 8, bx : bx + 8].reshape(-1, 4)
                assert (block == block[0]).all()


class TestTint:
    """Tests for the tint-rgb effect."""

    def test_first_frame_blends_red(self):
        """Test that frame 0 blends red at half opacity."""
        image = solid_image(4, 4, (0, 0, 0, 200))
        result = tint(image, 0, 3)
        assert (result == (127, 0, 0, 200)).all()

    def test_second_of_three_blends_green(self):
        """Test that frame 1 of 3 blends green."""
        image = solid_image(4, 4, (0, 0, 0, 255))
        result = tint(image, 1, 3)
        assert (result == (0, 127, 0, 255)).all()


class TestVibes:
    """Tests for the vibes effect."""

    def test_quarter_colours_on_black(self):
        """Test the four quarter tints on black."""
        image = solid_image(8, 8, (0, 0, 0, 255))
        result = vibes(image, 0, 4)

        assert _pixel(result, 0, 0) == (127, 10, 73, 255)
        assert _pixel(result, 7, 0) == (127, 127, 0, 255)
        assert _pixel(result, 0, 7) == (25, 127, 25, 255)
        assert _pixel(result, 7, 7) == (0, 100, 127, 255)

    def test_colours_rotate_each_frame(self):
        """Test that quarter colours move on each frame."""
        image = solid_image(8, 8, (0, 0, 0, 255))
        result = vibes(image, 1, 4)
        assert _pixel(result, 0, 0) == (127, 127, 0, 255)
        assert _pixel(result, 7, 7) == (127, 10, 73, 255)

    def test_odd_dimensions_cover_every_pixel(self):
        """Test that odd sizes leave no pixel untinted."""
        image = solid_image(7, 5, (0, 0, 0, 255))
        result = vibes(image, 0, 4)
        assert (result[..., :3].sum(axis=2) > 0).all()


class TestKaleidoscope:
    """Tests for the kaleidoscope effect."""

    def test_out_of_image_source_is_transparent(self, quadrants):
        """Test that mirrored sources outside the image are transparent."""
        result = kaleidoscope(quadrants, 0, 12)
        # Left-edge pixel on the centre row mirrors to x = 16, outside the image
        assert _pixel(result, 0, 8) == (0, 0, 0, 0)

    def test_centre_maps_to_itself(self, quadrants):
        """Test that the centre pixel maps onto itself."""
        result = kaleidoscope(quadrants, 0, 12)
        assert _pixel(result, 8, 8) == _pixel(quadrants, 8, 8)

    def test_uses_only_source_colours(self, quadrants):
        """Test that kaleidoscope only copies existing pixels."""
        result = kaleidoscope(quadrants, 3, 12)
        allowed = {_pixel(quadrants, x, y) for x in (0, 15) for y in (0, 15)}
        allowed.add((0, 0, 0, 0))
        seen = {tuple(int(c) for c in px) for px in result.reshape(-1, 4)}
        assert seen <= allowed


class TestRipple:
    """Tests for the ripple effect."""

    @pytest.mark.parametrize("frame_index", range(6))
    def test_never_transparent_on_opaque_input(self, gradient_image, frame_index):
        """Test that ripple clamps instead of leaving gaps."""
        result = ripple(gradient_image, frame_index, 6)
        assert (result[..., 3] == 255).all()

    def test_solid_image_unchanged(self, red_square):
        """Test that a solid image is unchanged by ripple."""
        assert np.array_equal(ripple(red_square, 2, 12), red_square)
