"""Animate command: render a still image into a looping GIF."""

from pathlib import Path

import click

from ..config import DEFAULT_CLI_DEFAULTS, AnimationRequest
from ..errors import AnimojiError, ValidationError
from ..io import encode_animation, load_image, setup_logging
from ..pipeline import generate_animation
from .utils import handle_animoji_error, handle_keyboard_interrupt, handle_validation_error


@click.command()
@click.argument("effect_names", metavar="EFFECT...", nargs=-1, required=True)
@click.option(
    "--in",
    "-i",
    "input_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Input image file (PNG or JPEG, default: stdin)",
)
@click.option(
    "--out",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output GIF file (default: stdout)",
)
@click.option(
    "--frames",
    "-f",
    type=int,
    default=DEFAULT_CLI_DEFAULTS.FRAMES,
    show_default=True,
    help="Number of frames in the animation",
)
@click.option(
    "--rate",
    "-r",
    type=int,
    default=DEFAULT_CLI_DEFAULTS.RATE,
    show_default=True,
    help="Frame rate in frames per second",
)
@click.option("--reverse", is_flag=True, help="Reverse the order of frames")
@click.option(
    "--resize",
    type=int,
    default=DEFAULT_CLI_DEFAULTS.RESIZE,
    show_default=True,
    help="Resize to this width before animating, height scaled proportionally (0 = no resize)",
)
@click.option(
    "--anticlockwise",
    is_flag=True,
    help="Rotate anticlockwise instead of clockwise (360 effect)",
)
@click.option(
    "--workers",
    "-j",
    type=int,
    default=1,
    show_default=True,
    help="Number of worker processes used to render frames",
)
@click.option("--progress", is_flag=True, help="Show a progress bar on stderr")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_CLI_DEFAULTS.LOG_LEVEL,
    show_default=True,
    help="Logging verbosity (logs go to stderr)",
)
def animate(
    effect_names: tuple[str, ...],
    input_path: Path | None,
    output_path: Path | None,
    frames: int,
    rate: int,
    reverse: bool,
    resize: int,
    anticlockwise: bool,
    workers: int,
    progress: bool,
    log_level: str,
) -> None:
    """Apply one or more effects to an image and write an animated GIF.

    Effects are applied in the given order to every frame, each one
    working on the previous effect's output.

    \b
    Examples:
      animoji animate -i image.png -o output.gif --resize 128 360
      animoji animate -i image.png -o output.gif ripple tint-rgb zoom
      cat image.png | animoji animate hue > output.gif

    EFFECT: one of 360, hue, zoom, pixelate, tint-rgb, vibes, kaleidoscope, ripple
    """
    setup_logging(log_level)

    try:
        request = AnimationRequest(
            effects=list(effect_names),
            frame_count=frames,
            rate=rate,
            reverse=reverse,
            resize_width=resize,
            rotation_direction=-1 if anticlockwise else 1,
            workers=workers,
        )
    except ValidationError as e:
        handle_validation_error(e)
        return

    try:
        if input_path is None:
            image = load_image(click.get_binary_stream("stdin"))
        else:
            image = load_image(input_path)

        animation = generate_animation(image, request, progress=progress)

        if output_path is None:
            encode_animation(animation, click.get_binary_stream("stdout"))
        else:
            encode_animation(animation, output_path)
            click.echo(f"✅ Successfully created animated GIF: {output_path}")

    except KeyboardInterrupt:
        handle_keyboard_interrupt("Animation")
    except AnimojiError as e:
        handle_animoji_error("Animation", e)
