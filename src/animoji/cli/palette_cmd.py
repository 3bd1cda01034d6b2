"""Show the palette animoji would share across all frames of an image."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..errors import AnimojiError
from ..io import load_image
from ..palette import build_palette
from ..sampling import resize as resize_image
from .utils import format_rgba, handle_animoji_error


@click.command()
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--resize",
    type=int,
    default=0,
    help="Resize to this width first, as 'animate --resize' would (0 = no resize)",
)
@click.option(
    "--show",
    type=int,
    default=16,
    show_default=True,
    help="Number of palette entries to list",
)
def palette(image_path: Path, resize: int, show: int) -> None:
    """Summarise the shared palette built from IMAGE_PATH."""
    try:
        image = load_image(image_path)
        if resize > 0:
            image = resize_image(image, resize)
        shared = build_palette(image)
    except AnimojiError as e:
        handle_animoji_error("Palette", e)
        return

    console = Console()
    height, width = image.shape[:2]
    transparent = shared.transparent_index

    console.print(f"🖼️  Image: {image_path} ({width}x{height})")
    console.print(f"🎨 Palette entries: {len(shared)}")
    console.print(f"🫥 Transparent index: {transparent if transparent is not None else 'none'}")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Index", justify="right")
    table.add_column("RGBA", style="cyan")
    table.add_column("Swatch")

    for index, color in enumerate(shared.colors[: max(show, 0)]):
        r, g, b, _ = color
        table.add_row(str(index), format_rgba(color), f"[on rgb({r},{g},{b})]      [/]")

    console.print(table)
