"""CLI module for animoji commands.

This module re-exports all command functions so the entry point only needs
the ``main`` group, while each command lives in its own module.
"""

import click

from .. import __version__
from .animate_cmd import animate
from .effects_cmd import effects
from .palette_cmd import palette


@click.group()
@click.version_option(version=__version__, prog_name="animoji")
def main() -> None:
    """🎞️ animoji: turn a still image into an animated GIF."""
    pass


main.add_command(animate)
main.add_command(effects)
main.add_command(palette)

__all__ = [
    "animate",
    "effects",
    "main",
    "palette",
]
