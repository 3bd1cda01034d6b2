"""Shared utilities for CLI commands."""

import sys

import click

from ..errors import AnimojiError


def handle_animoji_error(command_name: str, error: AnimojiError) -> None:
    """Report a fatal animoji error on stderr and exit with status 1."""
    click.echo(f"❌ {command_name} failed: {error}", err=True)
    sys.exit(1)


def handle_validation_error(error: AnimojiError) -> None:
    """Report invalid options before any image work starts."""
    click.echo(f"❌ Invalid options: {error}", err=True)
    click.echo("💡 Run 'animoji effects' to list the available effects", err=True)
    sys.exit(1)


def handle_keyboard_interrupt(command_name: str) -> None:
    """Handle keyboard interrupt with consistent formatting."""
    click.echo(f"\n⏹️  {command_name} interrupted by user", err=True)
    sys.exit(1)


def format_rgba(color: tuple[int, int, int, int]) -> str:
    return "({}, {}, {}, {})".format(*color)
