"""Console-script entry point for the animoji CLI."""

from .cli import main

__all__ = ["main"]

if __name__ == "__main__":
    main()
