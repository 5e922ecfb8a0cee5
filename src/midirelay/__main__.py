"""Main entry point for midirelay."""

from midirelay.cli import cli

if __name__ == "__main__":
    cli()
