"""Entry point for running talktome as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the talktome CLI application."""
    app()


if __name__ == "__main__":
    main()
