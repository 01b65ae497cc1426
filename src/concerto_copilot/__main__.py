"""Entry point for running concerto_copilot as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the concerto-copilot CLI application."""
    app()


if __name__ == "__main__":
    main()
