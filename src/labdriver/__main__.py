"""Main entry point for ``python -m labdriver``."""

from labdriver.cli.main import app


def main():
    """Run the labdriverctl command-line interface."""
    app()


if __name__ == "__main__":
    main()
