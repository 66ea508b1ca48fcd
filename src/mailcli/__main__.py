"""Entry point for ``python -m mailcli``."""

from mailcli.cli.app import app


def main() -> None:
    """Run the mailcli command-line application."""
    app()


if __name__ == "__main__":
    main()
