"""expo-screenshotter entrypoint."""

from expo_screenshotter.cli import app


def cli() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    cli()
