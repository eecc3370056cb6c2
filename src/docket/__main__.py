"""Allow running as ``python -m docket``."""

from docket.cli.app import app

if __name__ == "__main__":
    app()
