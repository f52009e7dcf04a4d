"""Allow running treerm as ``python -m treerm``."""

from treerm.cli.main import app

if __name__ == "__main__":
    app()
