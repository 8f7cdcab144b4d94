"""Allow ``python -m kubenav``."""

from kubenav.cli import app

if __name__ == "__main__":
    app()
