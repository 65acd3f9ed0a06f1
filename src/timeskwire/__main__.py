"""Allow ``python -m timeskwire``."""

from timeskwire.cli import run

if __name__ == "__main__":
    run()
