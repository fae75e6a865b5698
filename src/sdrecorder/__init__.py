"""SD card recorder for DFPlayer-style sound modules."""

__version__ = "1.0.0"


def main() -> None:
    """Main entry point for the sdrecorder CLI."""
    import sys

    from sdrecorder.cli import run

    sys.exit(run(sys.argv[1:]))
