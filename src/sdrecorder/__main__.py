"""Package entry point.

This module enables running the project with:

    python -m sdrecorder SOURCE TARGET
"""

from __future__ import annotations

from sdrecorder import main

if __name__ == "__main__":
    main()
