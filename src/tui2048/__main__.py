"""Terminal 2048.

Run with: `python -m tui2048`
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
