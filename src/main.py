"""
rawsync - Workbook sheet reconciliation.

Keeps curated sheets in sync with their RAW refreshes.
"""

import sys
from rawsync.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
