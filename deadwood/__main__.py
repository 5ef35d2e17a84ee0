"""
Run Deadwood at the terminal.

Usage:
    python -m deadwood 3 --seed 7
"""

import sys

from .interface.cli import main

if __name__ == "__main__":
    sys.exit(main())
