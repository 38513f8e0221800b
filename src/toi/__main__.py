"""
Entry point for running Toi as a module.

Usage:
    python -m toi parse "1*2+3"
"""

import sys

from toi.cli import main

if __name__ == "__main__":
    sys.exit(main())
