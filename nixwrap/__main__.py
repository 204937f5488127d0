"""Main entry point for running nixwrap as a module.

Usage:
    python -m nixwrap install hello --dry-run
    python -m nixwrap installed
    python -m nixwrap channel list
"""

import sys

from nixwrap.cli import main


if __name__ == '__main__':
    sys.exit(main())
