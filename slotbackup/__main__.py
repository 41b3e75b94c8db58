"""Entry point for running via: python -m slotbackup <command>"""

import sys

from .app.cli import main

if __name__ == "__main__":
    sys.exit(main())
