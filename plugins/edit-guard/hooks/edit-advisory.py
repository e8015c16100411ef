#!/usr/bin/env python3
"""
Stop hook: Remind Claude to review error handling in the backend and
database files it touched this session.

Prints a self-check to stdout when warranted. Always exits 0.
"""
import sys
from pathlib import Path

# Make the edit_guard package importable when run straight from the plugin
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from edit_guard.hooks import edit_advisory_main


def main():
    sys.exit(edit_advisory_main())


if __name__ == "__main__":
    main()
