#!/usr/bin/env python3
"""
PostToolUse hook: Record every file Claude writes or edits in this session.

The Stop hook (edit-advisory.py) reads this log to decide whether to print
the error-handling self-check. Never blocks.
"""
import sys
from pathlib import Path

# Make the edit_guard package importable when run straight from the plugin
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from edit_guard.hooks import edit_tracker_main


def main():
    sys.exit(edit_tracker_main())


if __name__ == "__main__":
    main()
