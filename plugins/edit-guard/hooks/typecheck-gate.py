#!/usr/bin/env python3
"""
PostToolUse hook: Run the TypeScript compiler after Write/Edit/MultiEdit
on .ts/.tsx/.js/.jsx files and block when it reports type errors.

Exit 0 on pass (or when the check cannot run), 1 on type errors.
"""
import sys
from pathlib import Path

# Make the edit_guard package importable when run straight from the plugin
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from edit_guard.hooks import typecheck_gate_main


def main():
    sys.exit(typecheck_gate_main())


if __name__ == "__main__":
    main()
