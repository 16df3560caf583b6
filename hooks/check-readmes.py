#!/usr/bin/env python3
"""
Repository Policy - pre-commit Hook

Blocks the commit when any directory in the repository lacks a README
(README.md, README.txt, README.rst or README). Directories under .git and
hidden directories are ignored.

Usage:
    check-readmes.py [ROOT]     # ROOT defaults to the git root (or cwd)

Output (stdout):
    One line per directory, then either a pass summary or a failure
    banner listing every offending directory.

Exit codes:
    0 - all directories documented (commit proceeds)
    1 - violation or unreadable tree (commit blocked)
"""
import sys
from pathlib import Path

# Add lib to path
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

from hook_actions import run_readme_check
from hook_utils import early_hook_setup


def main() -> int:
    """Hook entry point."""
    project_dir, _, config, logger = early_hook_setup("pre-commit")

    if config and not config.is_hook_enabled('readme_check'):
        logger.debug("README check disabled by config")
        return 0

    root = sys.argv[1] if len(sys.argv) > 1 else project_dir
    return run_readme_check(root, logger)


if __name__ == '__main__':
    sys.exit(main())
