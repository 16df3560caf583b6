#!/usr/bin/env python3
"""
Repository Policy - post-merge Hook

Appends an audit block to merge.log in the repository root when a merge
lands on a protected branch (main or master). Other branches are ignored
silently.

Output:
    "📝 Merge into <branch> logged to merge.log" when a record is written

Design:
    - Never blocks: always exits 0, even if merge.log cannot be written
    - Context (branch, HEAD, author, subject) is read from git
"""
import sys
from pathlib import Path

# Add lib to path
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

from git_utils import read_merge_event
from hook_actions import run_merge_log
from hook_utils import early_hook_setup
from merge_logger import get_log_path


def main() -> int:
    """Hook entry point."""
    project_dir, _, config, logger = early_hook_setup("post-merge")

    try:
        if config and not config.is_hook_enabled('merge_log'):
            logger.debug("Merge log disabled by config")
            return 0

        event = read_merge_event(project_dir)
        if event is None:
            logger.debug("No current branch, merge not logged")
            return 0

        return run_merge_log(event, get_log_path(project_dir), logger)
    except Exception as e:
        # FAIL OPEN - a merge has already happened, never report failure
        logger.error("Unhandled error in post-merge hook", error=str(e))
        return 0


if __name__ == '__main__':
    sys.exit(main())
