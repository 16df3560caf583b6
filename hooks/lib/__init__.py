"""
Repository Policy Hooks Library

Git lifecycle hooks that keep a repository documented and audited.
Blocks commits while any directory lacks a README, and records merges
into protected branches in merge.log.

Architecture:
- policy_checker.py: README policy over a directory tree
- merge_logger.py: Merge records and the append-only merge.log
- git_utils.py: Git operations (branch, HEAD, author)
- config.py: Configuration loading (global → project → local)
- logger.py: Structured JSON diagnostics
- hook_utils.py: Shared hook bootstrap

Usage:
    from policy_checker import check
    from merge_logger import record_if_protected, get_log_path
    from git_utils import read_merge_event

    result = check('/path/to/repo')
    if not result.passed:
        print(result.offenders)

    event = read_merge_event('/path/to/repo')
    if event:
        record_if_protected(event, get_log_path('/path/to/repo'))
"""

__version__ = "1.0.0"
