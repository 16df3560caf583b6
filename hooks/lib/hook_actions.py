#!/usr/bin/env python3
"""
Hook actions shared by the git hooks and the CLI.

Each action prints human-readable output, records diagnostics through the
JSON logger, and returns the exit code the triggering caller should use:

- run_readme_check: 0 on pass, 1 on violation or unreadable tree (blocks commit)
- run_merge_log: always 0 (merge logging is best-effort, never blocks)
"""
import sys
from pathlib import Path
from typing import Union

from colors import bold, check_line, dim, error, success, warning
from errors import PolicyIOError, PolicyViolation
from logger import JsonLogger
from merge_logger import MergeEvent, record_if_protected
from policy_checker import DOC_FILENAMES, DirectoryEntry, enforce


def _plural(count: int) -> str:
    return "directory" if count == 1 else "directories"


def run_readme_check(root: Union[str, Path], logger: JsonLogger, quiet: bool = False) -> int:
    """
    Check README policy under root and print a report.

    Args:
        root: Directory to scan
        logger: Diagnostics logger
        quiet: Only print failing directories

    Returns:
        Exit code (0 pass, 1 blocked)
    """
    if not quiet:
        print(bold(f"📋 Checking README files under {root}"))

    def on_progress(entry: DirectoryEntry, ok: bool) -> None:
        if quiet and ok:
            return
        print(check_line(ok, entry.relative or "."))

    try:
        result = enforce(root, on_progress=on_progress)
    except PolicyIOError as e:
        print(error(f"❌ Cannot check {e.path}: {e.reason}"), file=sys.stderr)
        logger.error("README check aborted", path=e.path, error=e.reason)
        return 1
    except PolicyViolation as violation:
        count = len(violation.offenders)
        names = ", ".join(sorted(DOC_FILENAMES))
        print()
        print(error("❌ COMMIT BLOCKED: README policy violation"))
        print(f"{count} {_plural(count)} missing a README ({names}):")
        for path in violation.offenders:
            print(f"  - {path}")
        print(dim("Add a README to each directory listed, then commit again."))
        logger.warning("README policy violation", count=count,
                       offenders=[str(p) for p in violation.offenders])
        return 1

    if not quiet:
        print(success(f"✅ All {result.checked} {_plural(result.checked)} have a README"))
    logger.info("README check passed", checked=result.checked)
    return 0


def run_merge_log(event: MergeEvent, log_path: Union[str, Path], logger: JsonLogger) -> int:
    """
    Record a merge if it landed on a protected branch.

    Write failures are reported but never turned into a failing exit code.

    Args:
        event: Merge context
        log_path: Path to merge.log
        logger: Diagnostics logger

    Returns:
        Exit code (always 0)
    """
    try:
        record = record_if_protected(event, log_path)
    except PolicyIOError as e:
        print(warning(f"⚠️ Could not write merge log {e.path}: {e.reason}"), file=sys.stderr)
        logger.error("Merge log append failed", path=e.path, error=e.reason)
        return 0

    if record is None:
        logger.debug("Branch not protected, merge not logged", branch=event.branch)
        return 0

    print(f"📝 Merge into {record.branch} logged to {Path(log_path).name}")
    logger.info("Merge logged", branch=record.branch, commit=record.commit)
    return 0
