#!/usr/bin/env python3
"""
Merge audit log.

Appends a fixed-format block to merge.log whenever a merge lands on a
protected branch. Other branches are ignored entirely.

Block format:
    === MERGE INTO main ===
    Date: 2024-01-15 10:30:00
    Commit: abc123
    Author: Jane <jane@x.com>
    Message: Add feature
    ----------------------------------------
    <blank line>

The log is append-only: existing content is never rewritten, and each
block goes out in a single locked write.
"""
import fcntl
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from errors import PolicyIOError


PROTECTED_BRANCHES = frozenset({"main", "master"})
LOG_FILENAME = "merge.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR = "-" * 40


def first_line(text: str) -> str:
    """First line of text, like git's %s subject ("" if empty)."""
    lines = text.splitlines()
    return lines[0] if lines else ""


@dataclass(frozen=True)
class MergeEvent:
    """Context of a merge as reported by the version control system."""

    branch: str
    commit: str
    timestamp: datetime
    author_name: str
    author_email: str
    message: str


@dataclass(frozen=True)
class MergeRecord:
    """One audit entry. Built once, appended once, never modified."""

    branch: str
    commit: str
    date: str
    author_name: str
    author_email: str
    message: str

    @classmethod
    def from_event(cls, event: MergeEvent) -> "MergeRecord":
        # Every field must stay on its own line of the block
        return cls(
            branch=first_line(event.branch),
            commit=first_line(event.commit),
            date=event.timestamp.strftime(DATE_FORMAT),
            author_name=first_line(event.author_name),
            author_email=first_line(event.author_email),
            message=first_line(event.message),
        )

    @property
    def author(self) -> str:
        return f"{self.author_name} <{self.author_email}>"


def is_protected(branch: Optional[str]) -> bool:
    """Check if a branch is production-facing and therefore audited."""
    return branch in PROTECTED_BRANCHES


def format_record(record: MergeRecord) -> str:
    """Render a record as its log block, trailing blank line included."""
    return (
        f"=== MERGE INTO {record.branch} ===\n"
        f"Date: {record.date}\n"
        f"Commit: {record.commit}\n"
        f"Author: {record.author}\n"
        f"Message: {record.message}\n"
        f"{SEPARATOR}\n"
        "\n"
    )


def get_log_path(project_dir: Union[str, Path]) -> Path:
    """Path to merge.log in the repository root."""
    return Path(project_dir) / LOG_FILENAME


def append_record(log_path: Union[str, Path], record: MergeRecord) -> None:
    """
    Append a record block to the log, creating the file if needed.

    Uses an exclusive lock around one write so concurrent hooks never
    interleave inside a block.

    Args:
        log_path: Path to merge.log
        record: Record to append

    Raises:
        PolicyIOError: log could not be opened or written
    """
    path = Path(log_path)
    block = format_record(record)
    try:
        with open(path, 'a', encoding='utf-8') as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            try:
                f.write(block)
                f.flush()
            finally:
                fcntl.flock(f, fcntl.LOCK_UN)
    except OSError as e:
        raise PolicyIOError(path, e.strerror or str(e)) from e


def record_if_protected(event: MergeEvent,
                        log_path: Union[str, Path]) -> Optional[MergeRecord]:
    """
    Append an audit record if the event happened on a protected branch.

    Args:
        event: Merge context
        log_path: Path to merge.log

    Returns:
        The appended record, or None when the branch is not protected
        (the log is left untouched)

    Raises:
        PolicyIOError: log could not be written
    """
    if not is_protected(event.branch):
        return None

    record = MergeRecord.from_event(event)
    append_record(log_path, record)
    return record


def count_records(log_path: Union[str, Path]) -> int:
    """Count record blocks in a log (0 if the log doesn't exist yet)."""
    path = Path(log_path)
    if not path.exists():
        return 0
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise PolicyIOError(path, e.strerror or str(e)) from e
    return sum(1 for line in content.splitlines() if line.startswith("=== MERGE INTO "))
