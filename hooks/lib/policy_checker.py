#!/usr/bin/env python3
"""
README policy checker.

Walks a directory tree and verifies that every directory directly contains
at least one documentation file. Used as a pre-commit gate.

Rules:
- Recognized files: README.md, README.txt, README.rst, README (exact, case-sensitive)
- Skipped: anything under .git and any path segment starting with "."
- Directories are visited in lexicographic order of their root-relative path,
  root first, so output is identical across runs
- Read-only: the checker never touches the filesystem beyond listing it

Usage:
    from policy_checker import check

    result = check('/path/to/repo')
    if not result.passed:
        for path in result.offenders:
            print(path)
"""
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator, Optional, Union

from errors import PolicyIOError, PolicyViolation


DOC_FILENAMES = frozenset({"README.md", "README.txt", "README.rst", "README"})
CONTROL_DIR = ".git"
HIDDEN_PREFIX = "."


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory in the scanned tree with its immediate file names."""

    path: Path
    relative: str
    files: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class PolicyResult:
    """Outcome of a check: Pass, or Fail with ordered offender paths."""

    offenders: tuple = ()
    checked: int = 0

    @property
    def passed(self) -> bool:
        return not self.offenders


ProgressCallback = Callable[[DirectoryEntry, bool], None]


def is_excluded(relative_path: Union[str, PurePosixPath]) -> bool:
    """
    Check whether a root-relative path is outside the policy.

    Every segment is tested, so anything below .git or below a hidden
    directory is excluded regardless of its own name.

    Args:
        relative_path: Path relative to the scan root ("" or "." is the root)

    Returns:
        True if the path must not be checked
    """
    parts = PurePosixPath(str(relative_path).replace(os.sep, "/")).parts
    for part in parts:
        if part == ".":
            continue
        if part == CONTROL_DIR or part.startswith(HIDDEN_PREFIX):
            return True
    return False


def directory_passes(entry: DirectoryEntry) -> bool:
    """A directory passes if it holds at least one recognized README file."""
    return not DOC_FILENAMES.isdisjoint(entry.files)


def _list_directory(path: Path) -> tuple[list[str], frozenset]:
    """Split the immediate children of a directory into subdirs and files."""
    subdirs = []
    files = set()
    try:
        with os.scandir(path) as it:
            for child in it:
                if child.is_dir(follow_symlinks=False):
                    subdirs.append(child.name)
                elif child.is_file():
                    files.add(child.name)
    except OSError as e:
        raise PolicyIOError(path, e.strerror or str(e)) from e
    return subdirs, frozenset(files)


def iter_directories(root_path: Union[str, Path]) -> Iterator[DirectoryEntry]:
    """
    Yield every non-excluded directory under root_path in lexicographic order.

    Args:
        root_path: Directory to scan

    Yields:
        DirectoryEntry for the root and each descendant directory

    Raises:
        PolicyIOError: root is missing, not a directory, or a directory is unreadable
    """
    root = Path(root_path)
    if not root.exists():
        raise PolicyIOError(root, "path does not exist")
    if not root.is_dir():
        raise PolicyIOError(root, "not a directory")

    # Collect first: ordering is by full relative path string, not walk order
    entries = []
    pending = [""]
    while pending:
        relative = pending.pop()
        path = root / relative if relative else root
        subdirs, files = _list_directory(path)
        entries.append(DirectoryEntry(path=path, relative=relative, files=files))
        for name in subdirs:
            child = f"{relative}/{name}" if relative else name
            if not is_excluded(child):
                pending.append(child)

    entries.sort(key=lambda e: e.relative)
    yield from entries


def check(root_path: Union[str, Path],
          on_progress: Optional[ProgressCallback] = None) -> PolicyResult:
    """
    Verify every directory under root_path has a README.

    Args:
        root_path: Directory to scan
        on_progress: Optional callback invoked once per directory with (entry, ok)

    Returns:
        PolicyResult; offenders lists every failing directory in visit order

    Raises:
        PolicyIOError: the tree could not be read (no partial result)
    """
    offenders = []
    checked = 0
    for entry in iter_directories(root_path):
        ok = directory_passes(entry)
        checked += 1
        if not ok:
            offenders.append(entry.path)
        if on_progress is not None:
            on_progress(entry, ok)
    return PolicyResult(offenders=tuple(offenders), checked=checked)


def enforce(root_path: Union[str, Path],
            on_progress: Optional[ProgressCallback] = None) -> PolicyResult:
    """Like check(), but raise PolicyViolation when any directory fails."""
    result = check(root_path, on_progress=on_progress)
    if not result.passed:
        raise PolicyViolation(result.offenders)
    return result
