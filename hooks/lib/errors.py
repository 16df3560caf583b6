#!/usr/bin/env python3
"""
Error types for the repository policy hooks.

- PolicyIOError: a scan path could not be read or the merge log could not be
  written. Subclasses OSError so callers catching OSError still see it.
- PolicyViolation: one or more directories are missing a README. This is the
  only condition that blocks a commit.
"""
from pathlib import Path
from typing import Iterable, Optional, Union


class PolicyIOError(OSError):
    """Filesystem failure while scanning a tree or appending to the log."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class PolicyViolation(Exception):
    """Directories without a recognized documentation file."""

    def __init__(self, offenders: Iterable[Path], message: Optional[str] = None):
        self.offenders = tuple(offenders)
        count = len(self.offenders)
        super().__init__(message or f"{count} director{'y' if count == 1 else 'ies'} missing README")
