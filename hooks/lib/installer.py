#!/usr/bin/env python3
"""
Git hook installation.

Writes small shell shims into the repository's hooks directory that exec
the Python hooks in this package:

    pre-commit  -> check-readmes.py  (exit code gates the commit)
    post-merge  -> log-merge.py      (always succeeds)

Shims carry a marker line so they can be recognized and safely replaced.
Hooks written by anything else are left alone unless force=True.
"""
import os
import stat
import sys
from pathlib import Path
from typing import Optional

MARKER = "# repo-policy managed hook"

HOOKS_DIR = Path(__file__).resolve().parent.parent

HOOK_SCRIPTS = {
    "pre-commit": "check-readmes.py",
    "post-merge": "log-merge.py",
}

PRE_COMMIT_TEMPLATE = """#!/bin/sh
{marker}
exec "{python}" "{script}"
"""

POST_MERGE_TEMPLATE = """#!/bin/sh
{marker}
"{python}" "{script}"
exit 0
"""


def render_shim(hook_name: str, python: Optional[str] = None,
                hooks_dir: Optional[Path] = None) -> str:
    """Shell shim content for a git hook."""
    template = PRE_COMMIT_TEMPLATE if hook_name == "pre-commit" else POST_MERGE_TEMPLATE
    script = (hooks_dir or HOOKS_DIR) / HOOK_SCRIPTS[hook_name]
    return template.format(marker=MARKER, python=python or sys.executable, script=script)


def is_managed(path: Path) -> bool:
    """Check if an installed hook file was written by us."""
    try:
        return MARKER in path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def install_hooks(git_hooks_dir: str, force: bool = False,
                  python: Optional[str] = None) -> dict:
    """
    Install shims into a git hooks directory.

    Args:
        git_hooks_dir: Target directory (e.g. .git/hooks)
        force: Overwrite hooks not written by us
        python: Interpreter for the shims (defaults to the current one)

    Returns:
        Dict of hook name -> "installed" | "updated" | "skipped"

    Raises:
        OSError: hooks directory could not be created or written
    """
    target_dir = Path(git_hooks_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    results = {}
    for hook_name in HOOK_SCRIPTS:
        path = target_dir / hook_name
        if path.exists():
            if not is_managed(path) and not force:
                results[hook_name] = "skipped"
                continue
            status = "updated"
        else:
            status = "installed"

        path.write_text(render_shim(hook_name, python=python), encoding="utf-8")
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        results[hook_name] = status

    return results


def installed_hooks(git_hooks_dir: str) -> dict:
    """Dict of hook name -> "managed" | "foreign" | "missing"."""
    target_dir = Path(git_hooks_dir)
    states = {}
    for hook_name in HOOK_SCRIPTS:
        path = target_dir / hook_name
        if not path.exists():
            states[hook_name] = "missing"
        elif is_managed(path):
            states[hook_name] = "managed"
        else:
            states[hook_name] = "foreign"
    return states
