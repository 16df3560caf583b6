#!/usr/bin/env python3
"""
Git operation helpers for the policy hooks.

Provides safe, timeout-protected git operations for:
- Getting current branch name
- Resolving the repository root
- Reading HEAD commit, author and subject for merge auditing
"""
import subprocess
import os
from datetime import datetime
from typing import Optional

from merge_logger import MergeEvent


UNKNOWN = "unknown"


def run_git(cmd: str, cwd: Optional[str] = None) -> tuple[int, str, str]:
    """
    Run a git command safely with timeout.

    Args:
        cmd: Git command to run (e.g., "git status")
        cwd: Working directory (defaults to current)

    Returns:
        Tuple of (exit_code, stdout, stderr)
        - exit_code: 0 for success, non-zero for failure
        - stdout: Command output (stripped)
        - stderr: Error output (stripped)
    """
    if cwd is None:
        cwd = os.getcwd()

    try:
        result = subprocess.run(
            cmd,
            shell=True,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=3  # 3 second timeout
        )
        return result.returncode, result.stdout.strip(), result.stderr.strip()
    except subprocess.TimeoutExpired:
        return -1, "", "timeout"
    except Exception as e:
        return -1, "", str(e)


def get_current_branch(project_dir: Optional[str] = None) -> Optional[str]:
    """
    Get the current git branch name.

    Args:
        project_dir: Project directory (defaults to cwd)

    Returns:
        Branch name (e.g., "feature/auth") or None if:
        - Not a git repo
        - Detached HEAD state
        - Git command failed
    """
    code, branch, _ = run_git("git symbolic-ref --short HEAD", project_dir)
    return branch if code == 0 and branch else None


def is_git_repo(project_dir: Optional[str] = None) -> bool:
    """
    Check if directory is inside a git repository.

    Args:
        project_dir: Directory to check (defaults to cwd)

    Returns:
        True if inside a git repo, False otherwise
    """
    code, _, _ = run_git("git rev-parse --git-dir", project_dir)
    return code == 0


def get_git_root(project_dir: Optional[str] = None) -> Optional[str]:
    """
    Get the root directory of the git repository.

    Args:
        project_dir: Starting directory (defaults to cwd)

    Returns:
        Absolute path to git root, or None if not in a repo
    """
    code, root, _ = run_git("git rev-parse --show-toplevel", project_dir)
    return root if code == 0 and root else None


def resolve_project_root(start_dir: Optional[str] = None) -> str:
    """
    Resolve the project root: the git root if inside a repo, else the start dir.

    Args:
        start_dir: Directory to resolve from (defaults to cwd)

    Returns:
        Absolute project directory path
    """
    start = start_dir or os.getcwd()
    return get_git_root(start) or os.path.abspath(start)


def get_git_hooks_dir(project_dir: Optional[str] = None) -> Optional[str]:
    """
    Get the hooks directory git will actually run hooks from.

    Honors core.hooksPath and worktree layouts.

    Returns:
        Absolute path, or None if not in a repo
    """
    code, hooks_dir, _ = run_git("git rev-parse --git-path hooks", project_dir)
    if code != 0 or not hooks_dir:
        return None
    if not os.path.isabs(hooks_dir):
        hooks_dir = os.path.join(project_dir or os.getcwd(), hooks_dir)
    return os.path.abspath(hooks_dir)


def get_head_commit(project_dir: Optional[str] = None) -> Optional[str]:
    """Full hash of HEAD, or None if there are no commits."""
    code, commit, _ = run_git("git rev-parse HEAD", project_dir)
    return commit if code == 0 and commit else None


def get_last_commit_author(project_dir: Optional[str] = None) -> tuple[Optional[str], Optional[str]]:
    """
    Author of the most recent commit.

    Returns:
        Tuple of (name, email); either may be None if git failed
    """
    code, output, _ = run_git("git log -1 --pretty=format:'%an%n%ae'", project_dir)
    if code != 0 or not output:
        return None, None
    lines = output.split('\n')
    name = lines[0].strip() or None
    email = lines[1].strip() if len(lines) > 1 else ""
    return name, email or None


def get_last_commit_subject(project_dir: Optional[str] = None) -> Optional[str]:
    """Subject line of the most recent commit."""
    code, subject, _ = run_git("git log -1 --pretty=format:'%s'", project_dir)
    return subject if code == 0 and subject else None


def read_merge_event(project_dir: Optional[str] = None,
                     now: Optional[datetime] = None) -> Optional[MergeEvent]:
    """
    Build a MergeEvent from the repository's current state.

    Fields git cannot provide are filled with "unknown"; their syntax is
    not validated.

    Args:
        project_dir: Repository directory (defaults to cwd)
        now: Event time (defaults to the current local time)

    Returns:
        MergeEvent, or None if there is no current branch (not a repo,
        detached HEAD)
    """
    branch = get_current_branch(project_dir)
    if not branch:
        return None

    name, email = get_last_commit_author(project_dir)
    return MergeEvent(
        branch=branch,
        commit=get_head_commit(project_dir) or UNKNOWN,
        timestamp=now or datetime.now(),
        author_name=name or UNKNOWN,
        author_email=email or UNKNOWN,
        message=get_last_commit_subject(project_dir) or UNKNOWN,
    )


if __name__ == "__main__":
    # Quick test
    print(f"Is git repo: {is_git_repo()}")
    print(f"Current branch: {get_current_branch()}")
    print(f"Git root: {get_git_root()}")
    print(f"Merge event: {read_merge_event()}")
