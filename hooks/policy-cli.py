#!/usr/bin/env python3
"""
Repository Policy CLI Tool

Command-line entry point for the README gate and the merge audit log.

Usage:
    policy check [PATH]         # Check README policy (default: repo root)
    policy log-merge [...]      # Record a merge (flags override git context)
    policy install              # Install pre-commit / post-merge hooks
    policy status               # Show branch, merge.log and hook status

Shell Alias (add to ~/.zshrc or ~/.bashrc):
    alias policy='python3 /path/to/hooks/policy-cli.py'
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add lib to path (resolve symlinks to find actual location)
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

from colors import success, error, warning, info, dim, bold
from errors import PolicyIOError
from git_utils import (
    UNKNOWN,
    get_current_branch,
    get_git_hooks_dir,
    is_git_repo,
    read_merge_event,
)
from hook_actions import run_merge_log, run_readme_check
from hook_utils import early_hook_setup
from installer import install_hooks, installed_hooks
from merge_logger import MergeEvent, count_records, get_log_path, is_protected


def cmd_check(args) -> int:
    """Run the README policy check."""
    project_dir, _, _, logger = early_hook_setup("cli:check")
    root = args.path or project_dir
    return run_readme_check(root, logger, quiet=args.quiet)


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD HH:MM:SS)")


def cmd_log_merge(args) -> int:
    """
    Record a merge from explicit flags, filling gaps from git.

    Always exits 0: merge logging never fails the caller.
    """
    project_dir, _, _, logger = early_hook_setup("cli:log-merge")

    event = read_merge_event(project_dir)
    branch = args.branch or (event.branch if event else None)
    if not branch:
        print(warning("⚠️  No branch given and none detected (detached HEAD?)"), file=sys.stderr)
        return 0

    event = MergeEvent(
        branch=branch,
        commit=args.commit or (event.commit if event else UNKNOWN),
        timestamp=args.date or (event.timestamp if event else datetime.now()),
        author_name=args.author_name or (event.author_name if event else UNKNOWN),
        author_email=args.author_email or (event.author_email if event else UNKNOWN),
        message=args.message or (event.message if event else UNKNOWN),
    )
    log_path = args.log_file or get_log_path(project_dir)
    return run_merge_log(event, log_path, logger)


def cmd_install(args) -> int:
    """Install git hook shims."""
    project_dir, _, _, logger = early_hook_setup("cli:install")

    if not is_git_repo(project_dir):
        print(error("❌ Not in a git repository"), file=sys.stderr)
        return 1

    hooks_dir = get_git_hooks_dir(project_dir)
    if not hooks_dir:
        print(error("❌ Could not locate the git hooks directory"), file=sys.stderr)
        return 1

    try:
        results = install_hooks(hooks_dir, force=args.force)
    except OSError as e:
        print(error(f"❌ Could not install hooks: {e}"), file=sys.stderr)
        logger.error("Hook install failed", error=str(e))
        return 1

    for hook_name, status in results.items():
        if status == "skipped":
            print(warning(f"⚠️  {hook_name}: existing hook kept (use --force to replace)"))
        else:
            print(success(f"✅ {hook_name}: {status}"))
    logger.info("Hooks installed", results=results)
    return 0


def cmd_status(args) -> int:
    """Show policy status for the current repository."""
    project_dir, _, _, _ = early_hook_setup("cli:status")

    print(bold("📋 Repository policy status"))
    print(f"   Project: {project_dir}")

    if not is_git_repo(project_dir):
        print(dim("   Not a git repository"))
        return 0

    branch = get_current_branch(project_dir)
    if branch:
        label = warning("protected") if is_protected(branch) else dim("not protected")
        print(f"   Branch:  {branch} ({label})")
    else:
        print(f"   Branch:  {dim('detached HEAD')}")

    log_path = get_log_path(project_dir)
    try:
        count = count_records(log_path)
        print(f"   Merge log: {count} record{'s' if count != 1 else ''} in {log_path.name}")
    except PolicyIOError as e:
        print(error(f"   Merge log: unreadable ({e.reason})"))

    hooks_dir = get_git_hooks_dir(project_dir)
    if hooks_dir:
        for hook_name, state in installed_hooks(hooks_dir).items():
            if state == "managed":
                print(f"   {hook_name}: {success('installed')}")
            elif state == "foreign":
                print(f"   {hook_name}: {warning('other hook present')}")
            else:
                print(f"   {hook_name}: {dim('not installed')}")
        if any(s != "managed" for s in installed_hooks(hooks_dir).values()):
            print(info("💡 Run `policy install` to install missing hooks"))

    return 0


def main() -> int:
    """
    CLI entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog='policy',
        description='Repository policy hooks - README gate and merge audit log',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    policy check                        # Check the whole repository
    policy check docs --quiet           # Only print failing directories
    policy log-merge                    # Record current HEAD if on main/master
    policy log-merge --branch main --commit abc123 \\
        --author-name Jane --author-email jane@x.com --message "Add feature"
    policy install                      # Install pre-commit and post-merge hooks
    policy status                       # Show status
'''
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # check
    check_parser = subparsers.add_parser('check', help='Check that every directory has a README')
    check_parser.add_argument('path', nargs='?', help='Root directory (default: repository root)')
    check_parser.add_argument('--quiet', '-q', action='store_true', help='Only print failing directories')

    # log-merge
    log_parser = subparsers.add_parser('log-merge', help='Append a merge record if on a protected branch')
    log_parser.add_argument('--branch', '-b', help='Target branch (default: current)')
    log_parser.add_argument('--commit', '-c', help='Commit id (default: HEAD)')
    log_parser.add_argument('--author-name', help='Author name (default: last commit author)')
    log_parser.add_argument('--author-email', help='Author email (default: last commit author)')
    log_parser.add_argument('--message', '-m', help='Subject line (default: last commit subject)')
    log_parser.add_argument('--date', type=_parse_date, help='Event time, YYYY-MM-DD HH:MM:SS (default: now)')
    log_parser.add_argument('--log-file', help='Log file (default: merge.log in repository root)')

    # install
    install_parser = subparsers.add_parser('install', help='Install git hooks')
    install_parser.add_argument('--force', '-f', action='store_true', help='Replace hooks not managed by policy')

    # status
    subparsers.add_parser('status', help='Show policy status')

    args = parser.parse_args()

    if not args.command:
        args.command = 'status'

    commands = {
        'check': cmd_check,
        'log-merge': cmd_log_merge,
        'install': cmd_install,
        'status': cmd_status,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
