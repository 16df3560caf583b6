#!/usr/bin/env python3
"""
Terminal color utilities for hook and CLI output.

Respects NO_COLOR, FORCE_COLOR, and TTY detection, so output captured by
git or by tests stays plain text.

Usage:
    from colors import success, error, warning, dim, bold, check_line

    print(check_line(True, "docs"))     # ✅ docs
    print(error("❌ Commit blocked"))

Environment Variables:
    NO_COLOR=1      Disable all colors (https://no-color.org/)
    FORCE_COLOR=1   Force colors even in non-TTY
    TERM=dumb       Disable colors for dumb terminals
"""
import os
import sys


class Colors:
    """ANSI escape code constants."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    GRAY = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_CYAN = '\033[96m'


def _supports_color() -> bool:
    """
    Check if terminal supports colors.

    Checks in order:
    1. NO_COLOR env var - disables colors
    2. FORCE_COLOR env var - forces colors on
    3. stdout.isatty() - must be a TTY
    4. TERM != 'dumb'
    """
    if os.environ.get('NO_COLOR'):
        return False

    if os.environ.get('FORCE_COLOR'):
        return True

    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False

    return os.environ.get('TERM', '') != 'dumb'


# Cache the result (can be reset for testing by setting to None)
_color_enabled = None


def colors_enabled() -> bool:
    """Check if colors are enabled (cached)."""
    global _color_enabled
    if _color_enabled is None:
        _color_enabled = _supports_color()
    return _color_enabled


def _wrap(text: str, color: str) -> str:
    if not colors_enabled():
        return text
    return f"{color}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_GREEN)


def error(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_RED)


def warning(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_YELLOW)


def info(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_CYAN)


def dim(text: str) -> str:
    return _wrap(text, Colors.GRAY)


def bold(text: str) -> str:
    return _wrap(text, Colors.BOLD)


def check_line(ok: bool, label: str) -> str:
    """One progress line for a checked directory."""
    if ok:
        return success(f"✅ {label}")
    return error(f"❌ {label} (missing README)")
