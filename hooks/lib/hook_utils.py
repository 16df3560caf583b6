"""Shared utilities for hook implementation."""
from pathlib import Path
from typing import Optional, Tuple

from config import PolicyConfig
from git_utils import get_current_branch, is_git_repo, resolve_project_root
from logger import get_logger, JsonLogger


def early_hook_setup(
    hook_name: str,
    cwd: Optional[str] = None,
    global_dir: Optional[Path] = None,
) -> Tuple[str, Optional[str], Optional[PolicyConfig], JsonLogger]:
    """
    Perform early hook setup: resolve paths, load config, create logger.

    This centralizes the common pattern across all hooks to ensure:
    - Config is loaded before any logging happens
    - Logger uses config-specified level from the start
    - Consistent error handling with fail-open semantics

    Args:
        hook_name: Hook name for context (e.g., "pre-commit", "post-merge")
        cwd: Starting directory (defaults to cwd)
        global_dir: Override for the global config directory

    Returns:
        Tuple of (project_dir, branch, config, logger)
        - project_dir: git root, or cwd outside a repo
        - branch: None if not found/detached HEAD
        - config: None if loading failed
        - logger: Always present, uses config if available
    """
    project_dir = resolve_project_root(cwd)
    base_context = {"hook": hook_name, "project_dir": project_dir}

    branch = None
    if is_git_repo(project_dir):
        branch = get_current_branch(project_dir)

    try:
        config = PolicyConfig(project_dir, global_dir=global_dir)
    except Exception as e:
        # Config loading failed - fail open with basic logger
        logger = get_logger(base_context=base_context).bind(branch=branch)
        logger.error("Config loading failed", error=str(e))
        return project_dir, branch, None, logger

    logger = get_logger(config.get_logging_config(), base_context=base_context).bind(branch=branch)
    for message in config.get_validation_errors():
        logger.warning("Invalid config value dropped", error=message)

    return project_dir, branch, config, logger
