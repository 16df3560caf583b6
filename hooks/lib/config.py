#!/usr/bin/env python3
"""
Configuration loading for the policy hooks.

Implements cascading configuration:
1. Global defaults (~/.repo-policy/config.yaml)
2. Project config (.repo-policy/config.yaml) - committed to repo
3. Local overrides (.repo-policy/config.local.yaml) - gitignored

Only ambient behavior is configurable (diagnostics logging, turning a hook
off). The README names and protected branches are fixed.

Example:
    logging:
      level: info
      destinations: [file, stderr]
    hooks:
      merge_log:
        enabled: false
"""
import sys
from pathlib import Path
from typing import Any, Optional

import yaml


CONFIG_DIRNAME = '.repo-policy'
HOOK_NAMES = ('readme_check', 'merge_log')


def load_yaml(path: Path) -> dict:
    """
    Load a YAML config file.

    Args:
        path: Path to config file

    Returns:
        Parsed config dictionary (empty dict if missing or unparseable)
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
    except OSError as e:
        print(f"⚠️ Could not load {path}: {e}", file=sys.stderr)
        return {}

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        print(f"⚠️ YAML parse error in {path}: {e}", file=sys.stderr)
        return {}

    if not isinstance(data, dict):
        print(f"⚠️ Config {path} must be a mapping, got {type(data).__name__}", file=sys.stderr)
        return {}
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge override into base dictionary.

    Recursively merges nested dictionaries. Non-dict values are replaced.

    Args:
        base: Base dictionary (modified in place)
        override: Dictionary with values to merge

    Returns:
        Merged dictionary (same as base)
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def default_config() -> dict:
    return {
        'logging': {
            'level': 'error',
            'destinations': ['file'],
        },
        'hooks': {name: {'enabled': True} for name in HOOK_NAMES},
    }


class PolicyConfig:
    """
    Configuration manager for the policy hooks.

    Loads and merges configuration from global, project, and local sources.
    """

    LOGGING_SCHEMA = {
        'level': {'type': str, 'allowed': {'debug', 'info', 'warning', 'error'}},
        'destinations': {'type': list, 'element_type': str},
        'file': {'type': str},
    }

    def __init__(self, project_dir: str, global_dir: Optional[Path] = None):
        """
        Initialize config for project.

        Args:
            project_dir: Project root directory
            global_dir: Override for ~/.repo-policy (tests)
        """
        self.project_dir = project_dir
        self.global_dir = global_dir or (Path.home() / CONFIG_DIRNAME)
        self.validation_errors: list[str] = []
        self._config = self._load_cascade()

    def _load_cascade(self) -> dict:
        """
        Load configuration cascade: global → project → local.

        Returns:
            Merged and validated configuration dictionary
        """
        config = default_config()

        # 1. Global defaults
        global_config = load_yaml(self.global_dir / 'config.yaml')
        if global_config:
            deep_merge(config, global_config)

        # 2. Project config (versioned)
        project_config = load_yaml(Path(self.project_dir) / CONFIG_DIRNAME / 'config.yaml')
        if project_config:
            if project_config.get('inherit', True):
                deep_merge(config, project_config)
            else:
                # Replace global entirely, keep built-in defaults underneath
                config = deep_merge(default_config(), project_config)

        # 3. Local overrides (gitignored)
        local_config = load_yaml(Path(self.project_dir) / CONFIG_DIRNAME / 'config.local.yaml')
        if local_config:
            deep_merge(config, local_config)

        self._validate(config)
        return config

    def _validate(self, config: dict) -> None:
        """Drop invalid values (fail-safe), recording why."""
        defaults = default_config()

        logging_config = config.get('logging')
        if not isinstance(logging_config, dict):
            self._reject("'logging' must be a mapping")
            config['logging'] = defaults['logging']
        else:
            for key in list(logging_config.keys()):
                error = self._check_field(key, logging_config[key], self.LOGGING_SCHEMA.get(key))
                if error:
                    self._reject(f"logging.{key} {error}")
                    del logging_config[key]

        hooks = config.get('hooks')
        if not isinstance(hooks, dict):
            self._reject("'hooks' must be a mapping")
            config['hooks'] = defaults['hooks']
            return

        for name in list(hooks.keys()):
            hook_config = hooks[name]
            if not isinstance(hook_config, dict):
                self._reject(f"hooks.{name} must be a mapping")
                hooks[name] = {'enabled': True}
                continue
            if 'enabled' in hook_config and not isinstance(hook_config['enabled'], bool):
                self._reject(f"hooks.{name}.enabled must be bool")
                hook_config['enabled'] = True

    @staticmethod
    def _check_field(key: str, value: Any, rules: Optional[dict]) -> Optional[str]:
        if rules is None:
            return None
        expected_type = rules['type']
        if not isinstance(value, expected_type):
            # A single destination string is accepted and normalized later
            if key == 'destinations' and isinstance(value, str):
                return None
            return f"must be {expected_type.__name__}"
        element_type = rules.get('element_type')
        if element_type and any(not isinstance(item, element_type) for item in value):
            return "must contain only strings"
        if 'allowed' in rules and value.lower() not in rules['allowed']:
            return f"must be one of: {', '.join(sorted(rules['allowed']))}"
        return None

    def _reject(self, message: str) -> None:
        print(f"⚠️ Config validation error: {message}", file=sys.stderr)
        self.validation_errors.append(message)

    def get_validation_errors(self) -> list[str]:
        """Return any validation errors encountered while loading config."""
        return list(self.validation_errors)

    def get_logging_config(self) -> dict:
        """Logging section for logger.get_logger()."""
        return dict(self._config.get('logging', {}))

    def is_hook_enabled(self, hook_name: str) -> bool:
        """Check whether a hook is enabled (default: True)."""
        hook_config = self._config.get('hooks', {}).get(hook_name, {})
        return hook_config.get('enabled', True)
