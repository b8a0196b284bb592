#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import logging
import sys

import toml
import yaml

logger = logging.getLogger("bzrsource")

# Composer-style dashed keys understood by Config.get()
CONFIG_KEYS = {
    "cache-repo-dir": ("cache", "repo_dir"),
    "cache-enabled": ("cache", "enabled"),
    "discard-changes": ("downloader", "discard_changes"),
    "bzr-binary": ("downloader", "bzr_binary"),
    "process-timeout": ("process", "timeout_seconds"),
}


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. BZRSOURCE_CONFIG environment variable
    2. ~/.bzrsource/ directory
    """
    if 'BZRSOURCE_CONFIG' in os.environ:
        path = Path(os.environ['BZRSOURCE_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.bzrsource'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except Exception as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def get_default_config():
    """Get default configuration."""
    return {
        "cache": {
            "repo_dir": "~/.bzrsource/cache/repo",
            "enabled": True
        },
        "downloader": {
            "discard_changes": False,
            "bzr_binary": "bzr"
        },
        "process": {
            "timeout_seconds": 300
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def coerce_value(value):
    """Turn a string from the environment or command line into bool/int/str."""
    if value.lower() in ('true', '1', 'yes', 'on'):
        return True
    if value.lower() in ('false', '0', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def set_config_value(config, key, value):
    """
    Set a dashed key (``discard-changes``, ``bzr-binary``...) in a config dict.

    Raises:
        KeyError: unknown key
    """
    if key not in CONFIG_KEYS:
        raise KeyError(key)

    section, name = CONFIG_KEYS[key]
    config.setdefault(section, {})[name] = coerce_value(value) if isinstance(value, str) else value
    return config


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: BZRSOURCE_SECTION_KEY
    For example: BZRSOURCE_DOWNLOADER_DISCARD_CHANGES=true
    """
    env_prefix = "BZRSOURCE_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'BZRSOURCE_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        typed_value = coerce_value(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that prefixes the remaining parts wins
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


def setup_logging(config: Optional[Dict[str, Any]] = None, verbose: bool = False) -> None:
    """Attach a stderr handler to the bzrsource logger."""
    settings = (config or get_default_config()).get("logging", {})
    level = "DEBUG" if verbose else settings.get("level", "WARNING")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(settings.get("format", "%(levelname)s: %(message)s")))

    logger.handlers = [handler]
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    logger.propagate = False


class Config:
    """
    Flag lookup over a loaded configuration dict.

    Answers the dashed keys in CONFIG_KEYS and expands ``~`` in directory
    settings.

    Example:
        config = Config(load_config())
        if config.get("discard-changes"):
            ...
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data if data is not None else get_default_config()

    def get(self, key: str, default: Any = None) -> Any:
        if key not in CONFIG_KEYS:
            return self.data.get(key, default)

        section, name = CONFIG_KEYS[key]
        value = self.data.get(section, {}).get(name, default)
        if key.endswith('-dir') and isinstance(value, str):
            return str(Path(value).expanduser())
        return value

    def merge(self, overrides: Dict[str, Any]) -> None:
        self.data = merge_configs(self.data, overrides)
