#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

logger = logging.getLogger("releasetag")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. RELEASETAG_CONFIG environment variable
    2. ~/.releasetag/ directory
    """
    # Check for environment variable override
    if 'RELEASETAG_CONFIG' in os.environ:
        path = Path(os.environ['RELEASETAG_CONFIG']).expanduser()
        if path.exists():
            return path

    config_dir = Path.home() / '.releasetag'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return the default location
    return config_dir / 'config.json'


def configure_logging(config=None, verbose=False):
    """Send log records to stderr, keeping stdout for command output."""
    config = config or get_default_config()
    log_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(log_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(levelname)s: %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stderr)  # Default to stderr
        ],
        force=True
    )
    logger.setLevel(level)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f)
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            # Merge file config with defaults
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            elif file_config is not None:
                logger.error(f"Ignoring config {config_path}: top level must be a mapping")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "remote": "origin",
            "fetch_before_deploy": True,
            "allow_dirty": False
        },
        "signing": {
            "key": ""  # Empty: use git's configured signing key
        },
        "git": {
            "timeout_seconds": 60
        },
        "logging": {
            "level": "INFO",
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
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: RELEASETAG_SECTION_KEY
    For example: RELEASETAG_GENERAL_FETCH_BEFORE_DEPLOY=false
    """
    env_prefix = "RELEASETAG_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "RELEASETAG_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', '1', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', '0', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config
