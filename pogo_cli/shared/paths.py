"""Utilities for resolving and managing application paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_CONFIG_DIR = "~/.pogo"
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_OPERATIONS_SUBDIR = "operations"

CONFIG_DIR_ENV = "POGO_CONFIG_DIR"
CONFIG_FILE_ENV = "POGO_CONFIG_PATH"
OPERATIONS_DIR_ENV = "POGO_OPERATIONS_DIR"


def _expand(path_str: str) -> Path:
    """Return a Path with user and environment variables expanded."""
    return Path(os.path.expandvars(path_str)).expanduser()


def get_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """Return the configuration directory."""
    env = env or os.environ
    raw = env.get(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR)
    return _expand(raw)


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the default config file path."""
    env = env or os.environ
    override = env.get(CONFIG_FILE_ENV)
    if override:
        return _expand(override)
    return get_config_dir(env=env) / DEFAULT_CONFIG_FILE


def default_operations_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory holding user-defined operation files."""
    env = env or os.environ
    override = env.get(OPERATIONS_DIR_ENV)
    if override:
        return _expand(override)
    return get_config_dir(env=env) / DEFAULT_OPERATIONS_SUBDIR


def resolve_path(path_str: str | Path) -> Path:
    """Expand user and environment variables for arbitrary paths."""
    if isinstance(path_str, Path):
        return _expand(str(path_str))
    return _expand(path_str)
