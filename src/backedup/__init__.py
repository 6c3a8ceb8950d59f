"""Core package for the backedup project."""

from .cli import app, run
from .config import Config, ConfigError, ConfigNotCreatedError, ensure_config, load_config
from .filesystem import MemoryInspector, OsInspector, PathInspector
from .manager import BackedupError, BackupManager
from .mapping import HOME_DIR_NAME, backup_path_for, is_home_relative
from .models import (
    Operation,
    PathAction,
    PathInfo,
    PathResult,
    PathState,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigNotCreatedError",
    "ensure_config",
    "load_config",
    "BackupManager",
    "BackedupError",
    "PathInspector",
    "OsInspector",
    "MemoryInspector",
    "HOME_DIR_NAME",
    "backup_path_for",
    "is_home_relative",
    "Operation",
    "PathAction",
    "PathInfo",
    "PathResult",
    "PathState",
    "app",
    "run",
]
