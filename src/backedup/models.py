"""Shared models and enums for backedup."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class PathState(str, Enum):
    """On-disk state of a configured path, read fresh on every operation."""

    ORIGINAL = "original"
    SYMLINK = "symlink"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class PathInfo:
    """Result of a symlink-aware stat."""

    is_dir: bool
    is_symlink: bool

    @property
    def state(self) -> PathState:
        return PathState.SYMLINK if self.is_symlink else PathState.ORIGINAL


class Operation(str, Enum):
    """Operations the engine can run over the configured paths."""

    BACKUP = "backup"
    RESTORE = "restore"
    UNINSTALL = "uninstall"


class PathAction(str, Enum):
    """Outcome of an operation for a single configured path."""

    LINKED = "linked"
    RESTORED = "restored"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PathResult:
    """Result emitted for each configured path."""

    path: Path
    backup_path: Path | None
    action: PathAction
    details: str | None = None
