"""Filesystem helpers for backedup."""

from __future__ import annotations

import errno
import os
import shutil
import stat
from pathlib import Path
from typing import Mapping, Protocol

from .models import PathInfo, PathState

CopyErrors = list[tuple[Path, str]]


class PathInspector(Protocol):
    """Symlink-aware stat capability used by the engine."""

    def lstat(self, path: Path) -> PathInfo:
        """Return ``PathInfo`` for ``path`` without following a final symlink.

        Raises ``OSError`` (usually ``FileNotFoundError``) when the path cannot be inspected.
        """
        ...


class OsInspector:
    """``PathInspector`` backed by the real operating system."""

    def lstat(self, path: Path) -> PathInfo:
        stat_result = os.lstat(path)
        return PathInfo(
            is_dir=stat.S_ISDIR(stat_result.st_mode),
            is_symlink=stat.S_ISLNK(stat_result.st_mode),
        )


class MemoryInspector:
    """``PathInspector`` answering from an in-memory table of paths."""

    def __init__(self, entries: Mapping[Path, PathInfo] | None = None) -> None:
        self._entries: dict[Path, PathInfo] = dict(entries or {})

    def set(self, path: Path, info: PathInfo) -> None:
        self._entries[Path(path)] = info

    def discard(self, path: Path) -> None:
        self._entries.pop(Path(path), None)

    def lstat(self, path: Path) -> PathInfo:
        try:
            return self._entries[Path(path)]
        except KeyError:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path)) from None


def path_state(inspector: PathInspector, path: Path) -> PathState:
    """Return the on-disk state of ``path``; a path that does not exist is ``MISSING``."""

    try:
        return inspector.lstat(path).state
    except FileNotFoundError:
        return PathState.MISSING


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory exists."""

    path.parent.mkdir(parents=True, exist_ok=True)


def symlink_points_to(source: Path, target: Path) -> bool:
    """Return ``True`` if ``source`` is a symlink whose target is ``target``."""

    if not source.is_symlink():
        return False
    current = Path(os.readlink(source))
    if not current.is_absolute():
        current = source.parent / current
    return Path(os.path.normpath(current)) == Path(os.path.normpath(target))


def copy_file(source: str | os.PathLike[str], destination: str | os.PathLike[str]) -> None:
    """Copy file contents and permission bits."""

    shutil.copy2(source, destination)


def copy_tree(source: Path, destination: Path) -> CopyErrors:
    """Recursively copy ``source`` into ``destination``.

    ``destination`` is created when absent and merged into otherwise. Every
    child that cannot be copied is recorded and the walk carries on; errors
    on ``source`` itself are raised.
    """

    try:
        shutil.copytree(
            source,
            destination,
            symlinks=True,
            copy_function=copy_file,
            dirs_exist_ok=True,
        )
    except shutil.Error as exc:
        return [(Path(src), why) for src, _dst, why in exc.args[0]]
    return []


def copy_entry(source: Path, destination: Path, info: PathInfo) -> CopyErrors:
    """Copy ``source`` to ``destination`` according to its ``PathInfo``."""

    if info.is_dir:
        return copy_tree(source, destination)
    copy_file(source, destination)
    return []
