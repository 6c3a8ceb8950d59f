"""Mapping between configured paths and their location under the backup root."""

from __future__ import annotations

from pathlib import Path

HOME_DIR_NAME = "_HOME"


def home_backup_dir(backup_root: Path) -> Path:
    """Return the directory holding content relocated from the home directory."""

    return backup_root / HOME_DIR_NAME


def is_home_relative(path: Path, home_dir: Path) -> bool:
    """Return ``True`` when ``path`` lies strictly below ``home_dir``.

    The comparison is done on path components, so ``/home/al`` is not
    considered to be under ``/home/a``.
    """

    return path != home_dir and path.is_relative_to(home_dir)


def backup_path_for(path: Path, *, home_dir: Path, backup_root: Path) -> Path:
    """Return the backup-side counterpart of ``path``.

    Home-relative paths keep their layout below ``{backup_root}/_HOME``;
    anything else mirrors its absolute location below ``backup_root``, e.g.
    ``~/.bashrc`` becomes ``{backup_root}/_HOME/.bashrc`` and ``/etc/hosts``
    becomes ``{backup_root}/etc/hosts``.
    """

    if is_home_relative(path, home_dir):
        parent = home_backup_dir(backup_root) / path.parent.relative_to(home_dir)
    else:
        parent = backup_root / path.parent.relative_to(path.anchor)
    return parent / path.name
