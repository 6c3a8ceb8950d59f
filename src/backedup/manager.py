"""High level orchestration for backedup operations."""

from __future__ import annotations

import tempfile
from pathlib import Path

from rich.console import Console

from .config import Config
from .filesystem import OsInspector, PathInspector, copy_entry, ensure_parent, path_state, symlink_points_to
from .mapping import backup_path_for, home_backup_dir
from .models import Operation, PathAction, PathInfo, PathResult, PathState

SYMLINK_EXISTS = "symlink exists"
NOT_A_SYMLINK = "file exists, not symlink"
DOES_NOT_EXIST = "does not exist"


class BackedupError(RuntimeError):
    """Raised when an operation cannot start at all."""


class BackupManager:
    """Moves configured paths between their original, linked and backed up states.

    Every operation walks ``config.paths`` in order. Problems with a single
    path are logged and reported in its ``PathResult``; only problems with
    the backup root itself abort an operation.
    """

    def __init__(
        self,
        config: Config,
        *,
        console: Console | None = None,
        inspector: PathInspector | None = None,
    ) -> None:
        self.config = config
        self.console = console or Console(stderr=True)
        self.inspector = inspector or OsInspector()

    @property
    def backup_root(self) -> Path:
        return self.config.backup_root

    @property
    def home_backup_dir(self) -> Path:
        return home_backup_dir(self.config.backup_root)

    def backup_path(self, path: Path) -> Path:
        """Return where the content of ``path`` lives under the backup root."""

        return backup_path_for(path, home_dir=self.config.home_dir, backup_root=self.backup_root)

    def run(self, operation: Operation) -> list[PathResult]:
        if operation is Operation.BACKUP:
            return self.backup()
        if operation is Operation.RESTORE:
            return self.restore()
        return self.uninstall()

    def backup(self) -> list[PathResult]:
        """Move every configured path under the backup root and link it back."""

        self._make_dir(self.backup_root)
        self._make_dir(self.home_backup_dir)
        return [self._backup_entry(path) for path in self.config.paths]

    def restore(self) -> list[PathResult]:
        """Recreate links to content that already lives under the backup root."""

        self._require_backup_root()
        self._make_dir(self.home_backup_dir)
        return [self._restore_entry(path) for path in self.config.paths]

    def uninstall(self) -> list[PathResult]:
        """Replace links with copies of the backed up content."""

        self._require_backup_root()
        self._make_dir(self.home_backup_dir)
        return [self._uninstall_entry(path) for path in self.config.paths]

    # ------------------------------------------------------------------
    # Internal helpers

    def _backup_entry(self, path: Path) -> PathResult:
        try:
            state = path_state(self.inspector, path)
        except OSError as exc:
            return self._fail(path, None, exc)

        if state is PathState.MISSING:
            return self._fail(path, None, DOES_NOT_EXIST)
        if state is PathState.SYMLINK:
            return self._skip(path, None, SYMLINK_EXISTS)

        backup_path = self.backup_path(path)
        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            path.rename(backup_path)
        except OSError as exc:
            return self._fail(path, backup_path, exc)

        try:
            path.symlink_to(backup_path)
        except OSError as exc:
            # content is already relocated; the original location stays empty
            return self._fail(path, backup_path, f"moved to {backup_path} but not linked: {exc}")

        return PathResult(path=path, backup_path=backup_path, action=PathAction.LINKED)

    def _restore_entry(self, path: Path) -> PathResult:
        if not self.backup_root.exists():
            return self._fail(path, None, f"backup path {self.backup_root} doesn't exist")

        backup_path = self.backup_path(path)
        if symlink_points_to(path, backup_path):
            return self._skip(path, backup_path, SYMLINK_EXISTS)

        try:
            ensure_parent(path)
        except OSError as exc:
            return self._fail(path, backup_path, exc)

        self._log(f"creating symlink {backup_path} {path}")
        try:
            path.symlink_to(backup_path)
        except OSError as exc:
            return self._fail(path, backup_path, exc)

        return PathResult(path=path, backup_path=backup_path, action=PathAction.LINKED)

    def _uninstall_entry(self, path: Path) -> PathResult:
        try:
            state = path_state(self.inspector, path)
        except OSError as exc:
            return self._fail(path, None, exc)

        if state is PathState.MISSING:
            return self._fail(path, None, DOES_NOT_EXIST)
        if state is PathState.ORIGINAL:
            return self._skip(path, None, NOT_A_SYMLINK)

        backup_path = self.backup_path(path)
        try:
            backup_info = self.inspector.lstat(backup_path)
        except OSError as exc:
            return self._fail(path, backup_path, exc)

        try:
            errors = self._copy_back(backup_path, path, backup_info)
        except OSError as exc:
            if path.is_symlink():
                return self._fail(path, backup_path, exc)
            return self._fail(path, backup_path, f"link removed but not replaced: {exc}")

        for child, why in errors:
            self._log(f"ERRO: {child} {why}")

        details = f"{len(errors)} item(s) could not be copied" if errors else None
        return PathResult(path=path, backup_path=backup_path, action=PathAction.RESTORED, details=details)

    def _copy_back(self, backup_path: Path, path: Path, backup_info: PathInfo) -> list[tuple[Path, str]]:
        """Copy the backup next to ``path`` first, then swap it in for the link."""

        prefix = f".{path.name}.backedup-tmp-"
        with tempfile.TemporaryDirectory(prefix=prefix, dir=path.parent) as staging_root:
            staged = Path(staging_root) / "payload"
            errors = copy_entry(backup_path, staged, backup_info)
            if backup_info.is_dir:
                # a directory cannot be renamed over a symlink
                path.unlink()
                staged.rename(path)
            else:
                staged.replace(path)
        return errors

    def _require_backup_root(self) -> None:
        if not self.backup_root.exists():
            raise BackedupError(f"{self.backup_root} does not exist")

    def _make_dir(self, path: Path) -> None:
        try:
            path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise BackedupError(f"Unable to create directory '{path}': {exc}") from exc

    def _fail(self, path: Path, backup_path: Path | None, reason: object) -> PathResult:
        self._log(f"ERRO: {path} {reason}")
        return PathResult(path=path, backup_path=backup_path, action=PathAction.FAILED, details=str(reason))

    def _skip(self, path: Path, backup_path: Path | None, reason: str) -> PathResult:
        self._log(f"ERRO: {path} {reason}")
        return PathResult(path=path, backup_path=backup_path, action=PathAction.SKIPPED, details=reason)

    def _log(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)
