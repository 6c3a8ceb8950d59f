from __future__ import annotations

from pathlib import Path

import pytest

from backedup.mapping import HOME_DIR_NAME, backup_path_for, home_backup_dir, is_home_relative

HOME = Path("/home/me")
ROOT = Path("/backups/backedup")


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        (HOME / ".bashrc", ROOT / HOME_DIR_NAME / ".bashrc"),
        (HOME / ".ssh", ROOT / HOME_DIR_NAME / ".ssh"),
        (HOME / ".config" / "nvim", ROOT / HOME_DIR_NAME / ".config" / "nvim"),
        (HOME / ".m2" / "settings.xml", ROOT / HOME_DIR_NAME / ".m2" / "settings.xml"),
    ],
)
def test_home_paths_live_under_home_namespace(path: Path, expected: Path) -> None:
    assert backup_path_for(path, home_dir=HOME, backup_root=ROOT) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        (Path("/tmp/src/.file1"), ROOT / "tmp" / "src" / ".file1"),
        (Path("/etc/hosts"), ROOT / "etc" / "hosts"),
        (Path("/Library/Application Support/Data"), ROOT / "Library" / "Application Support" / "Data"),
    ],
)
def test_other_paths_mirror_absolute_structure(path: Path, expected: Path) -> None:
    assert backup_path_for(path, home_dir=HOME, backup_root=ROOT) == expected


def test_home_prefix_is_matched_by_component() -> None:
    sibling = Path("/home/meow/.bashrc")

    assert not is_home_relative(sibling, HOME)
    assert backup_path_for(sibling, home_dir=HOME, backup_root=ROOT) == ROOT / "home" / "meow" / ".bashrc"


def test_home_itself_is_not_home_relative() -> None:
    assert not is_home_relative(HOME, HOME)
    assert is_home_relative(HOME / ".zshrc", HOME)


def test_mapping_is_deterministic() -> None:
    path = HOME / ".vim"
    first = backup_path_for(path, home_dir=HOME, backup_root=ROOT)
    second = backup_path_for(path, home_dir=HOME, backup_root=ROOT)

    assert first == second
    assert first.parent == home_backup_dir(ROOT)
