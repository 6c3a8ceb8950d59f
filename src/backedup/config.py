"""YAML configuration loading for backedup."""

from __future__ import annotations

import os
from pathlib import Path
from string import Template
from typing import Any, Mapping, TextIO

import yaml
from pydantic import BaseModel, ConfigDict
from rich.console import Console

DEFAULT_CONFIG_FILENAME = ".backedup.yaml"
DEFAULT_BACKUP_TO = "$HOME/Dropbox/backedup"
DEFAULT_CONFIG_PATH = f"$HOME/{DEFAULT_CONFIG_FILENAME}"

DEFAULT_CONFIG = """\
backup_to: $HOME/Dropbox/backedup
paths:
  - $HOME/.ackrc
  - $HOME/.aws
  - $HOME/.bash_history
  - $HOME/.bash_profile
  - $HOME/.bashrc
  - $HOME/.curlrc
  - $HOME/.docker
  - $HOME/.gitconfig
  - $HOME/.gitignore
  - $HOME/.m2/settings.xml
  - $HOME/.netrc
  - $HOME/.oh-my-zsh
  - $HOME/.profile
  - $HOME/.ssh
  - $HOME/.tmux.conf
  - $HOME/.vim
  - $HOME/.vimrc
  - $HOME/.zprofile
  - $HOME/.zshrc
  # keep the config itself last so it is moved after being read
  - $HOME/.backedup.yaml
"""

YES = "yes"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be found, parsed or validated."""


class ConfigNotCreatedError(ConfigError):
    """Raised when the user declines to create a missing configuration file."""

    def __init__(self, message: str = "config not created") -> None:
        super().__init__(message)


class Config(BaseModel):
    """Fully resolved configuration; every path is absolute and expanded."""

    model_config = ConfigDict(frozen=True)

    config_path: Path
    backup_root: Path
    home_dir: Path
    paths: tuple[Path, ...] = ()


def resolve_home() -> Path:
    """Return the current user's home directory.

    ``$HOME`` wins when set; otherwise the platform user database is asked.
    """

    raw = os.environ.get("HOME")
    if raw:
        return Path(os.path.normpath(os.path.abspath(raw)))
    try:
        return Path(os.path.normpath(Path.home()))
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"Unable to determine the home directory: {exc}") from exc


def expand_path(raw: str | os.PathLike[str], *, home_dir: Path, base_dir: Path | None = None) -> Path:
    """Expand environment variables and ``~`` in ``raw`` and return an absolute path.

    ``$HOME`` always expands to ``home_dir``; unknown variables are left
    as-is. Symlinks are never resolved because
    configured paths are expected to become links.
    """

    env = dict(os.environ)
    env["HOME"] = str(home_dir)
    text = Template(str(raw)).safe_substitute(env)

    if text == "~" or text.startswith("~/"):
        text = str(home_dir) + text[1:]

    candidate = Path(text)
    if not candidate.is_absolute():
        candidate = (base_dir or Path.cwd()) / candidate
    return Path(os.path.normpath(candidate))


def default_config_path(home_dir: Path) -> Path:
    return expand_path(DEFAULT_CONFIG_PATH, home_dir=home_dir)


def default_backup_root(home_dir: Path) -> Path:
    return expand_path(DEFAULT_BACKUP_TO, home_dir=home_dir)


def load_config(path: Path | str | None = None, *, home_dir: Path | None = None) -> Config:
    """Load and validate a configuration file.

    Args:
        path: Optional path to the YAML file. Defaults to ``$HOME/.backedup.yaml``.
        home_dir: Home directory to expand against. Resolved from the
            environment when omitted.
    """

    home = home_dir or resolve_home()
    config_path = default_config_path(home) if path is None else expand_path(path, home_dir=home)

    if not config_path.exists():
        raise ConfigError(f"Configuration file '{config_path}' does not exist")

    try:
        data = yaml.safe_load(config_path.read_text())
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file '{config_path}' is not valid YAML: {exc}") from exc

    return _parse_config(data, config_path=config_path, home_dir=home)


def _parse_config(data: Any, *, config_path: Path, home_dir: Path) -> Config:
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration file '{config_path}' must contain a mapping")

    backup_to = data.get("backup_to")
    if not isinstance(backup_to, str) or not backup_to.strip():
        raise ConfigError("Configuration must define 'backup_to' as a non-empty string")

    paths_raw = data.get("paths") or []
    if not isinstance(paths_raw, list):
        raise ConfigError("Configuration 'paths' must be a list of strings")

    base_dir = config_path.parent
    paths: list[Path] = []
    for entry in paths_raw:
        if not isinstance(entry, str):
            raise ConfigError(f"Configuration path entry {entry!r} must be a string")
        paths.append(expand_path(entry, home_dir=home_dir, base_dir=base_dir))

    return Config(
        config_path=config_path,
        backup_root=expand_path(backup_to, home_dir=home_dir, base_dir=base_dir),
        home_dir=home_dir,
        paths=tuple(paths),
    )


def ensure_config(
    config_path: Path,
    *,
    home_dir: Path,
    console: Console,
    stdin: TextIO | None = None,
) -> bool:
    """Make sure ``config_path`` exists, prompting to create it on first run.

    A config already present in the default backup location is offered
    first; otherwise a default one is proposed. Returns ``True`` when a file
    was written.
    """

    if config_path.exists():
        return False

    backed_up_config = default_backup_root(home_dir) / DEFAULT_CONFIG_FILENAME
    if backed_up_config.exists():
        if not _confirm(console, f"{backed_up_config} exists, copy that to ~? <Yes|No>: ", stdin):
            raise ConfigNotCreatedError()
        _print(console, f"copying {backed_up_config} config to {config_path}")
        _write_config(config_path, backed_up_config.read_bytes())
        return True

    if not _confirm(console, f"{config_path} does not exist, create a default one? <Yes|No>: ", stdin):
        raise ConfigNotCreatedError()
    _print(console, f"creating {config_path}")
    _write_config(config_path, DEFAULT_CONFIG.encode())
    return True


def _confirm(console: Console, prompt: str, stdin: TextIO | None) -> bool:
    try:
        answer = console.input(prompt, markup=False, stream=stdin)
    except EOFError:
        return False
    return answer.strip().lower() == YES


def _print(console: Console, message: str) -> None:
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def _write_config(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    os.chmod(path, 0o644)
