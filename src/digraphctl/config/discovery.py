"""Config file discovery and loading.

``digraphctl.toml`` is looked up from the working directory towards the
filesystem root, stopping at the first repository root (a directory with
``.git``) so a checkout never picks up a config from an enclosing project.
``DIGRAPHCTL_CONFIG`` and ``--config`` override the lookup.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from digraphctl.config.models import DigraphConfig

CONFIG_FILENAME = "digraphctl.toml"
CONFIG_ENV_VAR = "DIGRAPHCTL_CONFIG"
_REPO_MARKER = ".git"


class ConfigError(ValueError):
    """A config file exists but cannot be parsed or validated."""


def _ancestors(start: Path) -> list[Path]:
    """*start* and its parents, up to and including the repository root."""
    chain = []
    for directory in (start, *start.parents):
        chain.append(directory)
        if (directory / _REPO_MARKER).exists():
            break
    return chain


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file for *start* (default: cwd).

    ``DIGRAPHCTL_CONFIG`` wins when set; it must name an existing file,
    otherwise no config is used at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _ancestors((start or Path.cwd()).resolve()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> DigraphConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default DigraphConfig if no file is found.

    Raises:
        ConfigError: On invalid TOML or values the config models reject.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return DigraphConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return DigraphConfig.model_validate(data)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc
