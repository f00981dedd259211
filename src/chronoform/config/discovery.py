"""Locating the workspace a chronoform run operates on.

The workspace root is the nearest directory, walking up from the CWD, that
holds a ``chronoform.toml`` or an existing ``.chronoform/`` state
directory. ``CHRONOFORM_CONFIG`` (or ``--config``) names the file directly
and disables the walk for the config file.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "chronoform.toml"
CONFIG_ENV_VAR = "CHRONOFORM_CONFIG"
STATE_DIRNAME = ".chronoform"


def _walk_up(start: Path | None) -> Iterator[Path]:
    here = (start or Path.cwd()).resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect, or None.

    ``CHRONOFORM_CONFIG`` wins when set; if it names a missing file there
    is no config at all rather than a fallback to the walk.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    for directory in _walk_up(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_root(start: Path | None = None) -> Path | None:
    """Nearest directory holding a config file or a state directory."""
    for directory in _walk_up(start):
        if (directory / CONFIG_FILENAME).is_file() or (directory / STATE_DIRNAME).is_dir():
            return directory
    return None
