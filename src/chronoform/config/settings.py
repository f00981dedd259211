"""ChronoSettings — one frozen object for CLI flags, env vars and chronoform.toml.

Highest priority first:
  1. Keyword arguments (the root CLI group's flags)
  2. ``CHRONOFORM_*`` env vars, ``__`` between section and key
     (``CHRONOFORM_STATE__PATH``)
  3. ``chronoform.toml``
  4. Defaults on the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from chronoform.config.discovery import find_config, find_root
from chronoform.config.models import ClockConfig, PluginsConfig, StateConfig
from chronoform.domain.timestamps import is_rfc3339


def _read_toml(path: Path | None) -> dict[str, Any]:
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the parsed ``chronoform.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = _read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# pydantic-settings builds sources from a classmethod, so the file chosen by
# from_cli() reaches settings_customise_sources through this slot.
_pending = threading.local()


class ChronoSettings(BaseSettings):
    """Settings for a single chronoform run.

    Attributes:
        root: Workspace directory; relative ``[state] path`` and
            ``[plugins] local_dir`` are resolved against it.
        config_path: The ``chronoform.toml`` in effect, if any.
        now: RFC 3339 instant the clock is pinned to (``--now``); takes
            precedence over ``[clock] frozen_at``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CHRONOFORM_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    now: str | None = None

    state: StateConfig = Field(default_factory=StateConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("now")
    @classmethod
    def check_now(cls, value: str | None) -> str | None:
        if value is not None and not is_rfc3339(value):
            raise ValueError(f"now must be an RFC3339 timestamp, got {value!r}")
        return value

    @property
    def pinned_now(self) -> str | None:
        """The instant every clock read returns, or None for the system clock."""
        return self.now or self.clock.frozen_at

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_source = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return (init_settings, env_settings, toml_source)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> ChronoSettings:
        """Build settings for one invocation.

        *config_path* (``--config``) names the TOML file; otherwise it is
        discovered by walking up from *root* or the CWD. Without an explicit
        *root*, the workspace is the config file's directory, else the
        nearest directory holding ``.chronoform/``, else the CWD. Flags
        passed as ``None`` were not given and do not mask env or TOML.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else (find_root() or Path.cwd())

        given = {name: value for name, value in cli_flags.items() if value is not None}

        _pending.toml_path = toml_path
        try:
            return cls(root=root, config_path=toml_path, **given)
        finally:
            _pending.toml_path = None
