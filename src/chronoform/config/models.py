"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, chronoform.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from chronoform.domain.timestamps import is_rfc3339

# --- chronoform.toml sections ---


class StateConfig(BaseModel):
    """[state] section."""

    model_config = {"frozen": True}

    path: str = ".chronoform/state.db"
    busy_timeout_ms: int = Field(default=5000, ge=0)


class ClockConfig(BaseModel):
    """[clock] section.

    ``frozen_at`` pins every run to one instant (RFC 3339), which makes
    plans reproducible across machines.
    """

    model_config = {"frozen": True}

    frozen_at: str | None = None

    @field_validator("frozen_at")
    @classmethod
    def check_rfc3339(cls, value: str | None) -> str | None:
        if value is not None and not is_rfc3339(value):
            raise ValueError(f"frozen_at must be an RFC3339 timestamp, got {value!r}")
        return value


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".chronoform/plugins"
    disabled: list[str] = Field(default_factory=list)
