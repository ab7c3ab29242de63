"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click, or explicit test overrides
  2. Env vars     — ``BOOTKIT_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``bootkit.toml`` discovered via walk-up or ``--config``
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bootkit.config.discovery import find_config
from bootkit.config.models import CommandsConfig, ModulesConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``bootkit.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path for the settings object currently being constructed.
_tls = threading.local()


class BootSettings(BaseSettings):
    """Frozen settings shared by the CLI, the builder and the core module.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        verbose: DEBUG logging for the ``bootkit`` logger.
        log_json: JSON log lines instead of the console renderer.
        json_output: Print outcomes as JSON.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BOOTKIT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    verbose: bool = False
    log_json: bool = False
    json_output: bool = False

    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    modules: ModulesConfig = Field(default_factory=ModulesConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> BootSettings:
        """Construct settings for an application run.

        Uses *config_path* when given, otherwise discovers ``bootkit.toml``
        by walking up from *start* (default: cwd). *overrides* win over
        every other source.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
