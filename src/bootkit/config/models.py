"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here; ``bootkit.toml`` only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_ENTRY_POINT_GROUP = "bootkit.modules"


class CommandsConfig(BaseModel):
    """[commands] section."""

    model_config = {"frozen": True}

    default: str | None = None


class ModulesConfig(BaseModel):
    """[modules] section.

    Attributes:
        autoload: Whether the CLI auto-loads discovered modules.
        entry_point_group: Entry point group scanned for module plugins.
        exclude: Names of discovered modules to leave out of this environment.
    """

    model_config = {"frozen": True}

    autoload: bool = True
    entry_point_group: str = DEFAULT_ENTRY_POINT_GROUP
    exclude: list[str] = Field(default_factory=list)
