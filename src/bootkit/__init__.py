"""bootkit — assemble applications from modules and run them as commands.

    bootkit.app(*sys.argv[1:]).add_module(Application).auto_load_modules().exec()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

from bootkit.commands import BaseCommand, Command, CommandOutcome  # noqa: E402
from bootkit.di import BaseModule, Binder, Module, ServiceKey  # noqa: E402
from bootkit.errors import (  # noqa: E402
    BootError,
    DiscoveryError,
    MissingBindingError,
    UnknownCommandError,
)
from bootkit.runtime import Runtime, RuntimeBuilder  # noqa: E402

if TYPE_CHECKING:
    from bootkit.config.settings import BootSettings
    from bootkit.plugins.discovery import ModuleDiscovery


def app(
    *args: str,
    discovery: ModuleDiscovery | None = None,
    settings: BootSettings | None = None,
) -> RuntimeBuilder:
    """Start building the main application runtime for *args*."""
    return RuntimeBuilder(*args, discovery=discovery, settings=settings)


__all__ = [
    "BaseCommand",
    "BaseModule",
    "Binder",
    "BootError",
    "Command",
    "CommandOutcome",
    "DiscoveryError",
    "MissingBindingError",
    "Module",
    "Runtime",
    "RuntimeBuilder",
    "ServiceKey",
    "UnknownCommandError",
    "__version__",
    "app",
]
