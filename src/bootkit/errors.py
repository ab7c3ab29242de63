"""Error taxonomy for application bootstrap.

Construction-time errors (discovery, binding, module configuration) abort
the bootstrap. Execution-time errors inside a command never escape the
dispatcher; they are converted into a failed CommandOutcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bootkit.di.keys import ServiceKey

__all__ = [
    "BindingError",
    "BootError",
    "DiscoveryError",
    "FactoryStateError",
    "MissingBindingError",
    "ModuleConfigurationError",
    "RegistryFrozenError",
    "UnknownCommandError",
]


class BootError(Exception):
    """Base class for all bootkit errors."""


class DiscoveryError(BootError):
    """Module discovery failed. Fatal: no module has been configured yet."""


class BindingError(BootError):
    """A binding could not be declared (e.g. an un-annotated constructor parameter)."""


class RegistryFrozenError(BindingError):
    """A binding was declared on a registry that has already been frozen."""


class MissingBindingError(BootError, KeyError):
    """Raised on lookup of a key that no module ever declared."""

    def __init__(self, key: ServiceKey) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No binding declared for {self.key}"


class ModuleConfigurationError(BootError):
    """A module raised from ``configure``."""

    def __init__(self, module_name: str, cause: BaseException) -> None:
        super().__init__(f"Module '{module_name}' failed to configure: {cause}")
        self.module_name = module_name
        self.cause = cause


class UnknownCommandError(BootError):
    """No command matched the arguments and no default command is configured."""

    def __init__(self, args: Any, known: list[str] | None = None) -> None:
        self.args_seen = list(args)
        self.known = sorted(known or [])
        available = ", ".join(f"--{name}" for name in self.known) or "none"
        super().__init__(
            f"No command selected by arguments {self.args_seen} "
            f"and no default command configured (available: {available})"
        )


class FactoryStateError(BootError):
    """A test runtime factory was used after it produced its runtime."""
