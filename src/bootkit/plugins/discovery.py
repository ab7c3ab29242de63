"""ModuleDiscovery — the boundary that enumerates available modules.

The builder treats discovery as a pure query: it is invoked once and its
result order is the application order of auto-loaded modules. Any failure
surfaces as DiscoveryError before a single module is configured.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from bootkit.di.module import Module, as_module

__all__ = ["ModuleDiscovery", "StaticDiscovery"]


@runtime_checkable
class ModuleDiscovery(Protocol):
    def discover_modules(self) -> Sequence[Module]: ...


class StaticDiscovery:
    """Discovery over an explicit module list passed in at startup."""

    def __init__(self, modules: Iterable[Any] = ()) -> None:
        self._modules = [as_module(m) for m in modules]

    def discover_modules(self) -> list[Module]:
        return list(self._modules)
