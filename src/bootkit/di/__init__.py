"""Binding layer — keys, registry, binder and modules.

INVARIANT: last declaration of a key wins; module order decides overrides.
"""

from bootkit.di.keys import ServiceKey, as_key
from bootkit.di.module import BaseModule, FunctionModule, Module, as_module
from bootkit.di.registry import (
    Binder,
    Binding,
    BindingRegistry,
    FrozenBindings,
    Provider,
    constructor_provider,
)

__all__ = [
    "BaseModule",
    "Binder",
    "Binding",
    "BindingRegistry",
    "FrozenBindings",
    "FunctionModule",
    "Module",
    "Provider",
    "ServiceKey",
    "as_key",
    "as_module",
    "constructor_provider",
]
