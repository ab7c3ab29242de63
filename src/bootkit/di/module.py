"""Module — a named unit of configuration.

A module contributes bindings through ``configure(binder)``. It must not
block, must only raise for programmer errors, and must be safe to run once
per ``RuntimeBuilder.build()``.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from bootkit.di.registry import Binder

__all__ = ["BaseModule", "FunctionModule", "Module", "as_module"]


@runtime_checkable
class Module(Protocol):
    """Anything with a ``name`` and a ``configure(binder)`` method."""

    @property
    def name(self) -> str: ...

    def configure(self, binder: Binder) -> None: ...


class BaseModule:
    """Convenience base class; the module name defaults to the class name.

    Usage::

        class Application(BaseModule):
            def configure(self, binder: Binder) -> None:
                binder.bind(MyService).to(MyServiceImpl)
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    def configure(self, binder: Binder) -> None:
        raise NotImplementedError(f"{self.name} must implement configure()")

    def __repr__(self) -> str:
        return f"<{self.name}>"


class FunctionModule(BaseModule):
    """Wraps a plain ``fn(binder)`` callable so it can be added as an ad hoc module."""

    def __init__(self, fn: Callable[[Binder], Any], name: str | None = None) -> None:
        self._fn = fn
        self._name = name or getattr(fn, "__qualname__", None) or repr(fn)

    @property
    def name(self) -> str:
        return self._name

    def configure(self, binder: Binder) -> None:
        self._fn(binder)


def as_module(candidate: Any) -> Module:
    """Coerce a module instance, module class, or ``fn(binder)`` callable into a Module.

    Raises:
        TypeError: If *candidate* is none of those.
    """
    if inspect.isclass(candidate):
        candidate = candidate()
    if isinstance(candidate, Module):
        return candidate
    if callable(candidate):
        return FunctionModule(candidate)
    raise TypeError(f"Not a module: {candidate!r}")
