"""ServiceKey — the address of a binding.

A key is a type plus an optional qualifier. Equal keys address the same
binding, so declaring an equal key twice replaces the earlier provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["KeyLike", "ServiceKey", "as_key"]


@dataclass(frozen=True)
class ServiceKey:
    """Identifies one binding.

    Attributes:
        type: The abstract type (or any hashable type alias) being bound.
        qualifier: Optional name used to tell apart several bindings of one type.
    """

    type: Any
    qualifier: str | None = None

    @classmethod
    def of(cls, type_: Any, qualifier: str | None = None) -> ServiceKey:
        return cls(type_, qualifier)

    def __str__(self) -> str:
        name = getattr(self.type, "__qualname__", None) or repr(self.type)
        if self.qualifier is None:
            return name
        return f"{name}[{self.qualifier!r}]"


KeyLike = ServiceKey | Any


def as_key(key: KeyLike, qualifier: str | None = None) -> ServiceKey:
    """Normalise a type (plus optional qualifier) or an existing key into a ServiceKey."""
    if isinstance(key, ServiceKey):
        if qualifier is not None and qualifier != key.qualifier:
            return ServiceKey(key.type, qualifier)
        return key
    return ServiceKey(key, qualifier)
