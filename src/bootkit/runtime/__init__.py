"""Runtime assembly — the builder and the immutable runtime it produces."""

from bootkit.runtime.runtime import Runtime
from bootkit.runtime.builder import RuntimeBuilder  # noqa: I001

__all__ = ["Runtime", "RuntimeBuilder"]
