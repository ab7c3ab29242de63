"""Runtime — the immutable, fully composed result of applying all modules.

A Runtime exclusively owns one FrozenBindings snapshot. Services are built
lazily on first ``get`` and cached for the lifetime of this runtime only, so
two runtimes never share service instances unless a module bound a shared
object with ``to_instance``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from bootkit.di.keys import KeyLike, ServiceKey, as_key
from bootkit.di.registry import FrozenBindings, Provider

if TYPE_CHECKING:
    from bootkit.commands.outcome import CommandOutcome

__all__ = ["Runtime"]

logger = logging.getLogger(__name__)


class Runtime:
    """Lookup-by-key container plus the command-execution entry point."""

    def __init__(self, bindings: FrozenBindings, args: Sequence[str] = ()) -> None:
        self._bindings = bindings
        self._args = tuple(args)
        self._instances: dict[ServiceKey, Any] = {}
        # Re-entrant: providers call back into get() for their dependencies.
        self._lock = threading.RLock()
        self._shutdown_hooks: list[Callable[[], Any]] = []

    @property
    def bindings(self) -> FrozenBindings:
        return self._bindings

    @property
    def args(self) -> tuple[str, ...]:
        """Arguments this runtime was built with; used by ``run()`` by default."""
        return self._args

    def lookup(self, key: KeyLike, qualifier: str | None = None) -> Provider:
        """Return the provider bound to *key* without invoking it.

        Raises:
            MissingBindingError: If the key was never declared.
        """
        return self._bindings.lookup(key, qualifier)

    def get(self, key: KeyLike, qualifier: str | None = None) -> Any:
        """Return the service bound to *key*, building it on first access.

        Raises:
            MissingBindingError: If the key (or one of its dependencies) was never declared.
        """
        service_key = as_key(key, qualifier)
        with self._lock:
            if service_key in self._instances:
                return self._instances[service_key]
            provider = self._bindings.lookup(service_key)
            instance = provider(self)
            self._instances[service_key] = instance
            return instance

    def run(self, args: Sequence[str] | None = None) -> CommandOutcome:
        """Dispatch *args* (default: the runtime's own arguments) to one command."""
        from bootkit.commands.dispatcher import CommandDispatcher

        dispatcher: CommandDispatcher = self.get(CommandDispatcher)
        return dispatcher.dispatch(self._args if args is None else args)

    def add_shutdown_hook(self, hook: Callable[[], Any]) -> None:
        """Register *hook* to run on ``shutdown()``; hooks run in reverse order."""
        self._shutdown_hooks.append(hook)

    def shutdown(self) -> None:
        """Run shutdown hooks. Failures are logged, never raised."""
        while self._shutdown_hooks:
            hook = self._shutdown_hooks.pop()
            try:
                hook()
            except Exception:
                logger.warning("Shutdown hook %r failed", hook, exc_info=True)
