"""RuntimeBuilder — accumulates modules and composes them into a Runtime.

Application order is always: CoreModule, then auto-discovered modules in
discovery order, then explicit modules in the order they were added. This
holds whether ``auto_load_modules()`` is called before or after
``add_module()``, so explicit modules can always override discovered ones.

Module application is sequential and on the calling thread; override
semantics depend on that order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bootkit.config.settings import BootSettings
from bootkit.di.module import Module, as_module
from bootkit.di.registry import Binder, BindingRegistry
from bootkit.errors import BootError, DiscoveryError, ModuleConfigurationError
from bootkit.runtime.runtime import Runtime

if TYPE_CHECKING:
    from bootkit.commands.outcome import CommandOutcome
    from bootkit.plugins.discovery import ModuleDiscovery

__all__ = ["RuntimeBuilder"]

logger = logging.getLogger(__name__)


class RuntimeBuilder:
    """Collects modules and builds independent Runtimes from them.

    Usage::

        outcome = (
            RuntimeBuilder("--server")
            .add_module(Application)
            .auto_load_modules()
            .exec()
        )
    """

    def __init__(
        self,
        *args: str,
        discovery: ModuleDiscovery | None = None,
        settings: BootSettings | None = None,
    ) -> None:
        self._args = list(args)
        self._discovery = discovery
        self._settings = settings
        self._discovered: list[Module] | None = None
        self._explicit: list[Module] = []

    @property
    def settings(self) -> BootSettings:
        """Settings used for this builder, loaded on first access if none were given."""
        if self._settings is None:
            self._settings = BootSettings.load()
        return self._settings

    @property
    def args(self) -> list[str]:
        return list(self._args)

    @property
    def modules(self) -> list[Module]:
        """Final application order: discovered modules first, then explicit ones."""
        return [*(self._discovered or []), *self._explicit]

    def add_module(self, module: Any) -> RuntimeBuilder:
        """Append an explicit module (instance, class, or ``fn(binder)`` callable)."""
        self._explicit.append(as_module(module))
        return self

    def add_modules(self, *modules: Any) -> RuntimeBuilder:
        for module in modules:
            self.add_module(module)
        return self

    def auto_load_modules(self) -> RuntimeBuilder:
        """Invoke discovery once and place its modules ahead of explicit ones.

        Repeated calls are no-ops. Modules named in ``settings.modules.exclude``
        are left out.

        Raises:
            DiscoveryError: If discovery fails.
        """
        if self._discovered is not None:
            return self

        discovery = self._discovery or self._default_discovery()
        try:
            found = list(discovery.discover_modules())
        except DiscoveryError:
            raise
        except Exception as exc:
            raise DiscoveryError(f"Module discovery failed: {exc}") from exc

        excluded = set(self.settings.modules.exclude)
        discovered = []
        for candidate in found:
            try:
                module = as_module(candidate)
            except TypeError as exc:
                raise DiscoveryError(str(exc)) from exc
            if module.name in excluded:
                logger.debug("Skipping excluded module %s", module.name)
                continue
            discovered.append(module)

        self._discovered = discovered
        logger.debug("Auto-loaded modules: %s", [m.name for m in discovered])
        return self

    def build(self) -> Runtime:
        """Apply every module to a fresh registry, freeze it, and return a new Runtime.

        Each call yields an independent Runtime. Module ``configure`` methods
        are re-run per call and must therefore be idempotent.

        Raises:
            ModuleConfigurationError: If a module's ``configure`` raises.
        """
        from bootkit.commands.core import CoreModule

        registry = BindingRegistry()
        for module in [CoreModule(self.settings), *self.modules]:
            binder = Binder(registry, source=module.name)
            try:
                module.configure(binder)
            except BootError:
                raise
            except Exception as exc:
                raise ModuleConfigurationError(module.name, exc) from exc

        logger.debug("Built runtime with %d binding(s)", len(registry))
        return Runtime(registry.freeze(), args=self._args)

    def exec(self) -> CommandOutcome:
        """Build a runtime, dispatch the builder's arguments, then shut the runtime down."""
        runtime = self.build()
        try:
            return runtime.run()
        finally:
            runtime.shutdown()

    def _default_discovery(self) -> ModuleDiscovery:
        from bootkit.plugins.manager import PluginManager

        return PluginManager(self.settings.modules.entry_point_group)
