"""Entry-point module discovery via pluggy.

Plugins are loaded from the ``bootkit.modules`` setuptools entry point
group (or registered directly) and asked for modules through the
``bootkit_modules`` hook. Modules come back ordered by plugin name so that
discovery order does not depend on installation order.

INVARIANT: unlike lifecycle hooks, discovery failures are fatal. A plugin
that cannot load or answer aborts runtime construction with DiscoveryError.
A plugin answering None contributes nothing, which is not an error.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import pluggy

from bootkit.config.models import DEFAULT_ENTRY_POINT_GROUP
from bootkit.di.module import Module, as_module
from bootkit.errors import DiscoveryError
from bootkit.plugins.hookspecs import PROJECT_NAME, BootkitHookSpec

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages module plugin loading and implements ModuleDiscovery."""

    def __init__(self, group: str = DEFAULT_ENTRY_POINT_GROUP) -> None:
        self._group = group
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BootkitHookSpec)
        self._loaded: bool = False

    @property
    def group(self) -> str:
        return self._group

    @property
    def is_loaded(self) -> bool:
        """Whether entry points have been loaded."""
        return self._loaded

    def load(self) -> list[str]:
        """Load plugins from the entry point group. Returns the registered plugin names.

        Raises:
            DiscoveryError: If an entry point cannot be imported or registered.
        """
        try:
            count = self._pm.load_setuptools_entrypoints(self._group)
        except Exception as exc:
            raise DiscoveryError(
                f"Failed to load entry points from group '{self._group}': {exc}"
            ) from exc
        self._normalize_plugin_instances()
        self._loaded = True
        logger.debug("Loaded %d plugin(s) from entry point group %s", count, self._group)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin directly (e.g. built-in or test plugins)."""
        resolved_name = name or getattr(plugin, "__name__", None) or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins, sorted."""
        return sorted(name for name, _plugin in self._pm.list_name_plugin())

    def discover_modules(self) -> list[Module]:
        """Load entry points if needed and collect every plugin's modules.

        Raises:
            DiscoveryError: If loading fails or a plugin's hook raises or
                returns something that is not a sequence of modules.
        """
        if not self._loaded:
            self.load()

        modules: list[Module] = []
        hookimpls = sorted(
            self._pm.hook.bootkit_modules.get_hookimpls(),
            key=lambda impl: impl.plugin_name,
        )
        for impl in hookimpls:
            modules.extend(self._modules_from(impl.plugin_name, impl.function))
        logger.debug("Discovered modules: %s", [m.name for m in modules])
        return modules

    @staticmethod
    def _modules_from(plugin_name: str, hook: object) -> list[Module]:
        try:
            contributed = hook()  # type: ignore[operator]
        except Exception as exc:
            raise DiscoveryError(f"Plugin {plugin_name} failed to list modules: {exc}") from exc

        if contributed is None:
            logger.debug("Plugin %s contributes no modules", plugin_name)
            return []
        if isinstance(contributed, (str, bytes)) or not isinstance(contributed, Iterable):
            raise DiscoveryError(
                f"Plugin {plugin_name} returned {type(contributed).__name__}, "
                "expected a sequence of modules"
            )

        try:
            return [as_module(candidate) for candidate in contributed]
        except TypeError as exc:
            raise DiscoveryError(f"Plugin {plugin_name} returned an invalid module: {exc}") from exc

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin_name, plugin in list(self._pm.list_name_plugin()):
            if not inspect.isclass(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception as exc:
                raise DiscoveryError(
                    f"Failed to instantiate entry-point plugin {plugin_name}: {exc}"
                ) from exc
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
