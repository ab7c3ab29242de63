"""Tests for PluginManager — entry-point discovery of modules via pluggy."""

from __future__ import annotations

import types

import pluggy
import pytest

from bootkit.di.module import BaseModule, FunctionModule
from bootkit.di.registry import Binder
from bootkit.errors import DiscoveryError
from bootkit.plugins import PluginManager, StaticDiscovery, hookimpl
from bootkit.plugins.discovery import ModuleDiscovery


class JettyModule(BaseModule):
    def configure(self, binder: Binder) -> None:
        binder.bind(str, "server").to_instance("jetty")


class JdbcModule(BaseModule):
    def configure(self, binder: Binder) -> None:
        binder.bind(str, "db").to_instance("jdbc")


class _JettyPlugin:
    @hookimpl
    def bootkit_modules(self) -> list[object]:
        return [JettyModule()]


class _JdbcPlugin:
    @hookimpl
    def bootkit_modules(self) -> list[object]:
        return [JdbcModule, lambda binder: None]


class _AbsentPlugin:
    """Plugin whose optional dependency is not installed in this environment."""

    @hookimpl
    def bootkit_modules(self) -> None:
        return None


class _CrashingPlugin:
    @hookimpl
    def bootkit_modules(self) -> list[object]:
        raise ImportError("no module named 'jersey'")


class _BadReturnPlugin:
    @hookimpl
    def bootkit_modules(self) -> object:
        return 42


class _BadModulePlugin:
    @hookimpl
    def bootkit_modules(self) -> list[object]:
        return [42]


@pytest.fixture
def pm(monkeypatch: pytest.MonkeyPatch) -> PluginManager:
    """PluginManager that never touches installed entry points."""
    manager = PluginManager()
    monkeypatch.setattr(manager._pm, "load_setuptools_entrypoints", lambda group: 0)
    return manager


class TestPluginManager:
    def test_hook_relay_has_spec(self) -> None:
        assert hasattr(PluginManager()._pm.hook, "bootkit_modules")

    def test_implements_module_discovery(self) -> None:
        assert isinstance(PluginManager(), ModuleDiscovery)
        assert isinstance(StaticDiscovery(), ModuleDiscovery)

    def test_register_plugin(self, pm: PluginManager) -> None:
        pm.register_plugin(_JettyPlugin(), name="jetty")
        assert "jetty" in pm.list_plugin_names()

    def test_register_plugin_default_name(self, pm: PluginManager) -> None:
        pm.register_plugin(_JettyPlugin())
        assert "_JettyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self, pm: PluginManager) -> None:
        plugin = _JettyPlugin()
        pm.register_plugin(plugin, name="jetty")
        pm.unregister(plugin)
        assert "jetty" not in pm.list_plugin_names()

    def test_is_loaded(self, pm: PluginManager) -> None:
        assert pm.is_loaded is False
        pm.discover_modules()
        assert pm.is_loaded is True

    def test_default_group(self) -> None:
        assert PluginManager().group == "bootkit.modules"


class TestDiscoverModules:
    def test_modules_ordered_by_plugin_name(self, pm: PluginManager) -> None:
        pm.register_plugin(_JettyPlugin(), name="b-jetty")
        pm.register_plugin(_JdbcPlugin(), name="a-jdbc")

        modules = pm.discover_modules()

        assert [type(m) for m in modules] == [JdbcModule, FunctionModule, JettyModule]

    def test_absent_contribution_is_empty(self, pm: PluginManager) -> None:
        pm.register_plugin(_AbsentPlugin(), name="jersey")
        pm.register_plugin(_JettyPlugin(), name="jetty")
        assert [m.name for m in pm.discover_modules()] == ["JettyModule"]

    def test_no_plugins_no_modules(self, pm: PluginManager) -> None:
        assert pm.discover_modules() == []

    def test_module_plugin(self, pm: PluginManager) -> None:
        plugin = types.ModuleType("fake_plugin")

        @hookimpl
        def bootkit_modules() -> list[object]:
            return [JettyModule()]

        plugin.bootkit_modules = bootkit_modules  # type: ignore[attr-defined]
        pm.register_plugin(plugin)

        assert "fake_plugin" in pm.list_plugin_names()
        assert [m.name for m in pm.discover_modules()] == ["JettyModule"]

    @pytest.mark.parametrize(
        ("plugin", "message"),
        [
            (_CrashingPlugin(), "failed to list modules: no module named 'jersey'"),
            (_BadReturnPlugin(), "returned int, expected a sequence of modules"),
            (_BadModulePlugin(), "returned an invalid module"),
        ],
        ids=["raises", "bad-return", "bad-module"],
    )
    def test_failures_are_discovery_errors(
        self, pm: PluginManager, plugin: object, message: str
    ) -> None:
        pm.register_plugin(plugin, name="broken")
        with pytest.raises(DiscoveryError, match=message):
            pm.discover_modules()

    def test_entry_point_load_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        manager = PluginManager(group="bootkit.test")

        def explode(group: str) -> int:
            raise ModuleNotFoundError("bootkit_jersey")

        monkeypatch.setattr(manager._pm, "load_setuptools_entrypoints", explode)
        with pytest.raises(DiscoveryError, match="group 'bootkit.test'"):
            manager.discover_modules()

    def test_entry_point_classes_are_instantiated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        manager = PluginManager()

        def load(group: str) -> int:
            manager._pm.register(_JettyPlugin, name="jetty")
            return 1

        monkeypatch.setattr(manager._pm, "load_setuptools_entrypoints", load)
        modules = manager.discover_modules()
        assert [m.name for m in modules] == ["JettyModule"]
        assert not any(isinstance(p, type) for _n, p in manager._pm.list_name_plugin())

    def test_hookimpl_marker_project(self) -> None:
        assert isinstance(hookimpl, pluggy.HookimplMarker)
        assert hookimpl.project_name == "bootkit"


class TestStaticDiscovery:
    def test_preserves_order_and_coerces(self) -> None:
        discovery = StaticDiscovery([JettyModule, JdbcModule(), lambda binder: None])
        modules = discovery.discover_modules()
        assert [type(m) for m in modules] == [JettyModule, JdbcModule, FunctionModule]

    def test_returns_fresh_list(self) -> None:
        discovery = StaticDiscovery([JettyModule])
        discovery.discover_modules().clear()
        assert len(discovery.discover_modules()) == 1
