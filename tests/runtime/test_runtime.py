"""Tests for Runtime — lookups, per-runtime singletons and shutdown."""

from __future__ import annotations

import threading
from typing import Annotated

import pytest

from bootkit.di.keys import ServiceKey
from bootkit.di.registry import Binder, BindingRegistry
from bootkit.errors import MissingBindingError
from bootkit.runtime.runtime import Runtime


class Clock:
    pass


class Report:
    def __init__(self, clock: Clock, title: Annotated[str, "title"]) -> None:
        self.clock = clock
        self.title = title


def _runtime(configure) -> Runtime:  # type: ignore[no-untyped-def]
    registry = BindingRegistry()
    configure(Binder(registry))
    return Runtime(registry.freeze())


class TestLookup:
    def test_lookup_returns_provider_without_calling_it(self) -> None:
        calls: list[int] = []

        def provide(_resolver: object) -> Clock:
            calls.append(1)
            return Clock()

        runtime = _runtime(lambda b: b.bind(Clock).to_provider(provide))
        provider = runtime.lookup(Clock)
        assert provider is provide
        assert calls == []

    def test_missing_key(self) -> None:
        runtime = _runtime(lambda b: None)
        with pytest.raises(MissingBindingError):
            runtime.get(Clock)
        with pytest.raises(MissingBindingError):
            runtime.lookup(Clock)

    def test_qualified_get(self) -> None:
        runtime = _runtime(lambda b: b.bind(str, "title").to_instance("Weekly"))
        assert runtime.get(str, "title") == "Weekly"
        assert runtime.get(ServiceKey(str, "title")) == "Weekly"

    def test_dependencies_resolved_through_runtime(self) -> None:
        def configure(binder: Binder) -> None:
            binder.bind(Clock).to(Clock)
            binder.bind(str, "title").to_instance("Weekly")
            binder.bind(Report).to(Report)

        runtime = _runtime(configure)
        report = runtime.get(Report)
        assert report.title == "Weekly"
        assert report.clock is runtime.get(Clock)

    def test_missing_dependency_surfaces(self) -> None:
        runtime = _runtime(lambda b: b.bind(Report).to(Report))
        with pytest.raises(MissingBindingError, match="Clock"):
            runtime.get(Report)


class TestSingletons:
    def test_same_instance_within_runtime(self) -> None:
        runtime = _runtime(lambda b: b.bind(Clock).to(Clock))
        assert runtime.get(Clock) is runtime.get(Clock)

    def test_runtimes_do_not_share_instances(self) -> None:
        registry = BindingRegistry()
        Binder(registry).bind(Clock).to(Clock)
        frozen = registry.freeze()
        assert Runtime(frozen).get(Clock) is not Runtime(frozen).get(Clock)

    def test_concurrent_get_builds_once(self) -> None:
        built: list[Clock] = []
        barrier = threading.Barrier(8)

        def provide(_resolver: object) -> Clock:
            clock = Clock()
            built.append(clock)
            return clock

        runtime = _runtime(lambda b: b.bind(Clock).to_provider(provide))
        results: list[Clock] = []

        def worker() -> None:
            barrier.wait()
            results.append(runtime.get(Clock))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(built) == 1
        assert all(r is built[0] for r in results)


class TestShutdown:
    def test_hooks_run_in_reverse_order_once(self) -> None:
        runtime = _runtime(lambda b: None)
        calls: list[str] = []
        runtime.add_shutdown_hook(lambda: calls.append("first"))
        runtime.add_shutdown_hook(lambda: calls.append("second"))

        runtime.shutdown()
        runtime.shutdown()

        assert calls == ["second", "first"]

    def test_failing_hook_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        runtime = _runtime(lambda b: None)
        calls: list[str] = []
        runtime.add_shutdown_hook(lambda: calls.append("ran"))
        runtime.add_shutdown_hook(lambda: 1 / 0)

        with caplog.at_level("WARNING"):
            runtime.shutdown()

        assert calls == ["ran"]
        assert "Shutdown hook" in caplog.text
