"""Shared pytest fixtures for bootkit tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from bootkit.config.settings import BootSettings
from bootkit.plugins.discovery import StaticDiscovery
from bootkit.testing import BootTestFactory


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() side effects (the CLI calls it on every invocation)."""
    root = logging.getLogger()
    original_level = root.level
    boot_logger = logging.getLogger("bootkit")
    boot_level = boot_logger.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(original_level)
    boot_logger.setLevel(boot_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings() -> BootSettings:
    """Settings with code defaults only (no TOML walk-up)."""
    return BootSettings()


@pytest.fixture
def boot(settings: BootSettings) -> Generator[BootTestFactory]:
    """A fresh test factory per test with nothing to discover."""
    factory = BootTestFactory(discovery=StaticDiscovery(), settings=settings)
    try:
        yield factory
    finally:
        factory.shutdown()


@pytest.fixture
def make_boot(
    settings: BootSettings,
) -> Generator[Callable[[Iterable[Any]], BootTestFactory]]:
    """Build test factories whose auto-loading discovers the given modules."""
    factories: list[BootTestFactory] = []

    def make(modules: Iterable[Any]) -> BootTestFactory:
        factory = BootTestFactory(discovery=StaticDiscovery(modules), settings=settings)
        factories.append(factory)
        return factory

    try:
        yield make
    finally:
        for factory in factories:
            factory.shutdown()
