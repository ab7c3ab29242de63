"""Test harness — isolated runtimes with ad hoc module overrides."""

from bootkit.testing.factory import BootTestFactory, TestRuntimeFactory, app

__all__ = ["BootTestFactory", "TestRuntimeFactory", "app"]
