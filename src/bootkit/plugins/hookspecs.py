"""Pluggy hook specifications for module plugins.

A distribution contributes modules by exposing, in the ``bootkit.modules``
entry point group, an object (module, class or instance) implementing
``bootkit_modules``::

    [project.entry-points."bootkit.modules"]
    jetty = "bootkit_jetty.plugin"

    # bootkit_jetty/plugin.py
    from bootkit.plugins import hookimpl

    @hookimpl
    def bootkit_modules():
        return [JettyModule()]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from bootkit.di.module import Module

PROJECT_NAME = "bootkit"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class BootkitHookSpec:
    """Hook specifications for the bootkit plugin system."""

    @hookspec
    def bootkit_modules(self) -> Sequence[Module] | None:
        """Return the modules this plugin contributes.

        Returning None (or an empty sequence) is a normal outcome: the
        plugin has nothing to contribute in this environment.
        """
