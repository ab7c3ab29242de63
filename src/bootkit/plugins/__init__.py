"""Module discovery — explicit lists or pluggy entry points.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: discovery failures are fatal; an absent module set is not a failure.
"""

from bootkit.plugins.discovery import ModuleDiscovery, StaticDiscovery
from bootkit.plugins.hookspecs import hookimpl
from bootkit.plugins.manager import PluginManager

__all__ = ["ModuleDiscovery", "PluginManager", "StaticDiscovery", "hookimpl"]
