"""CoreModule — bindings every runtime starts with.

The builder applies CoreModule before any discovered or explicit module,
so applications can override each of these bindings like any other.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from bootkit.commands.base import BaseCommand, Command
from bootkit.commands.dispatcher import CommandDispatcher
from bootkit.commands.outcome import CommandOutcome
from bootkit.config.settings import BootSettings
from bootkit.di.module import BaseModule
from bootkit.di.registry import Binder
from bootkit.runtime.runtime import Runtime

logger = logging.getLogger(__name__)


class HelpCommand(BaseCommand):
    """Lists the bound commands and their descriptions."""

    name = "help"
    description = "Print the available commands."

    def __init__(self, runtime: Runtime, console: Console, settings: BootSettings) -> None:
        self._runtime = runtime
        self._console = console
        self._settings = settings

    def execute(self, args: Sequence[str]) -> CommandOutcome:
        dispatcher: CommandDispatcher = self._runtime.get(CommandDispatcher)
        default = dispatcher.default_command()
        descriptions = {name: self._describe(name) for name in dispatcher.command_names()}

        # stdout carries only the JSON outcome in --json mode.
        if not self._settings.json_output:
            self._console.print(self._table(descriptions, default))

        return self.ok(commands=descriptions, default=default)

    @staticmethod
    def _table(descriptions: dict[str, str], default: str | None) -> Table:
        table = Table(title="Commands", show_header=True, header_style="bold")
        table.add_column("Option")
        table.add_column("Description")
        for name, description in descriptions.items():
            marker = " (default)" if name == default else ""
            table.add_row(f"--{name}{marker}", description)
        return table

    def _describe(self, name: str) -> str:
        try:
            command = self._runtime.get(Command, name)
        except Exception:
            logger.warning("Could not build command %s for help", name, exc_info=True)
            return "(unavailable)"
        return getattr(command, "description", "") or ""


class CoreModule(BaseModule):
    """Binds settings, the stdout console, the dispatcher and the help command."""

    def __init__(self, settings: BootSettings) -> None:
        self._settings = settings

    def configure(self, binder: Binder) -> None:
        binder.bind(Runtime).to_provider(lambda runtime: runtime)
        binder.bind(BootSettings).to_instance(self._settings)
        binder.bind(Console).to_provider(lambda _runtime: Console())
        binder.bind(CommandDispatcher).to(CommandDispatcher)
        binder.add_command(HelpCommand)
        if self._settings.commands.default:
            binder.set_default_command(self._settings.commands.default)
