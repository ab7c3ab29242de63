"""CommandDispatcher — turns process arguments into exactly one CommandOutcome.

Resolution: the first ``--<name>`` token naming a bound command selects it
and is removed from the arguments; the rest go to the command. Without such
a token the default command (if any) receives all arguments.

INVARIANT: dispatch never raises for command failures. Unknown commands and
exceptions raised while obtaining or executing a command come back as failed
outcomes. The dispatcher keeps no state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bootkit.commands.base import Command
from bootkit.commands.outcome import CommandOutcome
from bootkit.di.keys import ServiceKey
from bootkit.errors import UnknownCommandError
from bootkit.runtime.runtime import Runtime

__all__ = ["DEFAULT_COMMAND", "CommandDispatcher"]

logger = logging.getLogger(__name__)

# Bound to a command name (str) when the application has a default command.
DEFAULT_COMMAND = ServiceKey(str, "bootkit.default_command")

_FLAG_PREFIX = "--"


class CommandDispatcher:
    """Selects, resolves and runs one command per call."""

    def __init__(self, runtime: Runtime) -> None:
        self._runtime = runtime

    def command_names(self) -> list[str]:
        """Names of all bound commands, in declaration order."""
        return [
            key.qualifier
            for key in self._runtime.bindings.keys_of_type(Command)
            if key.qualifier is not None
        ]

    def default_command(self) -> str | None:
        if DEFAULT_COMMAND not in self._runtime.bindings:
            return None
        return self._runtime.get(DEFAULT_COMMAND)

    def resolve(self, args: Sequence[str]) -> tuple[str, list[str]]:
        """Return ``(command_name, remaining_args)`` for *args*.

        Raises:
            UnknownCommandError: If no token names a command and there is no default.
        """
        names = self.command_names()
        for index, token in enumerate(args):
            if not token.startswith(_FLAG_PREFIX):
                continue
            candidate = token[len(_FLAG_PREFIX) :]
            if candidate in names:
                return candidate, [*args[:index], *args[index + 1 :]]

        default = self.default_command()
        if default is None:
            raise UnknownCommandError(args, names)
        return default, list(args)

    def dispatch(self, args: Sequence[str]) -> CommandOutcome:
        args = list(args)
        try:
            name, command_args = self.resolve(args)
        except UnknownCommandError as exc:
            logger.debug("No command for arguments %s", args)
            return CommandOutcome.failure(
                str(exc),
                code="UNKNOWN_COMMAND",
                detail={"args": exc.args_seen, "available": exc.known},
            )
        except Exception as exc:
            logger.error("Resolving a command for %s failed", args, exc_info=True)
            return CommandOutcome.failure(
                f"Could not resolve a command: {exc}",
                detail={"exception": type(exc).__name__, "error": str(exc)},
            )

        if ServiceKey(Command, name) not in self._runtime.bindings:
            return CommandOutcome.failure(
                f"Default command '{name}' is not bound",
                command=name,
                code="UNKNOWN_COMMAND",
                detail={"args": args, "available": sorted(self.command_names())},
            )

        try:
            command = self._runtime.get(Command, name)
            logger.debug("Executing command %s with %s", name, command_args)
            outcome = command.execute(command_args)
        except Exception as exc:
            logger.error("Command %s failed", name, exc_info=True)
            return CommandOutcome.failure(
                f"Command '{name}' failed: {exc}",
                command=name,
                detail={"exception": type(exc).__name__, "error": str(exc)},
            )

        if outcome is None:
            return CommandOutcome.success(command=name)
        if not isinstance(outcome, CommandOutcome):
            return CommandOutcome.failure(
                f"Command '{name}' returned {type(outcome).__name__}, not a CommandOutcome",
                command=name,
                code="INVALID_OUTCOME",
            )
        return outcome.for_command(name)
