"""Command — a named, invocable unit of application behavior.

Commands are ordinary services: modules bind them under
``ServiceKey(Command, name)`` (see ``Binder.add_command``) and the
dispatcher resolves them from the runtime like any other binding.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, Protocol, runtime_checkable

from bootkit.commands.outcome import CommandOutcome


@runtime_checkable
class Command(Protocol):
    """Service contract for commands."""

    name: str
    description: str

    def execute(self, args: Sequence[str]) -> CommandOutcome: ...


class BaseCommand:
    """Optional base class providing outcome helpers stamped with the command name.

    Usage::

        class ServerCommand(BaseCommand):
            name = "server"
            description = "Start the HTTP server."

            def __init__(self, server: Server) -> None:
                self._server = server

            def execute(self, args: Sequence[str]) -> CommandOutcome:
                self._server.start()
                return self.ok("started")
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def execute(self, args: Sequence[str]) -> CommandOutcome:
        raise NotImplementedError

    def ok(self, message: str | None = None, **data: Any) -> CommandOutcome:
        return CommandOutcome.success(message, command=self.name, data=data)

    def fail(
        self,
        message: str,
        *,
        code: str = "COMMAND_FAILED",
        exit_code: int | None = None,
        **detail: Any,
    ) -> CommandOutcome:
        return CommandOutcome.failure(
            message, command=self.name, code=code, exit_code=exit_code, detail=detail
        )
