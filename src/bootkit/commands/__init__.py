"""Commands — the Command contract, CommandOutcome and the dispatcher.

INVARIANT: one dispatch runs exactly one command and always returns a
CommandOutcome; command failures are reported as data.
"""

from bootkit.commands.base import BaseCommand, Command
from bootkit.commands.dispatcher import DEFAULT_COMMAND, CommandDispatcher
from bootkit.commands.outcome import CommandOutcome, OutcomeError

__all__ = [
    "DEFAULT_COMMAND",
    "BaseCommand",
    "Command",
    "CommandDispatcher",
    "CommandOutcome",
    "OutcomeError",
]
