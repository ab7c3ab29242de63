"""Human/JSON rendering of CommandOutcome for the CLI."""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bootkit.commands.outcome import CommandOutcome


def _format_data_human(data: dict[str, Any]) -> str:
    """Format outcome data as indented key-value pairs."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append(f"  {key}: {_json.dumps(value, separators=(',', ':'))}")
        else:
            lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def format_outcome(outcome: CommandOutcome, *, json_output: bool = False) -> str:
    """Format a CommandOutcome for display.

    Args:
        outcome: The outcome to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return outcome.model_dump_json(indent=2)
    label = outcome.command or "bootkit"
    if outcome.ok:
        parts = [f"OK: {label}"]
        if outcome.message:
            parts.append(f"  {outcome.message}")
        if outcome.data:
            parts.append(_format_data_human(outcome.data))
        return "\n".join(parts)
    error_msg = outcome.message or (outcome.error.message if outcome.error else "Unknown error")
    return f"ERROR: {label} - {error_msg}"
