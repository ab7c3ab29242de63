"""Output layer — outcome formatting for the CLI."""

from bootkit.output.formatters import format_outcome

__all__ = ["format_outcome"]
