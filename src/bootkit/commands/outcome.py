"""CommandOutcome and OutcomeError — the uniform result of a dispatch.

INVARIANT: every dispatch yields exactly one CommandOutcome. The CLI and the
test harness both consume this type; neither sees raw command exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class OutcomeError(BaseModel):
    """Structured error payload within a failed CommandOutcome."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class CommandOutcome(BaseModel):
    """Result of executing one command.

    Attributes:
        ok: Whether the command succeeded.
        command: Name of the command that produced the outcome (empty if none ran).
        message: Optional human-readable message.
        exit_code: Explicit process exit code; see :attr:`status`.
        error: Structured error if ``ok`` is False.
        data: Command-specific payload.
    """

    model_config = {"frozen": True}

    ok: bool
    command: str = ""
    message: str | None = None
    exit_code: int | None = None
    error: OutcomeError | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def status(self) -> int:
        """Process exit status: the explicit code, else 0 on success and 1 on failure."""
        if self.exit_code is not None:
            return self.exit_code
        return 0 if self.ok else 1

    @classmethod
    def success(
        cls,
        message: str | None = None,
        *,
        command: str = "",
        data: dict[str, Any] | None = None,
    ) -> CommandOutcome:
        return cls(ok=True, command=command, message=message, data=data or {})

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        command: str = "",
        code: str = "COMMAND_FAILED",
        exit_code: int | None = None,
        detail: dict[str, Any] | None = None,
    ) -> CommandOutcome:
        return cls(
            ok=False,
            command=command,
            message=message,
            exit_code=exit_code,
            error=OutcomeError(code=code, message=message, detail=detail or {}),
        )

    def for_command(self, name: str) -> CommandOutcome:
        """Return this outcome stamped with *name* unless it already names a command."""
        if self.command:
            return self
        return self.model_copy(update={"command": name})
