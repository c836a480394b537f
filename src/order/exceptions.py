"""
Custom exceptions for the order CLI.

Provides a hierarchy of exceptions for the failure modes of the
individual commands. Every one of them ends the invocation: the CLI
prints the message and exits with the matching status.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base exception for all order errors."""

    exit_code = 1


class UsageError(OrderError):
    """Bad or missing command-line arguments.

    Attributes:
        command: Subcommand the arguments belong to (if known)
    """

    exit_code = 2

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class TerminalNotInteractiveError(OrderError):
    """No interactive terminal is attached.

    Raised when a command needs raw keyboard input (the pong game)
    but stdin or stdout is not a TTY.
    """

    def __init__(self, message: str = "An interactive terminal is required") -> None:
        super().__init__(message)


class WeatherError(OrderError):
    """Weather lookup failed.

    Attributes:
        stage: Where it failed, "fetch" (HTTP) or "parse" (payload)
        city: City that was requested
    """

    def __init__(self, message: str, stage: str = "fetch", city: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.city = city


class PingError(OrderError):
    """Ping subprocess failed or could not be started.

    Attributes:
        stderr: Standard error output from ping
        process_exit_code: Exit status of the ping process, if it ran
    """

    def __init__(self, message: str, stderr: str = "", exit_code: int | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.process_exit_code = exit_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}: {self.stderr.strip()}"
        return base


class ExpressionError(OrderError):
    """Math expression could not be evaluated.

    Attributes:
        expression: The offending expression text
    """

    def __init__(self, message: str, expression: str = "") -> None:
        super().__init__(message)
        self.expression = expression


class UsageStoreError(OrderError):
    """Usage counter file operation failed.

    Attributes:
        operation: The operation that failed (load, save, reset)
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
