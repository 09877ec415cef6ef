"""Tool failure type."""

from buccaneer.models import ErrorKind


class ToolError(Exception):
    """Raised by a tool executor; the executor turns it into an error ToolResult.

    `kind` drives the orchestrator's retry decision, `message` is what the
    model gets to read.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def not_found(message: str) -> ToolError:
    return ToolError(ErrorKind.NOT_FOUND, message)


def already_exists(message: str) -> ToolError:
    return ToolError(ErrorKind.ALREADY_EXISTS, message)


def bad_argument(message: str) -> ToolError:
    return ToolError(ErrorKind.ARGUMENT, message)
