"""
Error types for pip-follow.

Errors carry a structured code so the daemon can decide which failures are
fatal (bootstrap), which put it in no-op mode (event subscription), and which
are only logged (command delivery).
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for pip-follow.

    - 1100-1199: Configuration errors
    - 1400-1499: Compositor IPC errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    CONFIG_INVALID = 1101
    INVALID_PATTERN = 1102

    # Compositor IPC errors (1400-1499)
    COMPOSITOR_NOT_RUNNING = 1400
    COMPOSITOR_IPC_FAILED = 1401
    EVENT_STREAM_UNAVAILABLE = 1402
    REQUEST_FAILED = 1403
    COMMAND_FAILED = 1404


class PipFollowError(Exception):
    """Base exception for pip-follow errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigurationError(PipFollowError):
    """Configuration file or option could not be loaded."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        suggestion: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID
    ):
        context = {}
        if file_path:
            context["file_path"] = file_path

        super().__init__(
            code=code,
            message=message,
            suggestion=suggestion,
            context=context
        )


class CompositorConnectionError(PipFollowError):
    """The compositor IPC socket could not be found or opened."""

    def __init__(
        self,
        message: str,
        socket_path: Optional[str] = None,
        code: ErrorCode = ErrorCode.COMPOSITOR_NOT_RUNNING
    ):
        context = {}
        if socket_path:
            context["socket_path"] = socket_path

        super().__init__(
            code=code,
            message=message,
            suggestion="Make sure niri or sway is running and NIRI_SOCKET/SWAYSOCK is exported",
            context=context
        )


class SubscriptionError(PipFollowError):
    """The compositor refused or failed the event stream request."""

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.EVENT_STREAM_UNAVAILABLE, message=message)


class RequestError(PipFollowError):
    """A one-off request (e.g. window snapshot) failed."""

    def __init__(self, message: str, request: Optional[str] = None):
        context = {}
        if request:
            context["request"] = request

        super().__init__(code=ErrorCode.REQUEST_FAILED, message=message, context=context)


class CommandError(PipFollowError):
    """A move command was not delivered or was rejected by the compositor."""

    def __init__(self, message: str, window_id: Optional[int] = None, workspace_id=None):
        context = {}
        if window_id is not None:
            context["window_id"] = window_id
        if workspace_id is not None:
            context["workspace_id"] = workspace_id

        super().__init__(code=ErrorCode.COMMAND_FAILED, message=message, context=context)


def connect_error_code(error: BaseException) -> ErrorCode:
    """Classify a socket connect failure: no listener vs. a broken IPC channel."""
    if isinstance(error, (FileNotFoundError, ConnectionRefusedError)):
        return ErrorCode.COMPOSITOR_NOT_RUNNING
    return ErrorCode.COMPOSITOR_IPC_FAILED
