"""Error handling for the pyenv environment service."""
from typing import Any, Dict, Optional

from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_REQUEST

from mcp_pyenv.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger=logger,
) -> None:
    """Log an error with context."""
    error_info = {
        "event": "pyenv_env_error",
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, PyenvEnvError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error(error_info)


class PyenvEnvError(Exception):
    """Base error class; every fatal condition of a delta computation."""

    stage = "pyenv"

    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(code=self.code, message=str(self), data=self.details)


class InstallationFailure(PyenvEnvError):
    """The pyenv installer exited with a non-zero status."""

    stage = "install"

    def __init__(self, returncode: int, install_url: str):
        super().__init__(
            "Failed to install pyenv",
            code=INTERNAL_ERROR,
            details={"returncode": returncode, "install_url": install_url},
        )


class SubprocessLaunchFailure(PyenvEnvError):
    """A child process could not be launched or exited with a non-zero status."""

    stage = "shell"

    def __init__(self, message: str = "Failed to fork shell", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=INTERNAL_ERROR, details=details)


class IOFailure(PyenvEnvError):
    """Download, file or permission operation failed."""

    stage = "io"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=INVALID_REQUEST, details=details)
