from typing import Any, Dict, Optional
from taskdesk.common.logger import get_logger

logger = get_logger("taskdesk.common.exceptions")

class TaskDeskError(Exception):
    """Base exception for storage backend errors."""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

class StorageIOError(TaskDeskError):
    """Raised when a file cannot be read, written or created."""
    pass

class ConfigFormatError(TaskDeskError):
    """Raised when the configuration file exists but cannot be parsed."""
    pass

class InvalidPathError(TaskDeskError):
    """Raised when a chosen storage directory is missing or not a directory."""
    pass

class DocumentParseError(TaskDeskError):
    """Raised when a stored document is not the JSON array it should be."""
    pass

class ErrorHandler:
    """Turns exceptions into the payload the front end displays."""

    STATUS_CODES = {
        InvalidPathError: 400,
        DocumentParseError: 422,
        ConfigFormatError: 500,
        StorageIOError: 500,
    }

    @classmethod
    def status_code(cls, e: Exception) -> int:
        for error_cls, code in cls.STATUS_CODES.items():
            if isinstance(e, error_cls):
                return code
        return 500

    @staticmethod
    def format_error(e: Exception) -> Dict[str, Any]:
        """Format an exception into a structured error response for the frontend."""
        error_type = type(e).__name__
        # Messages are reported verbatim, the shell shows them as-is
        message = str(e)
        severity = "error"

        if isinstance(e, InvalidPathError):
            severity = "warning"
        elif not message:
            message = error_type

        logger.error(f"Storage Error ({error_type}): {message}", exc_info=e)

        return {
            "type": "error",
            "content": message,
            "error_type": error_type,
            "severity": severity
        }
