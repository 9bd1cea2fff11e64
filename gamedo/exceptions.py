"""
Standardized exception hierarchy for gamedo
Provides rich context, consistent logging, and user-friendly error messages
"""

import json
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class GameDoError(Exception):
    """
    Base exception for all gamedo errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise GameDoError(
            message="Failed to save progress",
            operation="save_progress",
            context={"key": "gamedo-progress"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "Something went wrong. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for presentation-layer consumers"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(GameDoError):
    """
    Raised when task input fails validation at the boundary

    Examples:
    - Unknown priority
    - Empty title
    - Negative point value

    Example:
        raise ValidationError(
            message="Priority must be one of low, medium, high",
            field="priority",
            value="urgent"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Progression Errors
# ==========================================

class ProgressionError(GameDoError):
    """
    Base class for errors raised while applying a task transition
    """
    pass


class TaskNotFoundError(ProgressionError):
    """Referenced task is not in the task collection"""

    def __init__(self, task_id: str, **kwargs):
        self.task_id = task_id
        super().__init__(
            message=f"Task {task_id} not found",
            user_message="That task no longer exists.",
            context={"task_id": task_id},
            **kwargs
        )


class InvalidTransitionError(ProgressionError):
    """Task is not in the state the requested transition starts from"""

    def __init__(self, task_id: str, reason: str, **kwargs):
        self.task_id = task_id
        self.reason = reason
        super().__init__(
            message=f"Invalid transition for task {task_id}: {reason}",
            user_message="That task was already updated.",
            context={"task_id": task_id, "reason": reason},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(GameDoError):
    """Reading or writing persisted data failed"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        user_message: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        super().__init__(
            message=message,
            user_message=user_message or "We couldn't access your saved data. Please try again.",
            context={"key": key},
            **kwargs
        )


class ImportFormatError(StorageError):
    """Backup document is corrupt or missing required sections"""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            user_message="Invalid backup file format.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(GameDoError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="GameDo is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    key: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> GameDoError:
    """
    Wrap low-level I/O and decoding exceptions into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        key: Storage key or file involved
        context: Additional context

    Returns:
        Appropriate GameDoError subclass

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_tasks", key="gamedo-tasks")
    """
    if isinstance(error, GameDoError):
        return error

    if isinstance(error, (json.JSONDecodeError, PydanticValidationError)):
        return ImportFormatError(
            message=f"{operation} failed: malformed data: {str(error)}",
            key=key,
            operation=operation,
            cause=error
        )
    elif isinstance(error, OSError):
        return StorageError(
            message=f"{operation} failed: {str(error)}",
            key=key,
            operation=operation,
            cause=error
        )

    # Generic fallback
    else:
        return GameDoError(
            message=f"{operation} failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )
