"""
Standardized exception hierarchy for questboard
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class QuestBoardError(Exception):
    """
    Base exception for all questboard errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise QuestBoardError(
            message="Failed to save profile",
            profile="Alice",
            operation="save_state",
            context={"key": "questboard-multi-Alice"}
        )
    """

    def __init__(
        self,
        message: str,
        profile: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.profile = profile
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "profile": self.profile,
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
        """Serialize exception for API responses"""
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

class ValidationError(QuestBoardError):
    """
    Raised when user input fails validation

    Numeric input is clamped rather than rejected, so this is reserved for
    input that has no sensible clamped value (an empty profile name).

    Example:
        raise ValidationError(
            message="Profile name cannot be empty",
            field="name",
            value="   "
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
# Storage Errors
# ==========================================

class StorageError(QuestBoardError):
    """Local key-value store operation failed"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your progress. Please try again.",
            context={"key": key},
            **kwargs
        )


class RecordNotFoundError(QuestBoardError):
    """Requested profile or quest does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(QuestBoardError):
    """System configuration is invalid"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    profile: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> QuestBoardError:
    """
    Wrap external exceptions (sqlite3) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        profile: Profile name if applicable
        context: Additional context

    Returns:
        Appropriate QuestBoardError subclass

    Example:
        try:
            conn.execute(sql, params)
        except sqlite3.Error as e:
            raise wrap_external_exception(e, operation="put", context={"key": key})
    """
    import sqlite3

    key = (context or {}).get("key")

    if isinstance(error, sqlite3.Error):
        return StorageError(
            message=f"Local store operation failed: {str(error)}",
            key=key,
            profile=profile,
            operation=operation,
            cause=error
        )

    # Generic fallback
    else:
        return QuestBoardError(
            message=f"{operation} failed: {str(error)}",
            profile=profile,
            operation=operation,
            context=context,
            cause=error
        )
