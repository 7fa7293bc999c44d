from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from prometheus_client import Counter

error_counter = Counter(
    "azprovider_errors_total",
    "Total number of errors raised by resource operations",
    ["error_type", "category", "resource_type", "operation"],
)


class ErrorSeverity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    EXTERNAL_SERVICE = "external_service"
    CONSISTENCY = "consistency"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class BaseApplicationException(Exception):
    severity: ErrorSeverity = ErrorSeverity.ERROR
    category: ErrorCategory = ErrorCategory.UNKNOWN
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity or self.severity
        self.category = category or self.category
        self.retryable = retryable if retryable is not None else self.retryable
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(UTC)
        self.error_id = f"ERR-{uuid.uuid4().hex[:12].upper()}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "retryable": self.retryable,
            "details": self.details,
        }


class ValidationException(BaseApplicationException):
    severity = ErrorSeverity.WARNING
    category = ErrorCategory.VALIDATION


class InvalidResourceIdError(ValidationException):
    def __init__(self, resource_id: str, reason: str) -> None:
        super().__init__(
            f"parsing {resource_id!r}: {reason}",
            details={"resource_id": resource_id, "reason": reason},
        )
        self.resource_id = resource_id
        self.reason = reason


class ResourceAlreadyExistsError(BaseApplicationException):
    """Raised on create when the remote resource exists but is not tracked in state."""

    severity = ErrorSeverity.ERROR
    category = ErrorCategory.CONFLICT

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"A resource with the ID {resource_id!r} already exists - to be managed "
            f"this resource needs to be imported into the state. Please see the "
            f"resource documentation for {resource_type!r} for more information.",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ExternalServiceException(BaseApplicationException):
    severity = ErrorSeverity.ERROR
    category = ErrorCategory.EXTERNAL_SERVICE
    retryable = True


class AzureRequestError(ExternalServiceException):
    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        retryable = status_code in (408, 429) or (
            status_code is not None and 500 <= status_code <= 599
        )
        super().__init__(
            f"{message}: {cause}" if cause is not None else message,
            retryable=retryable,
            details={"operation": operation, "status_code": status_code},
            cause=cause,
        )
        self.operation = operation
        self.status_code = status_code


class ConsistencyError(BaseApplicationException):
    severity = ErrorSeverity.CRITICAL
    category = ErrorCategory.CONSISTENCY


class OperationTimeoutError(BaseApplicationException):
    category = ErrorCategory.TIMEOUT
    retryable = True

    def __init__(self, operation: str, seconds: float) -> None:
        super().__init__(
            f"timeout while waiting for {operation} to complete (after {seconds:g}s)",
            details={"operation": operation, "timeout_seconds": seconds},
        )
        self.operation = operation
        self.seconds = seconds


class OperationCancelledError(BaseApplicationException):
    severity = ErrorSeverity.WARNING
    category = ErrorCategory.CANCELLED

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} cancelled by stop signal", details={"operation": operation})
        self.operation = operation


class ConfigurationException(BaseApplicationException):
    severity = ErrorSeverity.CRITICAL
    category = ErrorCategory.CONFIGURATION


class ConfigurationError(ConfigurationException):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


def record_error(error: BaseException, *, resource_type: str, operation: str) -> None:
    category = (
        error.category.value
        if isinstance(error, BaseApplicationException)
        else ErrorCategory.UNKNOWN.value
    )
    error_counter.labels(
        error_type=type(error).__name__,
        category=category,
        resource_type=resource_type,
        operation=operation,
    ).inc()
