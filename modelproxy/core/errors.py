"""Error Hierarchy - typed, categorized exceptions raised by ModelProxy itself.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ConfigurationError is the only error the proxy layer invents; failures raised
      by internal-model operations are forwarded unchanged and never appear here
    - to_response() produces a plain dict envelope for callers that serialize errors

Design Decisions:
    - Single hierarchy with ModelProxyError base: one except clause catches every
      proxy-layer failure while forwarded errors keep their own type
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    public_type: str | None = None
    internal_type: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class ModelProxyError(Exception):
    """Base exception for all ModelProxy errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to a standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "public_type": self.context.public_type,
                    "internal_type": self.context.internal_type,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Proxy Errors ───────────────────────────────────────────────

class ConfigurationError(ModelProxyError):
    """Proxy target could not be resolved at boot, or could not be bound to its public model."""
    def __init__(
        self,
        internal_type_name: str,
        context: ErrorContext | None = None,
        reason: str | None = None,
    ):
        message = f"Proxy target model '{internal_type_name}' could not be resolved"
        if reason:
            message = f"Proxy target model '{internal_type_name}' could not be bound: {reason}"
        super().__init__(
            message,
            "PROXY_TARGET_UNRESOLVED", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
        self.internal_type_name = internal_type_name
        self.reason = reason


# ─── Backing Store Errors (raised by bundled models) ────────────

class RecordNotFoundError(ModelProxyError):
    """Requested record does not exist."""
    def __init__(
        self, model_name: str, record_id: Any, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{model_name} '{record_id}' not found",
            "RECORD_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.model_name = model_name
        self.record_id = record_id


class DatabaseError(ModelProxyError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
