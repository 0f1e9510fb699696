"""Domain exceptions for the cloud code engine.

Defines domain-level exceptions that represent business rule violations
and failed calls to the document store. The webhook layer maps them to
Parse webhook error responses.
"""

from typing import Any


class CloudCodeException(Exception):
    """Base exception for all cloud code errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. The webhook layer returns ``message`` to
    Parse; ``error_code`` and ``details`` are for logs and tests.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. table, object_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and JSON responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CloudCodeException):
    """Raised when request parameters are missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional parameter that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CloudCodeException):
    """Raised when a signed-in user is required but absent, or the webhook key is wrong."""

    def __init__(self, message: str = "Must be signed in to call this Cloud Function.") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AccessDeniedException(CloudCodeException):
    """Raised when the rights check fails; aborts the whole enclosing operation."""

    def __init__(
        self,
        class_name: str | None = None,
        object_id: str | None = None,
        actor_id: str | None = None,
    ) -> None:
        """Initialize with the entity that failed the rights check.

        Args:
            class_name: Parse class of the guarded entity.
            object_id: Id of the guarded entity.
            actor_id: Id of the user that was denied.
        """
        details: dict[str, Any] = {}
        if class_name:
            details["class_name"] = class_name
        if object_id:
            details["object_id"] = object_id
        if actor_id:
            details["actor_id"] = actor_id
        super().__init__("Access denied!", "ACCESS_DENIED", details)


class SitesLimitExceededException(CloudCodeException):
    """Raised when a user's pay plan does not allow another site."""

    def __init__(self, user_id: str, limit: int) -> None:
        super().__init__(
            "The user has exhausted their sites' limit!",
            "SITES_LIMIT_EXCEEDED",
            {"user_id": user_id, "limit": limit},
        )


class SchemaOperationException(CloudCodeException):
    """Raised when the schema endpoint answers a write with a non-200 status."""

    def __init__(self, table: str, method: str, status: int | None) -> None:
        """Initialize with table, HTTP method and status (None on transport failure).

        Args:
            table: Dynamic table name.
            method: HTTP method that failed (POST, PUT, DELETE).
            status: Response status code, or None when no response arrived.
        """
        super().__init__(
            f"Schema {method} for {table} failed with status {status}",
            "SCHEMA_OPERATION_FAILED",
            {"table": table, "method": method, "status": status},
        )
        self.status = status


class ObjectNotFoundException(CloudCodeException):
    """Raised when a document does not exist (Parse code 101)."""

    def __init__(self, class_name: str, object_id: str) -> None:
        super().__init__(
            f"Object not found: {class_name}/{object_id}",
            "OBJECT_NOT_FOUND",
            {"class_name": class_name, "object_id": object_id},
        )


class StoreRequestException(CloudCodeException):
    """Raised when the document store rejects a request."""

    def __init__(
        self,
        status: int,
        message: str,
        parse_code: int | None = None,
    ) -> None:
        """Initialize with HTTP status, Parse error message and Parse error code.

        Args:
            status: HTTP status code of the response, 0 when none arrived.
            message: Error text returned by Parse (or the raw body).
            parse_code: Parse error code when the body carried one.
        """
        super().__init__(
            message,
            "STORE_REQUEST_FAILED",
            {"status": status, "parse_code": parse_code},
        )
        self.status = status
        self.parse_code = parse_code
