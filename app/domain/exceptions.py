"""Domain exceptions for memorial lifecycle and media rules.

Each carries (message, error_code, details); app.api.exception_handlers maps
the type to an HTTP status and uses to_dict() as the response body.
"""

from typing import Any


class MemorialException(Exception):
    """Base for memorial service errors.

    error_code defaults to the class name; details holds machine-readable
    context such as field, reason or resource_id.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MemorialException):
    """Bad input: missing name, unknown media kind, oversize upload, blank id."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(MemorialException):
    """Raised when authentication fails (e.g. missing or invalid bearer token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(MemorialException):
    """Raised when the caller does not satisfy the preconditions for an action."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
        reason: str | None = None,
    ) -> None:
        """Initialize with optional resource, action, message and rule reason.

        Args:
            resource: Optional resource type (e.g. 'upload_grant').
            action: Optional action that was attempted (e.g. 'video').
            message: Human-readable message.
            reason: Machine-readable rule that was not satisfied.
        """
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        if reason:
            details["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", details)


class ConflictException(MemorialException):
    """Raised when a lifecycle rule forbids the operation.

    Examples: create while an active profile exists or after a lifetime ban,
    edit past the edit limit, delete an already-deleted profile.
    """

    def __init__(self, message: str, reason: str, **details_extra: Any) -> None:
        """Initialize with message and the violated rule.

        Args:
            message: Human-readable description.
            reason: Machine-readable rule name (e.g. 'edit_limit_reached').
            **details_extra: Optional keys merged into details (e.g. max_edits).
        """
        super().__init__(
            message,
            "LIFECYCLE_CONFLICT",
            {"reason": reason, **details_extra},
        )


class ResourceNotFoundException(MemorialException):
    """Raised when a referenced id does not resolve to a record owned by the caller."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'memorial_profile', 'memory').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class HistoryWriteException(MemorialException):
    """Raised when a lifecycle history entry cannot be written.

    Fatal for deletes: the soft-delete must not happen without the ledger entry.
    """

    def __init__(self, user_id: str, profile_id: str, action: str, reason: str) -> None:
        super().__init__(
            f"Could not record '{action}' in lifecycle history for profile {profile_id}",
            "HISTORY_WRITE_FAILED",
            {
                "user_id": user_id,
                "profile_id": profile_id,
                "action": action,
                "reason": reason,
            },
        )


class SqlNotConfiguredException(MemorialException):
    """Raised when an operation requires Postgres but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
