"""Business rule violations raised by models and services, mapped to HTTP errors in the API layer"""

from typing import Any


class WmsException(Exception):
    """
    Base of every WMS error.

    ``message`` is shown to clients as is; ``error_code`` and ``details``
    are for logs.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(WmsException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        self.field = field
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(WmsException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, "AUTHENTICATION_ERROR")


class TenantContextException(WmsException):
    """Raised when a tenant-scoped operation runs without a valid tenant."""

    def __init__(self, message: str = "Tenant context is missing or invalid"):
        super().__init__(message, "TENANT_CONTEXT_ERROR")


class ResourceNotFoundException(WmsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateResourceException(WmsException):
    """Raised when a unique value is already taken by a non-deleted row."""

    def __init__(self, resource_type: str, field: str, value: str):
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            "DUPLICATE_RESOURCE",
            {"resource_type": resource_type, "field": field},
        )


class SystemRoleModificationError(WmsException):
    """Raised on any attempt to update, reassign or delete a system role."""

    def __init__(self, role_name: str, operation: str):
        super().__init__(
            f"System role '{role_name}' cannot be {operation}",
            "SYSTEM_ROLE_PROTECTED",
            {"role": role_name, "operation": operation},
        )


class RoleInUseException(WmsException):
    """Raised when deleting a role that is still assigned to users."""

    def __init__(self, role_name: str, user_count: int):
        super().__init__(
            f"Role '{role_name}' is assigned to {user_count} user(s) and cannot be deleted",
            "ROLE_IN_USE",
            {"role": role_name, "user_count": user_count},
        )


class EntityStateException(WmsException):
    """Raised when a lifecycle method is called in the wrong state (e.g. deleting twice)."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_STATE")


class PermissionDeniedError(WmsException):
    """Permission denied - user lacks required permission."""

    def __init__(
        self,
        message: str = "Permission denied",
        resource: str | None = None,
        action: str | None = None,
    ):
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)
