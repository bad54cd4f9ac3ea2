"""
Shared enumerations for the WMS application.

Note: warehouse, customer and product enums live in wms/domain/enums.py
as they are domain concepts.
"""

from enum import Enum


class ActorType(str, Enum):
    """Actor type enumeration for audit tracking"""

    USER = "user"
    SYSTEM = "system"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [actor.value for actor in cls]


class AuditAction(str, Enum):
    """Audit action types recorded in the audit log"""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"
    READ = "read"
    LOGIN = "login"
    LOGOUT = "logout"
    PASSWORD_CHANGE = "password_change"
    PASSWORD_RESET = "password_reset"
    ROLE_ASSIGNED = "role_assigned"
    ROLE_REMOVED = "role_removed"
    PERMISSION_GRANTED = "permission_granted"
    PERMISSION_REVOKED = "permission_revoked"
    EXPORT = "export"
    IMPORT = "import"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [action.value for action in cls]
