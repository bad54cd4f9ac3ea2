"""
Audit service writing append-only AuditLog rows.

Actor identity, IP address and user agent default to the current request
context so callers only describe what happened.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from wms.infrastructure.persistence.models.audit_log import AuditLog
from wms.shared.context import get_request_context
from wms.shared.enums import AuditAction
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SENSITIVE_FIELDS = {
    "password",
    "password_hash",
    "current_password",
    "new_password",
    "secret",
    "token",
    "refresh_token",
    "access_token",
}


class AuditService:
    """Creates audit log entries inside the caller's transaction."""

    def __init__(self, db: "AsyncSession") -> None:
        self.db = db

    async def log(
        self,
        action: AuditAction,
        entity_name: str,
        entity_id: str | None = None,
        *,
        tenant_id: str | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        is_success: bool = True,
        error_message: str | None = None,
        additional_data: dict[str, Any] | None = None,
        user_id: str | None = None,
        username: str | None = None,
    ) -> AuditLog:
        """
        Append an audit entry.

        Args:
            action: What happened
            entity_name: Type of entity (e.g., "User", "Warehouse")
            entity_id: ID of the affected entity
            tenant_id: Tenant scope (defaults to the request's tenant)
            old_values / new_values: Snapshots; sensitive keys are redacted
            is_success / error_message: Outcome, for failed logins and the like
            user_id / username: Override the actor (e.g., during login, before a token exists)

        Returns:
            The pending AuditLog row. It is committed with the caller's transaction.
        """
        context = get_request_context()
        entry = AuditLog(
            user_id=user_id or context.user_id,
            username=username or context.username,
            tenant_id=tenant_id if tenant_id is not None else context.tenant_id,
            action=action.value,
            entity_name=entity_name,
            entity_id=entity_id,
            old_values=self._sanitize(old_values),
            new_values=self._sanitize(new_values),
            additional_data=self._sanitize(additional_data),
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            is_success=is_success,
            error_message=error_message,
        )
        self.db.add(entry)
        # Don't flush here - the entry is committed with the main operation

        logger.debug(
            "Audit %s %s (entity_id: %s, success: %s)",
            entity_name,
            action.value,
            entity_id,
            is_success,
        )
        return entry

    async def log_login(
        self,
        user_id: str | None,
        username: str,
        tenant_id: str | None,
        is_success: bool,
        error_message: str | None = None,
    ) -> AuditLog:
        return await self.log(
            AuditAction.LOGIN,
            "User",
            user_id,
            tenant_id=tenant_id,
            is_success=is_success,
            error_message=error_message,
            user_id=user_id,
            username=username,
        )

    async def log_logout(self, user_id: str, username: str, tenant_id: str | None) -> AuditLog:
        return await self.log(
            AuditAction.LOGOUT,
            "User",
            user_id,
            tenant_id=tenant_id,
            user_id=user_id,
            username=username,
        )

    async def list_for_entity(
        self, entity_name: str, entity_id: str, limit: int = 100
    ) -> list[AuditLog]:
        result = await self.db.execute(
            select(AuditLog)
            .where(AuditLog.entity_name == entity_name, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.timestamp.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    def _sanitize(data: dict[str, Any] | None) -> dict[str, Any] | None:
        """
        Make a snapshot JSON-safe.

        Removes sensitive fields and converts non-serializable types.
        """
        if data is None:
            return None

        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_FIELDS:
                sanitized[key] = "[REDACTED]"
            elif isinstance(value, (datetime, date, time)):
                sanitized[key] = value.isoformat()
            elif isinstance(value, Decimal):
                sanitized[key] = str(value)
            elif isinstance(value, Enum):
                sanitized[key] = value.value
            elif isinstance(value, (str, int, float, bool, list, dict)) or value is None:
                sanitized[key] = value
            else:
                sanitized[key] = str(value)
        return sanitized
