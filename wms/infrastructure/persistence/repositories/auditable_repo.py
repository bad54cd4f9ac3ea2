"""
Repositories that write an audit trail.

Every create, update, soft delete and restore appends an AuditLog row. The
actor, IP address and user agent come from the request context through
AuditService.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import inspect

from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.repositories.base import BaseRepository
from wms.shared.enums import AuditAction
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from wms.application.services.audit_service import AuditService

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger(__name__)


class AuditableRepository(BaseRepository[ModelType]):
    """
    Subclasses declare:
    - ``model``: the mapped class
    - ``audit_fields``: columns stored as the snapshot on create, delete and restore

    Updates record only the columns that changed, old and new.
    """

    model: type[ModelType]
    audit_fields: tuple[str, ...] = ()

    def __init__(self, db: "AsyncSession", audit_service: "AuditService | None" = None):
        super().__init__(db, self.model)
        self._audit_service = audit_service
        self._pending_changes: dict[int, tuple[dict[str, Any], dict[str, Any]]] = {}

    @property
    def audit_service(self) -> "AuditService":
        if self._audit_service is None:
            from wms.application.services.audit_service import AuditService

            self._audit_service = AuditService(self.db)
        return self._audit_service

    @property
    def entity_type(self) -> str:
        return self.model.__name__

    def _get_tenant_id(self, obj: ModelType) -> str | None:
        return getattr(obj, "tenant_id", None)

    def _serialize_for_audit(self, obj: ModelType) -> dict[str, Any]:
        return {"id": getattr(obj, "id", None)} | {
            name: getattr(obj, name) for name in self.audit_fields
        }

    @staticmethod
    def _collect_changes(obj: Any) -> tuple[dict[str, Any], dict[str, Any]]:
        """Old and new values of every column modified since the last flush"""
        old_values: dict[str, Any] = {}
        new_values: dict[str, Any] = {}
        state = inspect(obj)
        for attr in state.mapper.column_attrs:
            history = state.attrs[attr.key].history
            if not history.has_changes():
                continue
            old_values[attr.key] = history.deleted[0] if history.deleted else None
            new_values[attr.key] = history.added[0] if history.added else None
        return old_values, new_values

    async def _emit_audit_event(
        self,
        action: AuditAction,
        obj: ModelType,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        try:
            await self.audit_service.log(
                action=action,
                entity_name=self.entity_type,
                entity_id=getattr(obj, "id", None),
                tenant_id=self._get_tenant_id(obj),
                old_values=old_values,
                new_values=new_values if new_values is not None else self._serialize_for_audit(obj),
                additional_data=metadata,
            )
        except Exception as e:
            # The business write still goes through without its audit row
            logger.warning(
                "Failed to write audit log for %s.%s: %s", self.entity_type, action.value, e
            )

    async def _on_after_create(self, obj: ModelType) -> None:
        await self._emit_audit_event(AuditAction.CREATE, obj)

    async def _on_before_update(self, obj: ModelType) -> None:
        self._pending_changes[id(obj)] = self._collect_changes(obj)

    async def _on_after_update(self, obj: ModelType) -> None:
        old_values, new_values = self._pending_changes.pop(id(obj), ({}, {}))
        if new_values:
            await self._emit_audit_event(AuditAction.UPDATE, obj, old_values, new_values)

    async def _on_after_soft_delete(self, obj: ModelType) -> None:
        await self._emit_audit_event(AuditAction.DELETE, obj)

    async def _on_after_restore(self, obj: ModelType) -> None:
        await self._emit_audit_event(AuditAction.RESTORE, obj)

    async def emit_custom_audit(
        self,
        obj: ModelType,
        action: AuditAction,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Audit a domain event that is not a plain write (role assignment, permission grant)"""
        await self._emit_audit_event(action, obj, metadata=metadata)
