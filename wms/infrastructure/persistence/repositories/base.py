from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from wms.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Base repository implementing soft-delete-aware CRUD operations.

    Every default read (get_by_id, get_all, count, exists_where) excludes
    rows with is_deleted set. Deleted rows are only reachable through the
    explicitly named *_including_deleted / get_deleted methods, which exist
    for restore flows.

    Provides lifecycle hooks for subclasses to override.
    Subclasses should call super() methods to ensure proper lifecycle.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    # Query builders
    def _select_active(self) -> Select:
        """SELECT restricted to non-deleted rows"""
        # Cast to Any for SQLAlchemy dynamic attribute access (is_deleted comes from BaseEntityMixin)
        model: Any = self.model
        return select(self.model).where(model.is_deleted.is_(False))

    def _select_deleted(self) -> Select:
        model: Any = self.model
        return select(self.model).where(model.is_deleted.is_(True))

    def _default_order(self) -> tuple:
        model: Any = self.model
        return (model.created_at.desc(), model.id)

    # Active-only reads
    async def get_by_id(self, id: str) -> ModelType | None:
        """Get a single non-deleted record by ID"""
        model: Any = self.model
        result = await self.db.execute(self._select_active().where(model.id == id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Get all non-deleted records with pagination"""
        result = await self.db.execute(
            self._select_active().order_by(*self._default_order()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count(self, *conditions: ColumnElement[bool]) -> int:
        model: Any = self.model
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(model.is_deleted.is_(False), *conditions)
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def exists_where(
        self, *conditions: ColumnElement[bool], exclude_id: str | None = None
    ) -> bool:
        """
        True when a non-deleted row matches all conditions.

        Used for uniqueness checks: soft-deleted rows never block a value.
        Pass exclude_id to ignore the row being updated or restored.
        """
        model: Any = self.model
        stmt = select(model.id).where(model.is_deleted.is_(False), *conditions)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.first() is not None

    # Explicit opt-out of the soft-delete filter
    async def get_by_id_including_deleted(self, id: str) -> ModelType | None:
        """Get a record by ID whether or not it is soft-deleted"""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == id))
        return result.scalar_one_or_none()

    async def get_deleted(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """List soft-deleted records (admin restore screens)"""
        model: Any = self.model
        result = await self.db.execute(
            self._select_deleted().order_by(model.deleted_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    # Writes
    async def create(self, obj: ModelType) -> ModelType:
        """Create a new record and trigger the after-create hook"""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """
        Flush changes to an existing record and trigger the after-update hook.

        Handles potentially detached objects by merging back to session.
        """
        if object_session(obj) is None:
            obj = await self.db.merge(obj)
        await self._on_before_update(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def soft_delete(self, obj: ModelType, actor: str | None) -> ModelType:
        """Mark a record deleted. Rows are never physically removed."""
        entity: Any = obj
        entity.mark_as_deleted(actor)
        await self.db.flush()
        await self._on_after_soft_delete(obj)
        return obj

    async def restore(self, obj: ModelType, actor: str | None) -> ModelType:
        """Clear the soft-delete tombstone"""
        entity: Any = obj
        entity.restore(actor)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_restore(obj)
        return obj

    # Lifecycle hooks - override in subclasses
    async def _on_after_create(self, obj: ModelType) -> None:
        """Hook called after creating a record."""
        pass

    async def _on_before_update(self, obj: ModelType) -> None:
        """Hook called before pending changes are flushed."""
        pass

    async def _on_after_update(self, obj: ModelType) -> None:
        """Hook called after updating a record."""
        pass

    async def _on_after_soft_delete(self, obj: ModelType) -> None:
        """Hook called after soft-deleting a record."""
        pass

    async def _on_after_restore(self, obj: ModelType) -> None:
        """Hook called after restoring a record."""
        pass


class TenantScopedRepository(BaseRepository[ModelType]):
    """Repository for models carrying a mandatory tenant_id"""

    async def get_for_tenant(self, id: str, tenant_id: str) -> ModelType | None:
        """Non-deleted record by ID, visible only inside its own tenant"""
        model: Any = self.model
        result = await self.db.execute(
            self._select_active().where(model.id == id, model.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_for_tenant_including_deleted(
        self, id: str, tenant_id: str
    ) -> ModelType | None:
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.id == id, model.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def list_for_tenant(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[ModelType]:
        model: Any = self.model
        result = await self.db.execute(
            self._select_active()
            .where(model.tenant_id == tenant_id)
            .order_by(*self._default_order())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_deleted_for_tenant(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[ModelType]:
        model: Any = self.model
        result = await self.db.execute(
            self._select_deleted()
            .where(model.tenant_id == tenant_id)
            .order_by(model.deleted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())
