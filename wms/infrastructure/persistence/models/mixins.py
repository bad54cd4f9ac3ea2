"""
SQLAlchemy mixins for common model patterns.

These mixins provide reusable column definitions so every persisted entity
carries the same identity, audit and soft-delete contract.

    - CuidMixin: CUID primary key
    - TenantMixin / OptionalTenantMixin: tenant scoping
    - BaseEntityMixin: timestamps, actor stamps and soft delete
    - MultiTenantEntity: the combination used by master-data models

Soft delete invariant: ``is_deleted`` is True exactly when ``deleted_at`` is set.
Both are only ever changed together through ``mark_as_deleted`` / ``restore``.
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from wms.domain.exceptions import EntityStateException, ValidationException
from wms.shared.utils import generate_cuid, utc_now

# Partial-index predicates for "unique among non-deleted rows"
ACTIVE_ROWS_POSTGRESQL = "is_deleted = false"
ACTIVE_ROWS_SQLITE = "is_deleted = 0"


def active_rows_where(condition: str | None = None) -> dict:
    """
    Dialect kwargs for an Index that only covers non-deleted rows,
    optionally narrowed by ``condition`` (plain SQL valid on both dialects)
    """
    prefix = f"{condition} AND " if condition else ""
    return {
        "postgresql_where": text(prefix + ACTIVE_ROWS_POSTGRESQL),
        "sqlite_where": text(prefix + ACTIVE_ROWS_SQLITE),
    }


def require_text(value: str | None, field: str) -> str:
    """Reject blank mandatory strings, returning the stripped value"""
    if value is None or not str(value).strip():
        raise ValidationException(f"{field} is required", field=field)
    return str(value).strip()


class CuidMixin:
    """
    Mixin for models using CUID as primary key.

    Provides:
        - id: String primary key with automatic CUID generation
    """

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String(32), primary_key=True, default=generate_cuid)


class TenantMixin:
    """
    Mixin for multi-tenant models.

    Provides:
        - tenant_id: Foreign key to tenant table
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[str]:
        return mapped_column(
            String(32),
            ForeignKey("tenant.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class OptionalTenantMixin:
    """Tenant scoping where NULL means global (users, roles)"""

    @declared_attr
    def tenant_id(cls) -> Mapped[str | None]:
        return mapped_column(
            String(32),
            ForeignKey("tenant.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )


class BaseEntityMixin:
    """
    Lifecycle fields shared by every entity.

    Provides:
        - created_at: Set once on creation
        - updated_at: Null until the first mutation, then stamped on every mutation
        - created_by / updated_by: Free-text actor identifiers
        - is_deleted / deleted_at / deleted_by: Soft delete tombstone

    Timestamps are assigned in Python so that flushed objects never carry
    expired server-generated attributes in async sessions.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(String(255), nullable=True)

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(String(255), nullable=True)

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(Boolean, default=False, nullable=False, index=True)

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def deleted_by(cls) -> Mapped[str | None]:
        return mapped_column(String(255), nullable=True)

    def touch(self, actor: str | None) -> None:
        """Stamp a mutation"""
        self.updated_at = utc_now()
        self.updated_by = actor

    def mark_as_deleted(self, actor: str | None) -> None:
        """Soft delete. The row stays in place for audit and restore."""
        if self.is_deleted:
            raise EntityStateException(f"{type(self).__name__} is already deleted")
        now = utc_now()
        self.is_deleted = True
        self.deleted_at = now
        self.deleted_by = actor
        self.updated_at = now
        self.updated_by = actor

    def restore(self, actor: str | None) -> None:
        """Reverse a soft delete"""
        if not self.is_deleted:
            raise EntityStateException(f"{type(self).__name__} is not deleted")
        self.is_deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.touch(actor)


class MultiTenantEntity(CuidMixin, TenantMixin, BaseEntityMixin):
    """
    Complete mixin for tenant-owned master data.

    Combines:
        - CuidMixin: CUID primary key
        - TenantMixin: Tenant foreign key
        - BaseEntityMixin: Timestamps, actor stamps, soft delete

    Usage:
        class Warehouse(MultiTenantEntity, Base):
            __tablename__ = "warehouse"
    """

    __abstract__ = True
