from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (BaseEntityMixin,
                                                          CuidMixin,
                                                          OptionalTenantMixin,
                                                          active_rows_where,
                                                          require_text)
from wms.shared.utils import ensure_utc, utc_now

if TYPE_CHECKING:
    from wms.infrastructure.persistence.models.permission import UserRole


class User(CuidMixin, OptionalTenantMixin, BaseEntityMixin, Base):
    """
    Application user.

    Username and email are unique among non-deleted rows and compared
    case-sensitively. A user holds at most one refresh token at a time.
    """

    __tablename__ = "user"

    username: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Lockout
    failed_login_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lockout_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Single active refresh token
    refresh_token: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    refresh_token_expiry_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    user_roles: Mapped[list[UserRole]] = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("uq_user_username_active", "username", unique=True, **active_rows_where()),
        Index("uq_user_email_active", "email", unique=True, **active_rows_where()),
    )

    @validates("username", "email", "password_hash")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def role_names(self) -> list[str]:
        return sorted({ur.role.name for ur in self.user_roles if not ur.role.is_deleted})

    # Profile
    def update_profile(
        self,
        actor: str | None,
        first_name: str | None,
        last_name: str | None,
        phone: str | None,
    ) -> None:
        self.first_name = first_name
        self.last_name = last_name
        self.phone = phone
        self.touch(actor)

    def update_email(self, actor: str | None, email: str) -> None:
        """Changing the address requires confirming it again"""
        if email == self.email:
            return
        self.email = email
        self.email_confirmed = False
        self.touch(actor)

    def confirm_email(self, actor: str | None) -> None:
        self.email_confirmed = True
        self.touch(actor)

    def update_password(self, actor: str | None, password_hash: str) -> None:
        self.password_hash = password_hash
        self.touch(actor)

    def activate(self, actor: str | None) -> None:
        """Reactivate and clear any lockout"""
        self.is_active = True
        self.failed_login_attempts = 0
        self.lockout_end = None
        self.touch(actor)

    def deactivate(self, actor: str | None) -> None:
        self.is_active = False
        self.revoke_refresh_token()
        self.touch(actor)

    # Login bookkeeping
    def is_locked_out(self, now: datetime | None = None) -> bool:
        lockout_end = ensure_utc(self.lockout_end)
        return lockout_end is not None and lockout_end > (now or utc_now())

    def record_failed_login(self, max_attempts: int, lockout_minutes: int) -> None:
        """Count a failed attempt; reaching the threshold starts a lockout window"""
        self.failed_login_attempts = (self.failed_login_attempts or 0) + 1
        if self.failed_login_attempts >= max_attempts:
            self.lockout_end = utc_now() + timedelta(minutes=lockout_minutes)

    def record_successful_login(self) -> None:
        self.failed_login_attempts = 0
        self.lockout_end = None
        self.last_login_at = utc_now()

    # Refresh token
    def set_refresh_token(self, token: str, expires_at: datetime) -> None:
        """Store a new refresh token, replacing (and so invalidating) the previous one"""
        self.refresh_token = token
        self.refresh_token_expiry_time = expires_at

    def revoke_refresh_token(self) -> None:
        self.refresh_token = None
        self.refresh_token_expiry_time = None

    def has_valid_refresh_token(self, now: datetime | None = None) -> bool:
        expiry = ensure_utc(self.refresh_token_expiry_time)
        return self.refresh_token is not None and expiry is not None and expiry > (now or utc_now())
