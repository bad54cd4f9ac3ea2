"""
Authentication service: login, token refresh, logout, password change and
self-registration.

Failures are returned as Result values so the caller's transaction still
commits the bookkeeping (failed-login counters, audit rows).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from wms.application.result import ErrorType, Result
from wms.application.services.audit_service import AuditService
from wms.application.services.authorization_service import AuthorizationService
from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.persistence.models.user import User
from wms.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from wms.infrastructure.persistence.repositories.user_repo import UserRepository
from wms.infrastructure.security.jwt import (create_access_token,
                                             generate_refresh_token)
from wms.infrastructure.security.password import (get_password_hash,
                                                  needs_rehash,
                                                  verify_password)
from wms.shared.enums import AuditAction
from wms.shared.telemetry.logging import get_logger
from wms.shared.utils import generate_opaque_token, utc_now

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
ACCOUNT_LOCKED = "Account is locked. Please try again later"
ACCOUNT_INACTIVE = "User account is inactive"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"

# Verified against when the user does not exist so both paths cost one bcrypt check
_DUMMY_PASSWORD_HASH: str | None = None


def _dummy_password_hash() -> str:
    global _DUMMY_PASSWORD_HASH
    if _DUMMY_PASSWORD_HASH is None:
        _DUMMY_PASSWORD_HASH = get_password_hash(generate_opaque_token(32))
    return _DUMMY_PASSWORD_HASH


@dataclass
class AuthenticationResult:
    """Token pair issued by login, refresh and registration"""

    access_token: str
    refresh_token: str
    expires_at: datetime
    user: User
    roles: list[str] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)


class AuthenticationService:
    def __init__(
        self,
        user_repo: UserRepository,
        tenant_repo: TenantRepository,
        authz_service: AuthorizationService,
        audit_service: AuditService,
    ) -> None:
        self.user_repo = user_repo
        self.tenant_repo = tenant_repo
        self.authz_service = authz_service
        self.audit_service = audit_service
        self.settings = get_settings()

    async def login(
        self, username_or_email: str, password: str, remember_me: bool = False
    ) -> Result[AuthenticationResult]:
        """
        Authenticate by username or email.

        Order of checks: unknown user, lockout (before the password is
        looked at), wrong password, inactive account. Unknown user and wrong
        password produce the same failure.
        """
        user = await self.user_repo.get_by_username_or_email(username_or_email)
        if user is None:
            verify_password(password, _dummy_password_hash())
            await self.audit_service.log_login(
                None, username_or_email, None, is_success=False, error_message="Unknown user"
            )
            return Result.fail(INVALID_CREDENTIALS, ErrorType.AUTHENTICATION)

        if user.is_locked_out():
            await self.audit_service.log_login(
                user.id, user.username, user.tenant_id, is_success=False, error_message=ACCOUNT_LOCKED
            )
            return Result.fail(ACCOUNT_LOCKED, ErrorType.AUTHENTICATION)

        if not verify_password(password, user.password_hash):
            user.record_failed_login(
                self.settings.max_failed_login_attempts, self.settings.lockout_minutes
            )
            await self.user_repo.save_login_state(user)
            await self.audit_service.log_login(
                user.id,
                user.username,
                user.tenant_id,
                is_success=False,
                error_message=f"Wrong password (attempt {user.failed_login_attempts})",
            )
            if user.is_locked_out():
                logger.warning(
                    "User %s locked out after %d failed attempts",
                    user.id,
                    user.failed_login_attempts,
                )
            return Result.fail(INVALID_CREDENTIALS, ErrorType.AUTHENTICATION)

        if not user.is_active:
            await self.audit_service.log_login(
                user.id, user.username, user.tenant_id, is_success=False, error_message=ACCOUNT_INACTIVE
            )
            return Result.fail(ACCOUNT_INACTIVE, ErrorType.AUTHENTICATION)

        user.record_successful_login()
        if needs_rehash(user.password_hash):
            # Plain text is only available here, so stale-cost hashes are upgraded on login
            user.update_password(user.username, get_password_hash(password))
        days = (
            self.settings.remember_me_refresh_token_expire_days
            if remember_me
            else self.settings.refresh_token_expire_days
        )
        issued = await self._issue_tokens(user, timedelta(days=days))
        await self.audit_service.log_login(user.id, user.username, user.tenant_id, is_success=True)
        logger.info("User %s logged in", user.id)
        return Result.ok(issued)

    async def refresh(self, refresh_token: str) -> Result[AuthenticationResult]:
        """Rotate the token pair. The presented refresh token stops working."""
        user = await self.user_repo.get_by_refresh_token(refresh_token)
        if user is None or not user.has_valid_refresh_token():
            return Result.fail(INVALID_REFRESH_TOKEN, ErrorType.AUTHENTICATION)
        if not user.is_active:
            return Result.fail(ACCOUNT_INACTIVE, ErrorType.AUTHENTICATION)

        issued = await self._issue_tokens(
            user, timedelta(days=self.settings.refresh_token_expire_days)
        )
        return Result.ok(issued)

    async def logout(self, user_id: str) -> Result[None]:
        """Revoke the stored refresh token. Issued access tokens live until expiry."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return Result.not_found("User")

        user.revoke_refresh_token()
        await self.user_repo.save_login_state(user)
        await self.audit_service.log_logout(user.id, user.username, user.tenant_id)
        return Result.ok()

    async def change_password(
        self, user_id: str, current_password: str, new_password: str, confirm_password: str
    ) -> Result[None]:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return Result.not_found("User")

        if not verify_password(current_password, user.password_hash):
            return Result.fail("Current password is incorrect", ErrorType.VALIDATION)
        if new_password != confirm_password:
            return Result.fail("Passwords do not match", ErrorType.VALIDATION)

        user.update_password(user.username, get_password_hash(new_password))
        await self.user_repo.save_login_state(user)
        await self.audit_service.log(
            AuditAction.PASSWORD_CHANGE, "User", user.id, tenant_id=user.tenant_id
        )
        return Result.ok()

    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        tenant_slug: str | None = None,
    ) -> Result[AuthenticationResult]:
        if not username.strip() or not email.strip() or not password:
            return Result.fail("Username, email and password are required")
        if password != confirm_password:
            return Result.fail("Passwords do not match")
        if await self.user_repo.username_exists(username):
            return Result.fail("Username already exists", ErrorType.DOMAIN)
        if await self.user_repo.email_exists(email):
            return Result.fail("Email already exists", ErrorType.DOMAIN)

        tenant_id: str | None = None
        if tenant_slug:
            tenant = await self.tenant_repo.get_by_slug(tenant_slug)
            if tenant is None or not tenant.is_active:
                return Result.fail("Tenant not found or inactive", ErrorType.VALIDATION)
            if not tenant.can_add_user(await self.user_repo.count_in_tenant(tenant.id)):
                return Result.fail("Tenant has reached its user limit", ErrorType.DOMAIN)
            tenant_id = tenant.id

        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            tenant_id=tenant_id,
            created_by=username,
        )
        user = await self.user_repo.create(user)

        issued = await self._issue_tokens(
            user, timedelta(days=self.settings.refresh_token_expire_days)
        )
        logger.info("Registered user %s", user.id)
        return Result.ok(issued)

    async def _issue_tokens(self, user: User, refresh_lifetime: timedelta) -> AuthenticationResult:
        roles = await self.authz_service.get_user_roles(user.id)
        permissions = sorted(await self.authz_service.get_user_permissions(user.id))
        expires_delta = timedelta(minutes=self.settings.access_token_expire_minutes)

        access_token = create_access_token(
            {
                "sub": user.id,
                "tenant_id": user.tenant_id,
                "username": user.username,
                "email": user.email,
                "roles": roles,
                "permissions": permissions,
            },
            expires_delta,
        )
        refresh_token = generate_refresh_token()
        user.set_refresh_token(refresh_token, utc_now() + refresh_lifetime)
        await self.user_repo.save_login_state(user)

        return AuthenticationResult(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=utc_now() + expires_delta,
            user=user,
            roles=roles,
            permissions=permissions,
        )
