from datetime import timedelta

import bcrypt
import pytest

from tests.helpers import ADMIN_PASSWORD, USER_PASSWORD, create_user
from wms.application.result import ErrorType
from wms.application.services import authentication_service
from wms.application.services.audit_service import AuditService
from wms.application.services.authentication_service import (
    ACCOUNT_INACTIVE, ACCOUNT_LOCKED, INVALID_CREDENTIALS, INVALID_REFRESH_TOKEN,
    AuthenticationService)
from wms.application.services.authorization_service import AuthorizationService
from wms.infrastructure.persistence.repositories import (TenantRepository,
                                                         UserRepository)
from wms.infrastructure.security.jwt import verify_token
from wms.infrastructure.security.password import needs_rehash, verify_password
from wms.shared.utils import utc_now


@pytest.fixture
def auth_service(test_db) -> AuthenticationService:
    audit_service = AuditService(test_db)
    return AuthenticationService(
        user_repo=UserRepository(test_db, audit_service),
        tenant_repo=TenantRepository(test_db, audit_service),
        authz_service=AuthorizationService(test_db),
        audit_service=audit_service,
    )


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_tokens_with_claims(self, auth_service, seeded):
        """
        GIVEN the seeded administrator
        WHEN they log in with the right password
        THEN an access token carrying the tenant, roles and permissions is issued.
        """
        result = await auth_service.login("admin", ADMIN_PASSWORD)

        assert result.success
        issued = result.value
        claims = verify_token(issued.access_token)
        assert claims["sub"] == seeded.admin_user.id
        assert claims["tenant_id"] == seeded.tenant.id
        assert claims["roles"] == ["Admin"]
        assert "*:*" in claims["permissions"]
        assert issued.refresh_token
        assert issued.user.last_login_at is not None

    @pytest.mark.asyncio
    async def test_login_accepts_email(self, auth_service, seeded):
        result = await auth_service.login(seeded.admin_user.email, ADMIN_PASSWORD)

        assert result.success

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_fail_identically(self, auth_service, seeded):
        unknown = await auth_service.login("nobody", "whatever")
        wrong = await auth_service.login("admin", "wrong-password")

        assert unknown.error == wrong.error == INVALID_CREDENTIALS
        assert unknown.error_type == wrong.error_type == ErrorType.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_unknown_user_still_pays_one_bcrypt_check(self, auth_service, seeded, monkeypatch):
        """
        GIVEN no user named 'ghost'
        WHEN someone logs in as 'ghost'
        THEN the password is still checked against a real bcrypt hash and the login fails.
        """
        monkeypatch.setattr(authentication_service, "_DUMMY_PASSWORD_HASH", None)

        result = await auth_service.login("ghost", "whatever")

        assert result.is_failure
        assert result.error == INVALID_CREDENTIALS
        assert result.error_type == ErrorType.AUTHENTICATION
        dummy_hash = authentication_service._DUMMY_PASSWORD_HASH
        assert dummy_hash is not None
        assert dummy_hash.startswith("$2b$")
        assert not verify_password("whatever", dummy_hash)

    @pytest.mark.asyncio
    async def test_fifth_failure_locks_the_account(self, auth_service, seeded, test_db):
        """
        GIVEN an active user
        WHEN five wrong passwords are submitted in a row
        THEN the account is locked and even the right password is rejected.
        """
        for _ in range(4):
            result = await auth_service.login("admin", "wrong-password")
            assert result.error == INVALID_CREDENTIALS

        fifth = await auth_service.login("admin", "wrong-password")
        assert fifth.error == INVALID_CREDENTIALS
        await test_db.commit()

        user = seeded.admin_user
        assert user.failed_login_attempts == 5
        assert user.is_locked_out()

        locked = await auth_service.login("admin", ADMIN_PASSWORD)
        assert locked.is_failure
        assert locked.error == ACCOUNT_LOCKED

    @pytest.mark.asyncio
    async def test_expired_lockout_allows_login_and_resets_counter(
        self, auth_service, seeded, test_db
    ):
        user = seeded.admin_user
        user.failed_login_attempts = 5
        user.lockout_end = utc_now() - timedelta(minutes=1)
        await test_db.commit()

        result = await auth_service.login("admin", ADMIN_PASSWORD)

        assert result.success
        assert user.failed_login_attempts == 0
        assert user.lockout_end is None

    @pytest.mark.asyncio
    async def test_wrong_password_after_expired_lockout_relocks(
        self, auth_service, seeded, test_db
    ):
        """
        GIVEN a lockout that has just expired with the counter still at the threshold
        WHEN one more wrong password is submitted
        THEN the counter keeps climbing and a fresh lockout starts.
        """
        user = seeded.admin_user
        user.failed_login_attempts = 5
        user.lockout_end = utc_now() - timedelta(minutes=1)
        await test_db.commit()

        result = await auth_service.login("admin", "wrong-password")

        assert result.error == INVALID_CREDENTIALS
        assert user.failed_login_attempts == 6
        assert user.is_locked_out()

    @pytest.mark.asyncio
    async def test_inactive_user_is_rejected_after_password_check(
        self, auth_service, seeded, test_db
    ):
        user = await create_user(test_db, "dormant", tenant_id=seeded.tenant.id)
        user.deactivate("test")
        await test_db.commit()

        result = await auth_service.login("dormant", USER_PASSWORD)

        assert result.error == ACCOUNT_INACTIVE
        assert result.error_type == ErrorType.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_remember_me_extends_refresh_lifetime(self, auth_service, seeded):
        short = await auth_service.login("admin", ADMIN_PASSWORD)
        short_expiry = short.value.user.refresh_token_expiry_time
        long = await auth_service.login("admin", ADMIN_PASSWORD, remember_me=True)

        assert long.value.user.refresh_token_expiry_time > short_expiry + timedelta(days=20)

    @pytest.mark.asyncio
    async def test_login_upgrades_hash_made_at_another_cost(self, auth_service, seeded, test_db):
        """
        GIVEN a user whose hash was made with a different bcrypt cost
        WHEN they log in successfully
        THEN the stored hash is replaced by one at the configured cost.
        """
        user = await create_user(test_db, "legacy", tenant_id=seeded.tenant.id)
        user.password_hash = bcrypt.hashpw(USER_PASSWORD.encode(), bcrypt.gensalt(rounds=5)).decode()
        await test_db.commit()

        result = await auth_service.login("legacy", USER_PASSWORD)

        assert result.success
        assert not needs_rehash(result.value.user.password_hash)
        assert verify_password(USER_PASSWORD, result.value.user.password_hash)


class TestRefreshAndLogout:
    @pytest.mark.asyncio
    async def test_refresh_rotates_and_old_token_stops_working(self, auth_service, seeded):
        """
        GIVEN a refresh token from login
        WHEN it is exchanged for a new pair
        THEN the new token works once and the old one is rejected.
        """
        login = await auth_service.login("admin", ADMIN_PASSWORD)
        first = login.value.refresh_token

        refreshed = await auth_service.refresh(first)
        assert refreshed.success
        second = refreshed.value.refresh_token
        assert second != first

        replay = await auth_service.refresh(first)
        assert replay.error == INVALID_REFRESH_TOKEN
        assert replay.error_type == ErrorType.AUTHENTICATION

        assert (await auth_service.refresh(second)).success

    @pytest.mark.asyncio
    async def test_expired_refresh_token_is_rejected(self, auth_service, seeded, test_db):
        login = await auth_service.login("admin", ADMIN_PASSWORD)
        seeded.admin_user.refresh_token_expiry_time = utc_now() - timedelta(seconds=1)
        await test_db.commit()

        result = await auth_service.refresh(login.value.refresh_token)

        assert result.error == INVALID_REFRESH_TOKEN

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, auth_service, seeded):
        login = await auth_service.login("admin", ADMIN_PASSWORD)

        assert (await auth_service.logout(seeded.admin_user.id)).success
        result = await auth_service.refresh(login.value.refresh_token)

        assert result.error == INVALID_REFRESH_TOKEN


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_change_password(self, auth_service, seeded):
        result = await auth_service.change_password(
            seeded.admin_user.id, ADMIN_PASSWORD, "NewSecret@1", "NewSecret@1"
        )

        assert result.success
        assert verify_password("NewSecret@1", seeded.admin_user.password_hash)
        assert (await auth_service.login("admin", "NewSecret@1")).success

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, auth_service, seeded):
        result = await auth_service.change_password(
            seeded.admin_user.id, "not-it", "NewSecret@1", "NewSecret@1"
        )

        assert result.error == "Current password is incorrect"
        assert result.error_type == ErrorType.VALIDATION

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, auth_service, seeded):
        result = await auth_service.change_password(
            seeded.admin_user.id, ADMIN_PASSWORD, "NewSecret@1", "Different@1"
        )

        assert result.error == "Passwords do not match"


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_into_tenant(self, auth_service, seeded):
        result = await auth_service.register(
            username="newcomer",
            email="newcomer@example.com",
            password="Newcomer@1",
            confirm_password="Newcomer@1",
            tenant_slug=seeded.tenant.slug,
        )

        assert result.success
        assert result.value.user.tenant_id == seeded.tenant.id
        assert result.value.roles == []

    @pytest.mark.asyncio
    async def test_duplicate_username_and_email(self, auth_service, seeded):
        by_name = await auth_service.register(
            username="admin",
            email="fresh@example.com",
            password="Secret@123",
            confirm_password="Secret@123",
        )
        by_email = await auth_service.register(
            username="fresh",
            email=seeded.admin_user.email,
            password="Secret@123",
            confirm_password="Secret@123",
        )

        assert by_name.error == "Username already exists"
        assert by_email.error == "Email already exists"
        assert by_name.error_type == ErrorType.DOMAIN

    @pytest.mark.asyncio
    async def test_tenant_user_limit(self, auth_service, seeded, test_db):
        seeded.tenant.max_users = 1
        await test_db.commit()

        result = await auth_service.register(
            username="overflow",
            email="overflow@example.com",
            password="Secret@123",
            confirm_password="Secret@123",
            tenant_slug=seeded.tenant.slug,
        )

        assert result.error == "Tenant has reached its user limit"

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, auth_service, seeded):
        result = await auth_service.register(
            username="lost",
            email="lost@example.com",
            password="Secret@123",
            confirm_password="Secret@123",
            tenant_slug="missing",
        )

        assert result.error == "Tenant not found or inactive"
