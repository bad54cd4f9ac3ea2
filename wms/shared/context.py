"""
Request context management using contextvars.

Holds the authenticated actor and tenant for the current request. The
authentication dependency populates it once per request after decoding the
access token; services and repositories read it instead of re-parsing claims.

Usage:
    # In the authentication dependency:
    set_request_context(RequestContext(user_id="u1", tenant_id="t1", username="alice"))

    # Anywhere downstream:
    actor = get_current_actor()  # "alice", or "system" outside a request
    tenant_id = get_current_tenant_id()

    # Context is automatically reset per request due to contextvars
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass, field

from wms.shared.enums import ActorType

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the authenticated caller."""

    user_id: str | None = None
    tenant_id: str | None = None
    username: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)
    permissions: tuple[str, ...] = field(default_factory=tuple)
    actor_type: ActorType = ActorType.SYSTEM
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def actor(self) -> str:
        """Free-text actor name stamped on created_by / updated_by / deleted_by"""
        return self.username or self.user_id or SYSTEM_ACTOR

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


_request_context: ContextVar[RequestContext] = ContextVar(
    "request_context", default=RequestContext()
)


def set_request_context(context: RequestContext) -> None:
    """Set the request context for the current async task."""
    _request_context.set(context)


def clear_request_context() -> None:
    """Reset to the anonymous system context."""
    _request_context.set(RequestContext())


def get_request_context() -> RequestContext:
    """Get a snapshot of the current request context."""
    return _request_context.get()


def get_current_actor() -> str:
    """Actor name for audit columns (defaults to 'system')."""
    return _request_context.get().actor


def get_current_user_id() -> str | None:
    return _request_context.get().user_id


def get_current_tenant_id() -> str | None:
    return _request_context.get().tenant_id


# Correlation id of the current request, echoed as traceId in error bodies
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> Token:
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id.get()
