# helpers/authz.py
"""
Auth-Gate: bildet die Identity-Provider-Session (JWT) auf den internen User ab.

Der Kontext gilt nur für den aktuellen Request und wird den View-Funktionen
explizit als Keyword-Argument ``auth`` übergeben; es gibt keinen globalen
User-Zustand.
"""
import enum
import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Iterable, Optional

from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity

from helpers.errors import ForbiddenError, NotFoundError, UnauthorizedError
from managers.user_manager import UserManager
from models import User, UserRole, UserStatus

logger = logging.getLogger(__name__)

user_mgr = UserManager()


class AuthKind(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    UNREGISTERED = "unregistered"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class AuthContext:
    kind: AuthKind
    identity: Optional[str] = None
    user: Optional[User] = None
    claims: dict = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == UserRole.ADMIN

    @property
    def is_active(self) -> bool:
        return self.user is not None and self.user.status == UserStatus.ACTIVE


def resolve_auth() -> AuthContext:
    """Ermittelt den AuthContext des aktuellen Requests."""
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    if not identity:
        ctx = AuthContext(AuthKind.UNAUTHENTICATED)
    else:
        claims = get_jwt() or {}
        user = user_mgr.get_user_by_supabase_id(str(identity))
        if user is None:
            logger.debug(f"[AUTH] identity {identity} has no internal user record")
            ctx = AuthContext(AuthKind.UNREGISTERED, identity=str(identity), claims=claims)
        else:
            ctx = AuthContext(AuthKind.AUTHENTICATED, identity=str(identity), user=user, claims=claims)

    return ctx


def require_user(ctx: AuthContext) -> User:
    """Gibt den User zurück oder wirft 401 (keine Session) bzw. 404 (nicht registriert)."""
    if ctx.kind is AuthKind.UNAUTHENTICATED:
        raise UnauthorizedError("Authentication required")
    if ctx.kind is AuthKind.UNREGISTERED:
        raise NotFoundError("User exists in identity provider but not in database")
    if ctx.kind is AuthKind.AUTHENTICATED:
        return ctx.user
    raise AssertionError(f"unhandled auth kind: {ctx.kind}")


def require_active(ctx: AuthContext) -> User:
    user = require_user(ctx)
    status = user.status
    if status is UserStatus.ACTIVE:
        return user
    if status is UserStatus.PENDING:
        logger.warning(f"[AUTH] pending user {user.id} rejected")
        raise ForbiddenError("Your account is pending approval", details={"status": status.value})
    if status is UserStatus.BLOCKED:
        logger.warning(f"[AUTH] blocked user {user.id} rejected")
        raise ForbiddenError("Your account has been blocked", details={"status": status.value})
    raise AssertionError(f"unhandled user status: {status}")


def require_admin(ctx: AuthContext) -> User:
    user = require_active(ctx)
    role = user.role
    if role is UserRole.ADMIN:
        return user
    if role in (UserRole.ARTIST, UserRole.USER):
        logger.warning(f"[AUTH] user {user.id} with role {role.value} tried an admin action")
        raise ForbiddenError("Forbidden: Admin role required")
    raise AssertionError(f"unhandled user role: {role}")


def can_perform_action(ctx: AuthContext, required_roles: Iterable[UserRole]) -> bool:
    """True, wenn der User aktiv ist und eine der geforderten Rollen hat."""
    if not ctx.is_active:
        return False
    return ctx.user.role in set(required_roles)


def can_edit_artist(ctx: AuthContext, artist) -> bool:
    """Eigentümer des Artist-Profils oder aktiver Admin."""
    if not ctx.is_active:
        return False
    return artist.user_id == ctx.user.id or can_perform_action(ctx, [UserRole.ADMIN])


def _gate(check):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            ctx = resolve_auth()
            if check is not None:
                check(ctx)
            return fn(*args, auth=ctx, **kwargs)
        return wrapper
    return decorator


# Übergibt nur den Kontext, lehnt nie ab
auth_context = _gate(None)
login_required = _gate(require_user)
active_required = _gate(require_active)
admin_required = _gate(require_admin)


__all__ = [
    "AuthKind",
    "AuthContext",
    "resolve_auth",
    "require_user",
    "require_active",
    "require_admin",
    "can_perform_action",
    "can_edit_artist",
    "auth_context",
    "login_required",
    "active_required",
    "admin_required",
]
