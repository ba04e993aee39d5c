from types import SimpleNamespace

from helpers.authz import AuthContext, AuthKind, can_edit_artist, can_perform_action
from managers.user_manager import UserManager
from models import UserRole, UserStatus


def _ctx(user):
    return AuthContext(AuthKind.AUTHENTICATED, identity=user.supabase_user_id, user=user)


def _user(identity, role=UserRole.USER, status=UserStatus.ACTIVE):
    return UserManager().create_user(identity, f'{identity}@example.com', role=role, status=status)


def test_is_active_and_is_admin():
    active_admin = _ctx(_user('authz-1', role=UserRole.ADMIN))
    pending = _ctx(_user('authz-2', status=UserStatus.PENDING))
    assert active_admin.is_active and active_admin.is_admin
    assert not pending.is_active
    assert not AuthContext(AuthKind.UNREGISTERED, identity='x').is_active


def test_can_perform_action_requires_active_user_with_role():
    admin = _ctx(_user('authz-3', role=UserRole.ADMIN))
    blocked_admin = _ctx(_user('authz-4', role=UserRole.ADMIN, status=UserStatus.BLOCKED))
    artist = _ctx(_user('authz-5', role=UserRole.ARTIST))

    assert can_perform_action(admin, [UserRole.ADMIN])
    assert not can_perform_action(blocked_admin, [UserRole.ADMIN])
    assert can_perform_action(artist, [UserRole.ARTIST, UserRole.ADMIN])
    assert not can_perform_action(artist, [UserRole.ADMIN])
    assert not can_perform_action(AuthContext(AuthKind.UNAUTHENTICATED), [UserRole.USER])


def test_can_edit_artist_owner_or_admin():
    owner = _user('authz-6')
    other = _ctx(_user('authz-7'))
    admin = _ctx(_user('authz-8', role=UserRole.ADMIN))
    pending_owner = _user('authz-9', status=UserStatus.PENDING)

    assert can_edit_artist(_ctx(owner), SimpleNamespace(user_id=owner.id))
    assert not can_edit_artist(other, SimpleNamespace(user_id=owner.id))
    assert can_edit_artist(admin, SimpleNamespace(user_id=owner.id))
    assert not can_edit_artist(_ctx(pending_owner), SimpleNamespace(user_id=pending_owner.id))
