from flask import Blueprint, request, jsonify
from flasgger import swag_from
import logging

from helpers.authz import AuthKind, auth_context, login_required
from helpers.errors import UnauthorizedError, ValidationError
from managers.user_manager import UserManager

logger = logging.getLogger(__name__)

# Blueprint für Auth-Routen (aktueller User, Synchronisierung, Status-Checks)
auth_bp = Blueprint('auth', __name__)

# Manager-Instanz für User-Operationen
user_mgr = UserManager()


@auth_bp.route('/user', methods=['GET'])
@login_required
@swag_from('../resources/swagger/user_get.yml')
def get_current_user(auth):
    """Return the status/role projection of the current user (401 without session, 404 if unregistered)."""
    user = auth.user
    logger.debug(f"[AUTH] user {user.id} status={user.status.value} role={user.role.value}")
    return jsonify(user_mgr.serialize(user)), 200


@auth_bp.route('/sync-user', methods=['POST'])
@auth_context
@swag_from('../resources/swagger/sync_user_post.yml')
def sync_user(auth):
    """Create the internal user record from identity-provider data (idempotent)."""
    if auth.kind is AuthKind.UNAUTHENTICATED:
        raise UnauthorizedError('Not authenticated')

    if auth.kind is AuthKind.AUTHENTICATED:
        return jsonify({
            'success': True,
            'message': 'User already exists in database',
            'userId': auth.user.id,
        }), 200

    # Daten aus dem Body, ersatzweise aus den JWT-Claims (Supabase: email, user_metadata)
    data = request.get_json(silent=True) or {}
    meta = auth.claims.get('user_metadata') or {}
    email = data.get('email') or auth.claims.get('email') or meta.get('email')
    if not email:
        raise ValidationError('Email is required')

    user, created = user_mgr.sync_user(
        supabase_user_id=auth.identity,
        email=email,
        first_name=data.get('firstName') or meta.get('first_name'),
        last_name=data.get('lastName') or meta.get('last_name'),
    )
    return jsonify({
        'success': True,
        'message': 'User synchronized successfully' if created else 'User already exists in database',
        'userId': user.id,
    }), 200


@auth_bp.route('/auth/check-status', methods=['GET'])
@auth_context
@swag_from('../resources/swagger/auth_check_status_get.yml')
def check_status(auth):
    """Return {"status": ...} of the current user, 401 with status null otherwise."""
    if auth.user is None:
        return jsonify({'status': None}), 401
    return jsonify({'status': auth.user.status.value}), 200


@auth_bp.route('/auth/check-admin', methods=['GET'])
@auth_context
@swag_from('../resources/swagger/auth_check_admin_get.yml')
def check_admin(auth):
    """Return {"isAdmin": bool} for the current session."""
    return jsonify({'isAdmin': auth.is_admin}), 200
