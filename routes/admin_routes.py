"""
Admin-Modul: Freigabe-Workflow für User (Status und Rolle).
Nur für aktive Admin-User zugänglich.
"""
from flask import Blueprint, request, jsonify
from flasgger import swag_from
from helpers.authz import admin_required
from helpers.errors import NotFoundError, ValidationError
from managers.user_manager import UserManager
from models import UserRole, UserStatus
import logging
logger = logging.getLogger(__name__)

# Blueprint für alle Admin-Routen mit URL-Prefix /admin
admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

# Manager-Instanz
user_mgr = UserManager()


def _parse_enum(enum_cls, raw, field):
    """Wandelt einen String (Groß-/Kleinschreibung egal) in ein Enum um, sonst 400."""
    try:
        return enum_cls((raw or '').upper())
    except ValueError:
        allowed = ', '.join(m.value for m in enum_cls)
        raise ValidationError(f'invalid {field}', details={field: f'expected one of: {allowed}'})


@admin_bp.route('/users', methods=['GET'])
@admin_required
@swag_from('../resources/swagger/admin_users_get.yml')
def list_users(auth):
    """Listet User, optional gefiltert nach ?status= und ?role= (default: alle)."""
    logger.debug(f"[ADMIN] list_users called; args={dict(request.args)}")
    status_arg = (request.args.get('status') or 'all').strip()
    role_arg = (request.args.get('role') or '').strip()

    if status_arg.lower() == 'all':
        users = user_mgr.get_all_users()
    else:
        users = user_mgr.get_users_by_status(_parse_enum(UserStatus, status_arg, 'status'))

    if role_arg:
        role = _parse_enum(UserRole, role_arg, 'role')
        users = [u for u in users if u.role is role]

    logger.debug(f"[ADMIN] list_users result_count={len(users)} status={status_arg} role={role_arg or '-'}")
    return jsonify([_serialize(u) for u in users]), 200


@admin_bp.route('/users/<int:user_id>', methods=['GET'])
@admin_required
@swag_from('../resources/swagger/admin_users_id_get.yml')
def get_user(user_id, auth):
    """Gibt einen einzelnen User zurück."""
    user = user_mgr.get_user(user_id)
    if not user:
        raise NotFoundError('User not found')
    return jsonify(_serialize(user)), 200


@admin_bp.route('/users/<int:user_id>/status', methods=['PUT', 'PATCH'])
@admin_required
@swag_from('../resources/swagger/admin_users_id_status_put.yml')
def update_user_status(user_id, auth):
    """Setzt den Status eines Users (PENDING | ACTIVE | BLOCKED)."""
    data = request.get_json(silent=True) or {}
    status = _parse_enum(UserStatus, data.get('status'), 'status')
    logger.info(f"[ADMIN] user {auth.user.id} sets status of user {user_id} to {status.value}")
    user = user_mgr.update_user_status(user_id, status)
    return jsonify(_serialize(user)), 200


@admin_bp.route('/users/<int:user_id>/role', methods=['PUT', 'PATCH'])
@admin_required
@swag_from('../resources/swagger/admin_users_id_role_put.yml')
def update_user_role(user_id, auth):
    """Setzt die Rolle eines Users (ADMIN | ARTIST | USER)."""
    data = request.get_json(silent=True) or {}
    role = _parse_enum(UserRole, data.get('role'), 'role')
    logger.info(f"[ADMIN] user {auth.user.id} sets role of user {user_id} to {role.value}")
    user = user_mgr.update_user_role(user_id, role)
    return jsonify(_serialize(user)), 200


def _serialize(u):
    return {
        'id': u.id,
        'supabaseUserId': u.supabase_user_id,
        'email': u.email,
        'firstName': u.first_name,
        'lastName': u.last_name,
        'role': u.role.value,
        'status': u.status.value,
        'createdAt': u.created_at.isoformat() if u.created_at else None,
        'updatedAt': u.updated_at.isoformat() if u.updated_at else None,
    }
