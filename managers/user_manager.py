from models import db, User, UserRole, UserStatus
from helpers.errors import NotFoundError, ValidationError
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)


def _is_email_conflict(exc: IntegrityError) -> bool:
    """True nur bei Verletzung des Unique-Constraints auf users.email."""
    orig = getattr(exc, 'orig', None)
    # psycopg liefert den Constraint-Namen direkt
    constraint = getattr(getattr(orig, 'diag', None), 'constraint_name', None)
    if constraint:
        return 'email' in constraint
    # SQLite: "UNIQUE constraint failed: users.email"
    return 'users.email' in str(orig).lower()


class UserManager:
    """
    Verwaltet interne User: Lookup über die Identity-Provider-ID,
    Synchronisierung nach dem ersten Login und Admin-Freigaben.
    """
    def __init__(self):
        """Initialisiert den UserManager mit der Datenbanksitzung."""
        self.db = db

    def get_all_users(self):
        """Gibt alle User zurück, neueste zuerst."""
        return User.query.order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, user_id):
        """Gibt den User mit der angegebenen ID zurück oder None."""
        return self.db.session.get(User, user_id)

    def get_user_by_supabase_id(self, supabase_user_id):
        """Gibt den User zur Identity-Provider-ID zurück oder None."""
        if not supabase_user_id:
            return None
        return User.query.filter_by(supabase_user_id=supabase_user_id).first()

    def get_user_by_email(self, email):
        """Gibt den User mit gegebener E-Mail zurück oder None."""
        return User.query.filter_by(email=email).first()

    def get_users_by_status(self, status: UserStatus):
        return (
            User.query.filter_by(status=status)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def get_users_by_role(self, role: UserRole):
        return (
            User.query.filter_by(role=role)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def get_pending_users(self):
        """Gibt alle User zurück, die noch auf Freigabe warten."""
        return self.get_users_by_status(UserStatus.PENDING)

    def get_pending_artist_requests(self):
        """User mit Rolle ARTIST, deren Freigabe noch aussteht."""
        return (
            User.query.filter_by(role=UserRole.ARTIST, status=UserStatus.PENDING)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def create_user(self, supabase_user_id, email, first_name=None, last_name=None,
                    role=UserRole.USER, status=UserStatus.PENDING):
        """Legt einen neuen User an (Standard: Rolle USER, Status PENDING)."""
        if not supabase_user_id:
            raise ValidationError("supabase_user_id is required")
        if not email:
            raise ValidationError("Email is required")
        if self.get_user_by_email(email):
            raise ValidationError('Email already exists')
        try:
            user = User(
                supabase_user_id=supabase_user_id,
                email=email,
                first_name=first_name or None,
                last_name=last_name or None,
                role=role,
                status=status,
            )
            self.db.session.add(user)
            self.db.session.commit()
            logger.info(f"Created user {user.id} for identity {supabase_user_id}")
            return user
        except IntegrityError as e:
            self.db.session.rollback()
            if _is_email_conflict(e):
                raise ValidationError('Email already exists')
            # z.B. doppelte supabase_user_id: an den Aufrufer weiterreichen
            raise
        except Exception:
            self.db.session.rollback()
            raise

    def sync_user(self, supabase_user_id, email=None, first_name=None, last_name=None):
        """
        Idempotente Synchronisierung aus den Identity-Provider-Daten.
        Gibt (user, created) zurück; ein bestehender User bleibt unverändert.
        """
        existing = self.get_user_by_supabase_id(supabase_user_id)
        if existing:
            return existing, False
        try:
            user = self.create_user(
                supabase_user_id=supabase_user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
            )
        except (IntegrityError, ValidationError):
            # paralleler Sync hat den User bereits angelegt
            existing = self.get_user_by_supabase_id(supabase_user_id)
            if existing:
                return existing, False
            raise
        return user, True

    def _require(self, user_id):
        user = self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user_status(self, user_id, status: UserStatus):
        """Setzt den Freigabe-Status (Admin-Workflow)."""
        user = self._require(user_id)
        previous = user.status
        user.status = status
        self.db.session.commit()
        logger.info(f"User {user_id} status {previous.value if previous else None} -> {status.value}")
        return user

    def update_user_role(self, user_id, role: UserRole):
        """Setzt die Rolle eines Users (Admin-Workflow)."""
        user = self._require(user_id)
        user.role = role
        self.db.session.commit()
        logger.info(f"User {user_id} role -> {role.value}")
        return user

    def update_user(self, user_id, **fields):
        """Aktualisiert Namens- und E-Mail-Felder; unbekannte Felder werden ignoriert."""
        user = self._require(user_id)
        for key in ('first_name', 'last_name', 'email'):
            if fields.get(key) is not None:
                setattr(user, key, fields[key])
        self.db.session.commit()
        return user

    def serialize(self, user):
        """Projektion für das Frontend (ohne sensible Daten)."""
        return {
            'id': user.id,
            'firstName': user.first_name,
            'lastName': user.last_name,
            'email': user.email,
            'role': user.role.value,
            'status': user.status.value,
            'isAuthenticated': True,
            'canCreateEvents': user.status is UserStatus.ACTIVE,
        }
