import enum
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import false

db = SQLAlchemy()


def utcnow():
    """Naive UTC-Zeitstempel (SQLite speichert keine Zeitzonen)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserRole(str, enum.Enum):
    """Rolle eines Users; nur ADMIN darf endgültig löschen und freigeben."""
    ADMIN = "ADMIN"
    ARTIST = "ARTIST"
    USER = "USER"


class UserStatus(str, enum.Enum):
    """Freigabe-Status eines Users, wird ausschließlich von Admins gesetzt."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


class User(db.Model):
    """Interner User, verknüpft mit dem Identity-Provider über supabase_user_id."""
    __tablename__ = 'users'
    id               = db.Column(db.Integer, primary_key=True)
    supabase_user_id = db.Column(db.String(255), unique=True, nullable=False, index=True)
    email            = db.Column(db.String(255), unique=True, nullable=False)
    first_name       = db.Column(db.String(100), nullable=True)
    last_name        = db.Column(db.String(100), nullable=True)
    role             = db.Column(db.Enum(UserRole, name='user_role'), nullable=False, default=UserRole.USER)
    status           = db.Column(db.Enum(UserStatus, name='user_status'), nullable=False, default=UserStatus.PENDING)
    created_at       = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at       = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Beziehung: Ein User kann mehrere Artist-Profile verwalten.
    artist_profiles  = db.relationship('Artist', back_populates='user')

    @property
    def full_name(self):
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Artist(db.Model):
    """Öffentliches Artist-Profil mit Genres, Herkunft, Bildern und Social-Media-Links."""
    __tablename__ = 'artists'
    id               = db.Column(db.Integer, primary_key=True)
    name             = db.Column(db.String(150), nullable=False)
    slug             = db.Column(db.String(180), unique=True, nullable=False, index=True)
    genres           = db.Column(db.JSON, nullable=False, default=list)
    bio              = db.Column(db.Text, nullable=False, default='')
    origin           = db.Column(db.String(150), nullable=False, default='')
    social_media     = db.Column(db.JSON, nullable=True, default=dict)
    profile_image_id = db.Column(db.String(255), nullable=True)
    user_id          = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at       = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at       = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user   = db.relationship('User', back_populates='artist_profiles')
    images = db.relationship(
        'Image',
        primaryjoin='Artist.id == Image.artist_id',
        cascade='all, delete-orphan',
        order_by='Image.id',
    )
    # Beziehung: Ein Artist kann viele Events haben, ein Event hat genau einen Artist.
    events = db.relationship('Event', back_populates='artist')


class Event(db.Model):
    """Veranstaltung eines Artists mit einem oder mehreren Terminen; is_deleted = Soft-Delete-Flag."""
    __tablename__ = 'events'
    id            = db.Column(db.Integer, primary_key=True)
    title         = db.Column(db.String(200), nullable=False)
    slug          = db.Column(db.String(230), unique=True, nullable=False, index=True)
    organizer     = db.Column(db.String(200), nullable=False, default='')
    artist_id     = db.Column(db.Integer, db.ForeignKey('artists.id'), nullable=False)
    genre         = db.Column(db.String(50), nullable=False)
    location      = db.Column(db.String(255), nullable=False)
    time          = db.Column(db.String(20), nullable=False)  # z.B. "20:00"
    price         = db.Column(db.Float, nullable=True)
    description   = db.Column(db.Text, nullable=True)
    is_active     = db.Column(db.Boolean, nullable=False, default=True)
    is_deleted    = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at    = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at    = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    artist     = db.relationship('Artist', back_populates='events')
    created_by = db.relationship('User')
    dates      = db.relationship(
        'EventDate',
        back_populates='event',
        cascade='all, delete-orphan',
        order_by='EventDate.date',
    )
    images     = db.relationship(
        'Image',
        primaryjoin='Event.id == Image.event_id',
        cascade='all, delete-orphan',
        order_by='Image.id',
    )


class EventDate(db.Model):
    """Einzelner Termin eines Events."""
    __tablename__ = 'event_dates'
    id       = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    date     = db.Column(db.DateTime, nullable=False, index=True)

    event = db.relationship('Event', back_populates='dates')


class Image(db.Model):
    """Bild bei Cloudinary; gehört entweder zu einem Artist oder zu einem Event."""
    __tablename__ = 'images'
    id        = db.Column(db.Integer, primary_key=True)
    url       = db.Column(db.String(512), nullable=False)
    alt       = db.Column(db.String(255), nullable=False, default='')
    public_id = db.Column(db.String(255), nullable=True)
    artist_id = db.Column(db.Integer, db.ForeignKey('artists.id', ondelete='CASCADE'), nullable=True)
    event_id  = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=True)
