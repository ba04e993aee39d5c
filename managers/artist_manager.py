from models import db, Artist, Event, EventDate, Image, utcnow
from helpers.slugs import unique_slug
from helpers.errors import NotFoundError, ValidationError
from sqlalchemy.orm import selectinload
import logging
logger = logging.getLogger(__name__)

# Mindestlängen der Profilfelder im Formular
PROFILE_MIN_LENGTHS = (('name', 2), ('bio', 10), ('origin', 2))


class ArtistManager:
    """
    Lese-Operationen für Artists (Listing), Anlage und Bearbeitung von Artist-Profilen.
    """
    def __init__(self):
        """Initialisiert den ArtistManager mit der Datenbanksitzung."""
        self.db = db

    def _query(self):
        return Artist.query.options(
            selectinload(Artist.images),
            selectinload(Artist.events).selectinload(Event.dates),
        )

    def get_all_artists(self):
        """Gibt eine Liste aller Artists zurück."""
        return self._query().order_by(Artist.name).all()

    def get_artist(self, artist_id):
        """Gibt den Artist mit der angegebenen ID zurück oder None."""
        return self.db.session.get(Artist, artist_id)

    def get_artist_by_slug(self, slug):
        """Gibt den Artist mit dem angegebenen Slug zurück oder None."""
        return self._query().filter_by(slug=slug).first()

    def get_artists_by_genre(self, genre):
        """Gibt alle Artists zurück, die das Genre in ihrer Genre-Liste führen."""
        # JSON-Listen lassen sich nicht portabel (SQLite/Postgres) abfragen
        return [a for a in self.get_all_artists() if genre in (a.genres or [])]

    def search_artists_by_name(self, name):
        """Sucht Artists per Teilstring im Namen (ohne Groß-/Kleinschreibung)."""
        return (
            self._query()
            .filter(Artist.name.ilike(f"%{name}%"))
            .order_by(Artist.name)
            .all()
        )

    def get_artists_with_upcoming_events(self, now=None):
        """Artists mit mindestens einem aktiven, nicht gelöschten Event ab heute."""
        today = (now or utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
        return (
            self._query()
            .join(Artist.events)
            .join(Event.dates)
            .filter(
                Event.is_active.is_(True),
                Event.is_deleted.is_(False),
                EventDate.date >= today,
            )
            .distinct()
            .order_by(Artist.name)
            .all()
        )

    def create_artist(self, name, genres=None, bio='', origin='', social_media=None,
                      images=None, user_id=None, slug=None):
        """Legt einen neuen Artist an; der Slug wird aus dem Namen erzeugt."""
        if not name or not name.strip():
            raise ValidationError('Artist name must not be empty')
        try:
            artist = Artist(
                name=name.strip(),
                slug=slug or unique_slug(name, self._slug_exists),
                genres=list(genres or []),
                bio=bio or '',
                origin=origin or '',
                social_media=dict(social_media or {}),
                user_id=user_id,
            )
            artist.images = _build_images(images, artist.name)
            self.db.session.add(artist)
            self.db.session.commit()
            logger.info(f"Created artist {artist.id} ({artist.slug})")
            return artist
        except Exception:
            self.db.session.rollback()
            raise

    def update_artist(self, artist_id, name=None, genres=None, bio=None, origin=None,
                      social_media=None, images=None):
        """
        Aktualisiert ein Artist-Profil. None lässt ein Feld unverändert.
        Bei geändertem Namen wird der Slug neu erzeugt; eine nicht-leere
        Bildliste ersetzt die bisherigen Bilder.
        """
        artist = self.get_artist(artist_id)
        if not artist:
            raise NotFoundError('Artist not found')
        if name is not None and not name.strip():
            raise ValidationError('Artist name must not be empty')
        try:
            if name is not None and name.strip() != artist.name:
                own_slug = artist.slug
                artist.name = name.strip()
                artist.slug = unique_slug(name, lambda s: s != own_slug and self._slug_exists(s))
            if genres is not None:
                artist.genres = list(genres)
            if bio is not None:
                artist.bio = bio
            if origin is not None:
                artist.origin = origin
            if social_media is not None:
                artist.social_media = dict(social_media)
            if images:
                artist.images = _build_images(images, artist.name)
            self.db.session.commit()
            logger.info(f"Updated artist {artist.id} ({artist.slug})")
            return artist
        except Exception:
            self.db.session.rollback()
            raise

    def validate_profile(self, data):
        """
        Prüft Formulardaten (camelCase) für Anlage/Bearbeitung und gibt die
        Keyword-Argumente für create_artist/update_artist zurück.
        """
        errors = {}
        values = {}
        for key, min_len in PROFILE_MIN_LENGTHS:
            value = data.get(key)
            value = value.strip() if isinstance(value, str) else ''
            if len(value) < min_len:
                errors[key] = f'at least {min_len} characters'
            values[key] = value

        genres = data.get('genres')
        if isinstance(genres, list):
            genres = [g.strip() for g in genres if isinstance(g, str) and g.strip()]
        if not genres:
            errors['genres'] = 'at least one genre required'

        social_media = data.get('socialMedia') or {}
        if not isinstance(social_media, dict):
            errors['socialMedia'] = 'must be an object'
            social_media = {}

        images = data.get('images') or []
        if not isinstance(images, list) or any(not isinstance(i, dict) or not i.get('url') for i in images):
            errors['images'] = 'every image needs a url'

        if errors:
            raise ValidationError('Invalid artist data', details=errors)
        return dict(
            values,
            genres=genres,
            social_media={k: v for k, v in social_media.items() if v},
            images=images,
        )

    def _slug_exists(self, slug):
        return Artist.query.filter_by(slug=slug).first() is not None

    def serialize(self, artist, include_events=False):
        """Serialisiert einen Artist in ein Dictionary."""
        visible = [e for e in artist.events if e.is_active and not e.is_deleted]
        data = {
            'id': artist.id,
            'name': artist.name,
            'slug': artist.slug,
            'genres': list(artist.genres or []),
            'bio': artist.bio,
            'origin': artist.origin,
            'images': [{'url': i.url, 'alt': i.alt, 'public_id': i.public_id} for i in artist.images],
            'profileImageId': artist.profile_image_id,
            'socialMedia': artist.social_media or {},
            'upcomingEvents': [e.id for e in visible],
            'createdAt': artist.created_at.isoformat() if artist.created_at else None,
            'updatedAt': artist.updated_at.isoformat() if artist.updated_at else None,
        }
        if include_events:
            data['events'] = [
                {
                    'id': e.id,
                    'title': e.title,
                    'slug': e.slug,
                    'dates': [d.date.isoformat() for d in e.dates],
                }
                for e in visible
            ]
        return data


def _build_images(images, default_alt):
    return [
        Image(
            url=img['url'],
            alt=img.get('alt') or default_alt,
            public_id=img.get('public_id') or img.get('publicId'),
        )
        for img in images or []
    ]
