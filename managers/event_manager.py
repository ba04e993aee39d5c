from models import db, Artist, Event, EventDate, Image, utcnow
from helpers.errors import InvalidStateError, NotFoundError, ValidationError, CloudinaryError
from helpers.slugs import unique_slug
from services.dates import format_date_by_locale, format_date_short_by_locale, DEFAULT_LOCALE
from datetime import date, datetime, timedelta
from sqlalchemy.orm import selectinload
from flask import current_app
import enum
import logging

logger = logging.getLogger(__name__)


class EventState(enum.Enum):
    """Lebenszyklus eines Events: aktiv, soft-gelöscht oder endgültig entfernt."""
    ACTIVE = "ACTIVE"
    SOFT_DELETED = "SOFT_DELETED"
    PURGED = "PURGED"


def event_state(event):
    """Leitet den Zustand aus dem is_deleted-Flag ab; None bedeutet PURGED."""
    if event is None:
        return EventState.PURGED
    return EventState.SOFT_DELETED if event.is_deleted else EventState.ACTIVE


def _parse_datetime(value):
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f'Invalid date: {value}')
    return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed


def _start_of_day(value):
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


class EventManager:
    """
    Lese-Operationen für Events, Anlage neuer Events und der Soft-Delete-Lebenszyklus
    (löschen, wiederherstellen, endgültig löschen).
    """
    def __init__(self, image_deleter=None):
        """Initialisiert den EventManager; image_deleter löscht Bilder beim Bild-Hoster."""
        self.db = db
        self._image_deleter = image_deleter

    def _query(self):
        return Event.query.options(
            selectinload(Event.dates),
            selectinload(Event.images),
            selectinload(Event.artist),
        )

    def _visible(self):
        """Nur aktive und nicht gelöschte Events."""
        return self._query().filter(Event.is_active.is_(True), Event.is_deleted.is_(False))

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def get_all_events(self):
        """Gibt alle sichtbaren Events zurück, neueste zuerst."""
        return self._visible().order_by(Event.created_at.desc(), Event.id.desc()).all()

    def get_event_by_id(self, event_id, include_deleted=False):
        """
        Gibt das Event mit der ID zurück oder None.
        Mit include_deleted=True werden auch soft-gelöschte/inaktive Events gefunden.
        """
        query = self._query() if include_deleted else self._visible()
        return query.filter(Event.id == event_id).first()

    def get_event_by_slug(self, slug):
        return self._visible().filter(Event.slug == slug).first()

    def get_events_by_genre(self, genre):
        return self._visible().filter(Event.genre == genre).order_by(Event.created_at.desc()).all()

    def get_events_by_artist_name(self, artist_name):
        """Events, deren Artist-Name den Teilstring enthält (ohne Groß-/Kleinschreibung)."""
        return (
            self._visible()
            .join(Event.artist)
            .filter(Artist.name.ilike(f"%{artist_name}%"))
            .all()
        )

    def get_events_by_artist_id(self, artist_id):
        return self._visible().filter(Event.artist_id == artist_id).all()

    def get_events_by_artist_slug(self, artist_slug):
        return self._visible().join(Event.artist).filter(Artist.slug == artist_slug).all()

    def get_events_by_date(self, day):
        """Events mit mindestens einem Termin am angegebenen Kalendertag."""
        start = _start_of_day(_parse_datetime(day))
        end = start + timedelta(days=1)
        return (
            self._visible()
            .filter(Event.dates.any((EventDate.date >= start) & (EventDate.date < end)))
            .all()
        )

    def get_upcoming_events(self, now=None):
        """Events mit mindestens einem Termin ab heute."""
        today = _start_of_day(now or utcnow())
        return self._visible().filter(Event.dates.any(EventDate.date >= today)).all()

    def get_past_events(self, now=None):
        """Events, deren Termine alle vor heute liegen."""
        today = _start_of_day(now or utcnow())
        events = (
            self._visible()
            .filter(Event.dates.any(), ~Event.dates.any(EventDate.date >= today))
            .all()
        )
        return sorted(events, key=lambda e: max(d.date for d in e.dates), reverse=True)

    def get_deleted_events(self):
        """Gibt alle soft-gelöschten Events zurück (Admin-Ansicht), zuletzt geändert zuerst."""
        return (
            self._query()
            .filter(Event.is_deleted.is_(True))
            .order_by(Event.updated_at.desc(), Event.id.desc())
            .all()
        )

    # ------------------------------------------------------------------
    # Anlage
    # ------------------------------------------------------------------
    def create_event(self, title, artist_id, dates, location, time, genre,
                     price=None, description=None, organizer=None, images=None,
                     created_by=None):
        """Legt ein neues Event mit Terminen und Bildern an."""
        missing = [k for k, v in (('title', title), ('artistId', artist_id), ('location', location),
                                  ('time', time), ('genre', genre)) if not v]
        if missing:
            raise ValidationError('Missing required fields', details={k: 'required' for k in missing})
        if not dates:
            raise ValidationError('At least one date is required', details={'dates': 'required'})

        artist = self.db.session.get(Artist, artist_id)
        if not artist:
            raise NotFoundError('Artist not found')

        if price not in (None, ''):
            try:
                price = float(price)
            except (TypeError, ValueError):
                raise ValidationError('Invalid price', details={'price': 'must be a number'})
        else:
            price = None

        if not organizer and created_by is not None:
            organizer = created_by.full_name
        try:
            event = Event(
                title=title.strip(),
                slug=unique_slug(title, self._slug_exists),
                artist_id=artist.id,
                genre=genre,
                location=location,
                time=time,
                price=price,
                description=description or None,
                organizer=organizer or '',
                created_by_id=created_by.id if created_by is not None else None,
            )
            for when in sorted(_parse_datetime(d) for d in dates):
                event.dates.append(EventDate(date=when))
            for img in images or []:
                event.images.append(Image(
                    url=img['url'],
                    alt=img.get('alt') or event.title,
                    public_id=img.get('public_id') or img.get('publicId'),
                ))
            self.db.session.add(event)
            self.db.session.commit()
            logger.info(f"Created event {event.id} ({event.slug}) for artist {artist.id}")
            return event
        except Exception:
            self.db.session.rollback()
            raise

    def _slug_exists(self, slug):
        return Event.query.filter_by(slug=slug).first() is not None

    # ------------------------------------------------------------------
    # Soft-Delete-Lebenszyklus
    # ------------------------------------------------------------------
    def _require_event(self, event_id):
        event = self.get_event_by_id(event_id, include_deleted=True)
        if event is None:
            raise NotFoundError('Event not found')
        return event

    def delete_event(self, event_id):
        """ACTIVE -> SOFT_DELETED. Wirft NotFoundError bzw. InvalidStateError."""
        event = self._require_event(event_id)
        if event_state(event) is EventState.SOFT_DELETED:
            raise InvalidStateError('Event is already marked as deleted')
        event.is_deleted = True
        self.db.session.commit()
        logger.info(f"Event {event_id} soft-deleted")
        return event

    def restore_event(self, event_id):
        """SOFT_DELETED -> ACTIVE. Wirft NotFoundError bzw. InvalidStateError."""
        event = self._require_event(event_id)
        if event_state(event) is EventState.ACTIVE:
            raise InvalidStateError('Event is not marked as deleted')
        event.is_deleted = False
        self.db.session.commit()
        logger.info(f"Event {event_id} restored")
        return event

    def permanently_delete_event(self, event_id):
        """
        Entfernt das Event endgültig (Termine und Bilder kaskadieren).
        Nicht umkehrbar; gehostete Bilder werden danach best-effort gelöscht.
        """
        event = self._require_event(event_id)
        public_ids = [img.public_id for img in event.images if img.public_id]
        try:
            self.db.session.delete(event)
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise
        logger.info(f"Event {event_id} permanently deleted")
        self._delete_hosted_images(event_id, public_ids)
        return event_id

    def _delete_hosted_images(self, event_id, public_ids):
        if not public_ids or not current_app.config.get('PURGE_REMOTE_IMAGES', True):
            return
        deleter = self._image_deleter
        if deleter is None:
            from services.cloudinary import delete_image
            deleter = delete_image
        for public_id in public_ids:
            try:
                result = deleter(public_id)
                if not result.success:
                    logger.warning(f"Image {public_id} of event {event_id} not deleted: {result.result}")
            except CloudinaryError as e:
                logger.warning(f"Image {public_id} of event {event_id} not deleted: {e}")

    # ------------------------------------------------------------------
    # Serialisierung
    # ------------------------------------------------------------------
    def serialize_dates(self, event, locale=DEFAULT_LOCALE):
        return [
            {
                'date': d.date.isoformat(),
                'formatted': format_date_by_locale(d.date, locale),
                'formattedShort': format_date_short_by_locale(d.date, locale),
            }
            for d in event.dates
        ]

    def serialize(self, event, locale=DEFAULT_LOCALE):
        """Serialisiert ein Event inkl. lokalisierter Termine."""
        artist = event.artist
        return {
            'id': event.id,
            'title': event.title,
            'slug': event.slug,
            'organizer': event.organizer,
            'artist': {
                'id': artist.id,
                'name': artist.name,
                'slug': artist.slug,
            } if artist is not None else None,
            'genre': event.genre,
            'location': event.location,
            'time': event.time,
            'price': event.price,
            'description': event.description,
            'images': [{'url': i.url, 'alt': i.alt, 'public_id': i.public_id} for i in event.images],
            'dates': self.serialize_dates(event, locale),
            'isDeleted': bool(event.is_deleted),
            'isActive': bool(event.is_active),
            'createdAt': event.created_at.isoformat() if event.created_at else None,
            'updatedAt': event.updated_at.isoformat() if event.updated_at else None,
        }
