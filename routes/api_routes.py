"""
API-Modul: Öffentliche Listen für Artists und Events, Anlage und
Bearbeitung von Artist-Profilen sowie die Soft-Delete-Verwaltung von Events.
"""
from flask import request, jsonify
from flask import Blueprint
from flasgger import swag_from
import logging

from helpers.authz import active_required, admin_required, can_edit_artist
from helpers.errors import ForbiddenError, NotFoundError, ValidationError
from helpers.http_responses import message_response
from managers.artist_manager import ArtistManager
from managers.event_manager import EventManager
from services.dates import resolve_locale
from services.filters import FilterCriteria, filter_artists, filter_events, flatten_event_dates

logger = logging.getLogger(__name__)

# Manager-Instanzen
artist_mgr = ArtistManager()
event_mgr = EventManager()

# Blueprint für API-Routen
api_bp = Blueprint('api', __name__)


def _criteria(name_key='name'):
    """FilterCriteria aus den Query-Parametern; ungültiges Datum -> 400."""
    try:
        return FilterCriteria.from_args(request.args, name_key=name_key)
    except ValueError:
        raise ValidationError('Invalid date filter, expected YYYY-MM-DD', details={'date': request.args.get('date')})


def _occurrences_payload(events, criteria, locale):
    """Events pro Termin chronologisch, wie im Kalender des Frontends."""
    payload = []
    for occ in flatten_event_dates(events, on=criteria.date):
        item = event_mgr.serialize(occ.event, locale)
        item['date'] = occ.date.isoformat()
        payload.append(item)
    return payload


# Artists
@api_bp.route('/artists', methods=['GET'])
@swag_from('../resources/swagger/artists_get.yml')
def list_artists():
    """Return all artists, optionally filtered by ?name= and ?genre=, sorted by name."""
    criteria = _criteria()
    logger.debug(f"list_artists called with name={criteria.name!r} genre={criteria.genre!r}")
    artists = filter_artists(artist_mgr.get_all_artists(), criteria)
    return jsonify([artist_mgr.serialize(a) for a in artists]), 200


@api_bp.route('/artists/<string:slug>', methods=['GET'])
@swag_from('../resources/swagger/artists_slug_get.yml')
def get_artist(slug):
    """Return one artist by slug including its visible events."""
    artist = artist_mgr.get_artist_by_slug(slug)
    if not artist:
        raise NotFoundError('Artist not found')
    return jsonify(artist_mgr.serialize(artist, include_events=True)), 200


@api_bp.route('/artists', methods=['POST'])
@active_required
@swag_from('../resources/swagger/artists_post.yml')
def create_artist(auth):
    """Create an artist profile owned by the current ACTIVE user."""
    data = request.get_json(silent=True) or {}
    logger.debug(f"create_artist called by user {auth.user.id} name={data.get('name')!r}")
    profile = artist_mgr.validate_profile(data)
    artist = artist_mgr.create_artist(user_id=auth.user.id, **profile)
    return jsonify(artist_mgr.serialize(artist)), 201


@api_bp.route('/artists/<int:artist_id>', methods=['PUT'])
@active_required
@swag_from('../resources/swagger/artists_id_put.yml')
def update_artist(artist_id, auth):
    """Edit an artist profile; only its owner or an admin may do this."""
    artist = artist_mgr.get_artist(artist_id)
    if not artist:
        raise NotFoundError('Artist not found')
    if not can_edit_artist(auth, artist):
        logger.warning(f"[AUTH] user {auth.user.id} tried to edit artist {artist_id} without permission")
        raise ForbiddenError('You do not have permission to edit this artist')
    profile = artist_mgr.validate_profile(request.get_json(silent=True) or {})
    artist = artist_mgr.update_artist(artist_id, **profile)
    return jsonify(artist_mgr.serialize(artist)), 200


# Events
@api_bp.route('/events', methods=['GET'])
@swag_from('../resources/swagger/events_get.yml')
def list_events():
    """Upcoming events, filtered by ?artist=, ?genre=, ?date= and flattened per date."""
    criteria = _criteria(name_key='artist' if 'artist' in request.args else 'name')
    locale = resolve_locale()
    events = filter_events(event_mgr.get_upcoming_events(), criteria)
    logger.debug(f"list_events: {len(events)} events after filtering ({criteria})")
    return jsonify(_occurrences_payload(events, criteria, locale)), 200


@api_bp.route('/events/past', methods=['GET'])
@swag_from('../resources/swagger/events_past_get.yml')
def list_past_events():
    """Events whose dates all lie in the past, most recent first."""
    criteria = _criteria(name_key='artist' if 'artist' in request.args else 'name')
    locale = resolve_locale()
    past = event_mgr.get_past_events()
    matching = {e.id for e in filter_events(past, criteria)}
    return jsonify([event_mgr.serialize(e, locale) for e in past if e.id in matching]), 200


@api_bp.route('/events/deleted', methods=['GET'])
@admin_required
@swag_from('../resources/swagger/events_deleted_get.yml')
def list_deleted_events(auth):
    """Admin view: all soft-deleted events."""
    locale = resolve_locale()
    events = event_mgr.get_deleted_events()
    logger.debug(f"[ADMIN] list_deleted_events by user {auth.user.id}: {len(events)} events")
    return jsonify({'events': [event_mgr.serialize(e, locale) for e in events]}), 200


@api_bp.route('/events/<string:slug>', methods=['GET'])
@swag_from('../resources/swagger/events_slug_get.yml')
def get_event(slug):
    """Return one visible event by slug."""
    event = event_mgr.get_event_by_slug(slug)
    if not event:
        raise NotFoundError('Event not found')
    return jsonify(event_mgr.serialize(event, resolve_locale())), 200


@api_bp.route('/events', methods=['POST'])
@active_required
@swag_from('../resources/swagger/events_post.yml')
def create_event(auth):
    """Create an event; only ACTIVE users may do this."""
    data = request.get_json(silent=True) or {}
    logger.debug(f"create_event called by user {auth.user.id} title={data.get('title')!r} "
                 f"images={len(data.get('images') or [])}")
    dates = data.get('dates') or []
    if not isinstance(dates, list):
        raise ValidationError('dates must be a list', details={'dates': 'must be a list'})
    event = event_mgr.create_event(
        title=data.get('title'),
        artist_id=data.get('artistId'),
        dates=dates,
        location=data.get('location'),
        time=data.get('time'),
        genre=data.get('genre'),
        price=data.get('price'),
        description=data.get('description'),
        organizer=data.get('organizerName'),
        images=data.get('images') or [],
        created_by=auth.user,
    )
    return jsonify(event_mgr.serialize(event, resolve_locale())), 201


# Soft-Delete-Lebenszyklus
@api_bp.route('/events/<int:event_id>/delete', methods=['DELETE'])
@active_required
@swag_from('../resources/swagger/events_id_delete.yml')
def soft_delete_event(event_id, auth):
    """Mark an event as deleted (reversible)."""
    logger.debug(f"soft_delete_event {event_id} by user {auth.user.id}")
    event = event_mgr.delete_event(event_id)
    return message_response('Event successfully deleted', event=event_mgr.serialize(event, resolve_locale()))


@api_bp.route('/events/<int:event_id>/restore', methods=['POST'])
@active_required
@swag_from('../resources/swagger/events_id_restore_post.yml')
def restore_event(event_id, auth):
    """Restore a soft-deleted event."""
    logger.debug(f"restore_event {event_id} by user {auth.user.id}")
    event = event_mgr.restore_event(event_id)
    return message_response('Event successfully restored', event=event_mgr.serialize(event, resolve_locale()))


@api_bp.route('/events/<int:event_id>/permanently-delete', methods=['DELETE'])
@admin_required
@swag_from('../resources/swagger/events_id_permanently_delete.yml')
def permanently_delete_event(event_id, auth):
    """Remove an event for good (admin only, irreversible)."""
    logger.warning(f"[ADMIN] permanently deleting event {event_id} by user {auth.user.id}")
    event_mgr.permanently_delete_event(event_id)
    return message_response('Event permanently deleted')
