import sys
from pathlib import Path
# sicherstellen, dass das Projekt-Root im Import-Pfad ist
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import logging
from datetime import timedelta

from managers.artist_manager import ArtistManager
from managers.event_manager import EventManager
from managers.user_manager import UserManager
from models import UserRole, UserStatus, utcnow

logger = logging.getLogger(__name__)

# Demo-Daten für lokale Entwicklung (Termine relativ zu heute)
ARTISTS = [
    {
        'name': 'Orquesta Típica Berlín',
        'genres': ['tango'],
        'origin': 'Buenos Aires / Berlin',
        'bio': 'Tango-Orchester mit Bandoneon, Streichern und Klavier.',
        'social_media': {'instagram': 'https://instagram.com/otberlin'},
    },
    {
        'name': 'Dúo Chacarera',
        'genres': ['folklore', 'chacarera'],
        'origin': 'Santiago del Estero',
        'bio': 'Folklore aus dem Norden Argentiniens.',
    },
    {
        'name': 'Milonga Sur',
        'genres': ['tango', 'milonga'],
        'origin': 'Rosario',
        'bio': 'Milongas und Valses für die Tanzfläche.',
    },
]

EVENTS = [
    # (Titel, Artist-Index, Genre, Ort, Uhrzeit, Tage relativ zu heute)
    ('Noche de Tango', 0, 'tango', 'Kulturbrauerei, Berlin', '20:00', [7, 14]),
    ('Peña Folklórica', 1, 'folklore', 'Lido, Berlin', '19:30', [10]),
    ('Milonga del Domingo', 2, 'milonga', 'Clärchens Ballhaus, Berlin', '18:00', [-30]),
]


def seed_demo_data(admin_identity='seed-admin', now=None):
    """
    Legt einen aktiven Admin, Demo-Artists und Demo-Events an.
    Bestehende Datensätze (gleicher Slug bzw. gleiche Identity) werden übersprungen.
    Gibt die Anzahl neu angelegter Artists und Events zurück.
    """
    user_mgr, artist_mgr, event_mgr = UserManager(), ArtistManager(), EventManager()
    today = (now or utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)

    admin, created = user_mgr.sync_user(admin_identity, email=f'{admin_identity}@example.com',
                                        first_name='Seed', last_name='Admin')
    if created:
        user_mgr.update_user_role(admin.id, UserRole.ADMIN)
        user_mgr.update_user_status(admin.id, UserStatus.ACTIVE)

    artists, new_artists = [], 0
    for data in ARTISTS:
        existing = artist_mgr.search_artists_by_name(data['name'])
        if existing:
            artists.append(existing[0])
            continue
        artists.append(artist_mgr.create_artist(user_id=admin.id, **data))
        new_artists += 1

    new_events = 0
    known_titles = {e.title for e in event_mgr.get_all_events()}
    for title, idx, genre, location, time, offsets in EVENTS:
        if title in known_titles:
            continue
        hour, minute = (int(p) for p in time.split(':'))
        dates = [today + timedelta(days=d, hours=hour, minutes=minute) for d in offsets]
        event_mgr.create_event(
            title=title,
            artist_id=artists[idx].id,
            dates=dates,
            location=location,
            time=time,
            genre=genre,
            price=15.0,
            created_by=admin,
        )
        new_events += 1

    logger.info(f"Seed: {new_artists} artists, {new_events} events created")
    return new_artists, new_events


if __name__ == '__main__':
    from app import app
    from models import db

    with app.app_context():
        db.create_all()
        seed_demo_data()
