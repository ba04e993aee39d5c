import pytest

from helpers.errors import NotFoundError, ValidationError
from managers.artist_manager import ArtistManager


def test_get_all_artists_initially_empty():
    """Gibt eine leere Liste zurück, wenn keine Artists existieren."""
    assert ArtistManager().get_all_artists() == []


def test_create_artist_generates_slug():
    manager = ArtistManager()
    artist = manager.create_artist('Orquesta Típica Berlín', genres=['tango'], origin='Buenos Aires',
                                   images=[{'url': 'https://img.example/otb.jpg', 'public_id': 'artists/otb'}])
    assert artist.slug == 'orquesta-típica-berlín'
    assert artist.images[0].alt == 'Orquesta Típica Berlín'
    assert manager.get_artist_by_slug(artist.slug).id == artist.id


def test_slug_collision_gets_suffix():
    manager = ArtistManager()
    manager.create_artist('Milonga Sur')
    second = manager.create_artist('Milonga Sur!')
    assert second.slug == 'milonga-sur-2'


def test_create_artist_requires_name():
    with pytest.raises(ValidationError):
        ArtistManager().create_artist('   ')


def test_get_all_artists_sorted_by_name():
    manager = ArtistManager()
    manager.create_artist('Zeta', genres=['rock'])
    manager.create_artist('Alfa', genres=['tango'])
    assert [a.name for a in manager.get_all_artists()] == ['Alfa', 'Zeta']


def test_get_artists_by_genre_and_search():
    manager = ArtistManager()
    manager.create_artist('Zeta', genres=['rock'])
    manager.create_artist('Alfa', genres=['tango', 'milonga'])
    assert [a.name for a in manager.get_artists_by_genre('milonga')] == ['Alfa']
    assert [a.name for a in manager.search_artists_by_name('ZET')] == ['Zeta']


def test_artists_with_upcoming_events(make_artist, make_event):
    upcoming = make_artist(name='Con Fecha')
    make_artist(name='Sin Fecha')
    past = make_artist(name='Ya Tocó')
    make_event(title='Futuro', artist_id=upcoming, days=(3,))
    make_event(title='Pasado', artist_id=past, days=(-3,))
    names = [a.name for a in ArtistManager().get_artists_with_upcoming_events()]
    assert names == ['Con Fecha']


def test_serialize_lists_only_visible_events(make_artist, make_event, event_manager):
    artist_id = make_artist(name='Dúo Chacarera', genres=('folklore',))
    keep = make_event(title='Peña', artist_id=artist_id)
    gone = make_event(title='Peña cancelada', artist_id=artist_id)
    event_manager.delete_event(gone)

    manager = ArtistManager()
    data = manager.serialize(manager.get_artist(artist_id), include_events=True)
    assert data['name'] == 'Dúo Chacarera'
    assert data['genres'] == ['folklore']
    assert data['upcomingEvents'] == [keep]
    assert [e['id'] for e in data['events']] == [keep]


def test_update_artist_regenerates_slug_and_replaces_images():
    manager = ArtistManager()
    artist = manager.create_artist('Dúo Sur', genres=['folklore'],
                                   images=[{'url': 'https://img.example/old.jpg', 'public_id': 'artists/old'}])
    manager.create_artist('Dúo Norte')

    updated = manager.update_artist(
        artist.id,
        name='Dúo Norte',
        genres=['folklore', 'chacarera'],
        images=[{'url': 'https://img.example/new.jpg', 'publicId': 'artists/new'}],
    )
    assert updated.slug == 'dúo-norte-2'
    assert updated.genres == ['folklore', 'chacarera']
    assert [(i.url, i.alt, i.public_id) for i in updated.images] == [
        ('https://img.example/new.jpg', 'Dúo Norte', 'artists/new'),
    ]


def test_update_artist_keeps_slug_and_images_when_unchanged():
    manager = ArtistManager()
    artist = manager.create_artist('Milonga Sur', images=[{'url': 'https://img.example/a.jpg'}])
    updated = manager.update_artist(artist.id, name='Milonga Sur', bio='Neue Bio für den Artist', images=[])
    assert updated.slug == 'milonga-sur'
    assert updated.bio == 'Neue Bio für den Artist'
    assert [i.url for i in updated.images] == ['https://img.example/a.jpg']


def test_update_artist_errors():
    manager = ArtistManager()
    with pytest.raises(NotFoundError):
        manager.update_artist(999999, name='Nadie')
    artist = manager.create_artist('Alfa')
    with pytest.raises(ValidationError):
        manager.update_artist(artist.id, name='  ')


def test_validate_profile():
    profile = ArtistManager().validate_profile({
        'name': ' Orquesta Típica ',
        'bio': 'Tango-Orchester aus Berlin',
        'origin': 'Berlin',
        'genres': ['tango', ' '],
        'socialMedia': {'instagram': 'https://instagram.com/ot', 'facebook': ''},
    })
    assert profile == {
        'name': 'Orquesta Típica',
        'bio': 'Tango-Orchester aus Berlin',
        'origin': 'Berlin',
        'genres': ['tango'],
        'social_media': {'instagram': 'https://instagram.com/ot'},
        'images': [],
    }

    with pytest.raises(ValidationError) as exc:
        ArtistManager().validate_profile({'name': 'A', 'bio': 'kurz', 'genres': [], 'images': [{'alt': 'x'}]})
    assert set(exc.value.details) == {'name', 'bio', 'origin', 'genres', 'images'}
