import pytest

from managers.event_manager import EventManager


@pytest.mark.integration
def test_soft_delete_event(client, active_user, make_event):
    """
    Tag: Events
    DELETE /api/events/<id>/delete markiert das Event als gelöscht.
    """
    event_id = make_event(title='Noche de Tango')
    resp = client.delete(f'/api/events/{event_id}/delete', headers=active_user.headers)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['message'] == 'Event successfully deleted'
    assert data['event']['id'] == event_id
    assert data['event']['isDeleted'] is True

    # Zweites Löschen -> 400 ohne Seiteneffekt
    again = client.delete(f'/api/events/{event_id}/delete', headers=active_user.headers)
    assert again.status_code == 400
    body = again.get_json()
    assert body['error'] == 'invalid_state'
    assert body['message'] == 'Event is already marked as deleted'
    assert EventManager().get_event_by_id(event_id, include_deleted=True).is_deleted is True


@pytest.mark.integration
def test_soft_delete_unknown_event(client, active_user):
    resp = client.delete('/api/events/999999/delete', headers=active_user.headers)
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'Event not found'


@pytest.mark.integration
def test_soft_delete_requires_session(client, make_event):
    event_id = make_event()
    resp = client.delete(f'/api/events/{event_id}/delete')
    assert resp.status_code == 401
    assert EventManager().get_event_by_id(event_id) is not None


@pytest.mark.integration
@pytest.mark.parametrize('user_fixture, status', [('pending_user', 'PENDING'), ('blocked_user', 'BLOCKED')])
def test_soft_delete_requires_active_user(request, client, make_event, user_fixture, status):
    user = request.getfixturevalue(user_fixture)
    event_id = make_event()
    resp = client.delete(f'/api/events/{event_id}/delete', headers=user.headers)
    assert resp.status_code == 403
    assert resp.get_json()['details'] == {'status': status}
    assert EventManager().get_event_by_id(event_id) is not None


@pytest.mark.integration
def test_unregistered_identity_gets_404(client, unregistered_headers, make_event):
    event_id = make_event()
    resp = client.delete(f'/api/events/{event_id}/delete', headers=unregistered_headers)
    assert resp.status_code == 404
    assert resp.get_json()['message'] == 'User exists in identity provider but not in database'


@pytest.mark.integration
def test_restore_event(client, active_user, make_event):
    """
    Tag: Events
    POST /api/events/<id>/restore stellt ein gelöschtes Event wieder her.
    """
    event_id = make_event(title='Vuelta')
    before = client.get('/api/events/vuelta').get_json()

    client.delete(f'/api/events/{event_id}/delete', headers=active_user.headers)
    assert client.get('/api/events/vuelta').status_code == 404

    resp = client.post(f'/api/events/{event_id}/restore', headers=active_user.headers)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['message'] == 'Event successfully restored'
    assert data['event']['isDeleted'] is False

    after = client.get('/api/events/vuelta').get_json()
    before.pop('updatedAt')
    after.pop('updatedAt')
    assert after == before


@pytest.mark.integration
def test_restore_active_event_is_rejected(client, active_user, make_event):
    event_id = make_event()
    resp = client.post(f'/api/events/{event_id}/restore', headers=active_user.headers)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Event is not marked as deleted'


@pytest.mark.integration
def test_restore_unknown_event(client, active_user):
    resp = client.post('/api/events/999999/restore', headers=active_user.headers)
    assert resp.status_code == 404


@pytest.mark.integration
def test_permanent_delete_by_admin(client, admin_user, make_event):
    """
    Tag: Events
    DELETE /api/events/<id>/permanently-delete entfernt das Event endgültig.
    """
    event_id = make_event()
    resp = client.delete(f'/api/events/{event_id}/permanently-delete', headers=admin_user.headers)
    assert resp.status_code == 200
    assert resp.get_json() == {'message': 'Event permanently deleted'}

    # Danach gibt es nichts mehr zu löschen oder wiederherzustellen
    assert client.delete(f'/api/events/{event_id}/permanently-delete', headers=admin_user.headers).status_code == 404
    assert client.post(f'/api/events/{event_id}/restore', headers=admin_user.headers).status_code == 404


@pytest.mark.integration
def test_permanent_delete_of_soft_deleted_event(client, admin_user, make_event):
    event_id = make_event()
    client.delete(f'/api/events/{event_id}/delete', headers=admin_user.headers)
    resp = client.delete(f'/api/events/{event_id}/permanently-delete', headers=admin_user.headers)
    assert resp.status_code == 200
    assert EventManager().get_event_by_id(event_id, include_deleted=True) is None


@pytest.mark.integration
def test_permanent_delete_requires_admin(client, active_user, make_event):
    event_id = make_event()
    assert client.delete(f'/api/events/{event_id}/permanently-delete').status_code == 401

    resp = client.delete(f'/api/events/{event_id}/permanently-delete', headers=active_user.headers)
    assert resp.status_code == 403
    assert resp.get_json()['message'] == 'Forbidden: Admin role required'
    assert EventManager().get_event_by_id(event_id) is not None


@pytest.mark.integration
def test_list_deleted_events(client, admin_user, active_user, make_event):
    kept = make_event(title='Sigue')
    gone = make_event(title='Borrado')
    client.delete(f'/api/events/{gone}/delete', headers=active_user.headers)

    assert client.get('/api/events/deleted', headers=active_user.headers).status_code == 403

    resp = client.get('/api/events/deleted', headers=admin_user.headers)
    assert resp.status_code == 200
    ids = [e['id'] for e in resp.get_json()['events']]
    assert ids == [gone]
    assert kept not in ids
