"""
Tests for events and their notifications
"""
import pytest
from sqlalchemy import select

from crea.models.notification import Notification, NotificationType


EVENT = {
    'title': 'Annual General Meeting',
    'description': 'AGM at the Pune divisional office',
    'date': '2025-08-15T10:00:00',
    'location': 'Pune',
}


class TestEvents:

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client, auth_headers):
        response = await client.post('/api/events', json=EVENT, headers=auth_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_create_notifies_every_user(self, client, db_session, test_user, other_user, admin_auth_headers):
        response = await client.post('/api/events', json=EVENT, headers=admin_auth_headers)

        assert response.status_code == 201
        event_id = response.json()['id']
        notifications = (await db_session.execute(select(Notification))).scalars().all()
        assert {n.user_id for n in notifications} >= {str(test_user.id), str(other_user.id)}
        assert all(n.type == NotificationType.EVENT for n in notifications)
        assert all(n.extra_metadata == {'eventId': event_id} for n in notifications)
        assert notifications[0].title == 'New Event Published'

    @pytest.mark.asyncio
    async def test_breaking_event_notification(self, client, db_session, admin_auth_headers):
        await client.post('/api/events', json={**EVENT, 'breaking': True}, headers=admin_auth_headers)

        notification = (await db_session.execute(select(Notification))).scalars().first()
        assert notification.type == NotificationType.BREAKING
        assert notification.title == 'Breaking News Alert'

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, client, admin_auth_headers):
        response = await client.post('/api/events', json={'title': 'No date'}, headers=admin_auth_headers)
        assert response.status_code == 400
        assert response.json()['message'] == 'Title, description and date are required'

    @pytest.mark.asyncio
    async def test_list_newest_date_first(self, client, admin_auth_headers):
        await client.post('/api/events', json={**EVENT, 'title': 'Older', 'date': '2025-01-01T10:00:00'}, headers=admin_auth_headers)
        await client.post('/api/events', json={**EVENT, 'title': 'Newer', 'date': '2025-09-01T10:00:00'}, headers=admin_auth_headers)

        response = await client.get('/api/events')
        assert [e['title'] for e in response.json()] == ['Newer', 'Older']

    @pytest.mark.asyncio
    async def test_photos_upload_and_delete(self, client, upload_root, admin_auth_headers):
        event_id = (await client.post('/api/events', json=EVENT, headers=admin_auth_headers)).json()['id']

        response = await client.post(
            f'/api/events/{event_id}/photos',
            files=[('photos', ('stage.png', b'\x89PNG fake', 'image/png'))],
            headers=admin_auth_headers,
        )
        assert response.status_code == 200
        photos = response.json()['photos']
        assert len(photos) == 1
        assert len(list((upload_root / 'events').iterdir())) == 1

        assert (await client.delete(f'/api/events/{event_id}', headers=admin_auth_headers)).status_code == 200
        assert list((upload_root / 'events').iterdir()) == []
        assert (await client.get(f'/api/events/{event_id}')).status_code == 404
