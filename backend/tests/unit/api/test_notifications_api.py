"""
Tests for in-app notifications
"""
import pytest

from crea.models.notification import NotificationType
from crea.services.notification_service import notify_user


async def seed(db_session, user, count=2):
    items = [
        await notify_user(db_session, user.id, NotificationType.SYSTEM, f'Notice {i}', f'Message {i}')
        for i in range(count)
    ]
    await db_session.commit()
    return items


class TestNotifications:

    @pytest.mark.asyncio
    async def test_list_and_unread_count(self, client, db_session, test_user, other_user, auth_headers):
        await seed(db_session, test_user)
        await seed(db_session, other_user, count=1)

        listing = await client.get('/api/notifications', headers=auth_headers)
        assert len(listing.json()) == 2
        assert all(n['userId'] == str(test_user.id) for n in listing.json())

        count = await client.get('/api/notifications/unread-count', headers=auth_headers)
        assert count.json() == {'count': 2}

    @pytest.mark.asyncio
    async def test_mark_read(self, client, db_session, test_user, auth_headers):
        first, _ = await seed(db_session, test_user)

        response = await client.put(f'/api/notifications/{first.id}/read', headers=auth_headers)
        assert response.json()['read'] is True

        unread = await client.get('/api/notifications', params={'unreadOnly': 'true'}, headers=auth_headers)
        assert len(unread.json()) == 1

        await client.put('/api/notifications/read-all', headers=auth_headers)
        count = await client.get('/api/notifications/unread-count', headers=auth_headers)
        assert count.json()['count'] == 0

    @pytest.mark.asyncio
    async def test_cannot_touch_others_notifications(self, client, db_session, other_user, auth_headers):
        theirs, _ = await seed(db_session, other_user)

        assert (await client.put(f'/api/notifications/{theirs.id}/read', headers=auth_headers)).status_code == 404
        assert (await client.delete(f'/api/notifications/{theirs.id}', headers=auth_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, client, db_session, test_user, auth_headers):
        first, _ = await seed(db_session, test_user)

        assert (await client.delete(f'/api/notifications/{first.id}', headers=auth_headers)).status_code == 200
        assert len((await client.get('/api/notifications', headers=auth_headers)).json()) == 1

    @pytest.mark.asyncio
    async def test_broadcast(self, client, test_user, other_user, auth_headers, admin_auth_headers):
        forbidden = await client.post('/api/notifications/broadcast', json={'title': 'x', 'message': 'y'}, headers=auth_headers)
        assert forbidden.status_code == 403

        response = await client.post('/api/notifications/broadcast', json={
            'title': 'AGM on Friday', 'message': 'All members are invited'
        }, headers=admin_auth_headers)
        assert response.json()['sent'] == 3

        mine = (await client.get('/api/notifications', headers=auth_headers)).json()
        assert mine[0]['type'] == 'association'
