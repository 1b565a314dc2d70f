"""
Tests for the mutual transfer board and suggestions
"""
import pytest
from sqlalchemy import select

from crea.models.notification import Notification, NotificationType


TRANSFER = {'post': 'SSE/P.Way', 'currentLocation': 'Pune', 'desiredLocation': 'Nagpur'}


class TestMutualTransfers:

    @pytest.mark.asyncio
    async def test_contact_defaults_to_profile(self, client, test_user, auth_headers):
        response = await client.post('/api/mutual-transfers', json=TRANSFER, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data['ownerId'] == str(test_user.id)
        assert data['contactName'] == test_user.name
        assert data['contactEmail'] == test_user.email

    @pytest.mark.asyncio
    async def test_search_filters(self, client, auth_headers, other_auth_headers):
        await client.post('/api/mutual-transfers', json=TRANSFER, headers=auth_headers)
        await client.post('/api/mutual-transfers', json={**TRANSFER, 'currentLocation': 'Mumbai CSMT'}, headers=other_auth_headers)

        response = await client.get('/api/mutual-transfers', params={'currentLocation': 'mumbai'}, headers=auth_headers)
        assert [t['currentLocation'] for t in response.json()] == ['Mumbai CSMT']

        mine = await client.get('/api/mutual-transfers/mine', headers=other_auth_headers)
        assert len(mine.json()) == 1

    @pytest.mark.asyncio
    async def test_inactive_hidden(self, client, auth_headers):
        transfer = (await client.post('/api/mutual-transfers', json=TRANSFER, headers=auth_headers)).json()
        await client.patch(f"/api/mutual-transfers/{transfer['id']}", json={'isActive': False}, headers=auth_headers)

        assert (await client.get('/api/mutual-transfers', headers=auth_headers)).json() == []
        everything = await client.get('/api/mutual-transfers', params={'includeInactive': 'true'}, headers=auth_headers)
        assert len(everything.json()) == 1

    @pytest.mark.asyncio
    async def test_only_owner_or_admin_edits(self, client, auth_headers, other_auth_headers, admin_auth_headers):
        transfer = (await client.post('/api/mutual-transfers', json=TRANSFER, headers=auth_headers)).json()
        url = f"/api/mutual-transfers/{transfer['id']}"

        assert (await client.patch(url, json={'notes': 'x'}, headers=other_auth_headers)).status_code == 403
        assert (await client.delete(url, headers=other_auth_headers)).status_code == 403
        assert (await client.delete(url, headers=admin_auth_headers)).status_code == 200

    @pytest.mark.asyncio
    async def test_requires_login(self, client):
        assert (await client.get('/api/mutual-transfers')).status_code == 401


class TestSuggestions:

    @pytest.mark.asyncio
    async def test_anonymous_suggestion_notifies_admins(self, client, db_session, admin_user):
        response = await client.post('/api/suggestions', json={'text': 'Publish minutes of meetings'})

        assert response.status_code == 201
        assert response.json()['userId'] is None
        notification = (await db_session.execute(select(Notification))).scalar_one()
        assert notification.user_id == str(admin_user.id)
        assert notification.type == NotificationType.SUGGESTION
        assert notification.extra_metadata == {'suggestionId': response.json()['id']}

    @pytest.mark.asyncio
    async def test_signed_in_suggestion_records_author(self, client, test_user, auth_headers):
        response = await client.post('/api/suggestions', json={'text': 'More workshops'}, headers=auth_headers)

        assert response.json()['userId'] == str(test_user.id)
        assert response.json()['userName'] == test_user.name

    @pytest.mark.asyncio
    async def test_listing_admin_only(self, client, auth_headers, admin_auth_headers):
        await client.post('/api/suggestions', json={'text': 'One'})

        assert (await client.get('/api/suggestions', headers=auth_headers)).status_code == 403
        assert len((await client.get('/api/suggestions', headers=admin_auth_headers)).json()) == 1
