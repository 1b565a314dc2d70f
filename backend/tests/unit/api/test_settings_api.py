"""
Tests for portal settings
"""
import pytest


class TestSettings:

    @pytest.mark.asyncio
    async def test_initialize_defaults(self, client, admin_auth_headers):
        response = await client.post('/api/settings/initialize', headers=admin_auth_headers)

        assert response.status_code == 200
        keys = {s['key'] for s in response.json()['settings']}
        assert keys == {'membership_ordinary_price', 'membership_lifetime_price'}

        public = await client.get('/api/settings/membership_ordinary_price')
        assert public.json()['setting']['value'] == 500

    @pytest.mark.asyncio
    async def test_upsert_and_category_filter(self, client, admin_user, admin_auth_headers):
        await client.post('/api/settings', json={'key': 'portal_notice', 'value': 'Hello', 'category': 'General'}, headers=admin_auth_headers)
        response = await client.post('/api/settings', json={'key': 'portal_notice', 'value': 'Updated'}, headers=admin_auth_headers)

        assert response.json()['setting']['value'] == 'Updated'
        assert response.json()['setting']['category'] == 'General'

        general = await client.get('/api/settings', params={'category': 'General'})
        assert [s['key'] for s in general.json()['settings']] == ['portal_notice']

    @pytest.mark.asyncio
    async def test_bulk_update(self, client, admin_auth_headers):
        response = await client.put('/api/settings/bulk', json={'settings': [
            {'key': 'membership_ordinary_price', 'value': 600},
            {'key': 'membership_lifetime_price', 'value': 12000},
        ]}, headers=admin_auth_headers)

        assert response.status_code == 200
        values = {s['key']: s['value'] for s in response.json()['settings']}
        assert values == {'membership_ordinary_price': 600, 'membership_lifetime_price': 12000}

    @pytest.mark.asyncio
    async def test_missing_and_delete(self, client, admin_auth_headers):
        assert (await client.get('/api/settings/nope')).status_code == 404

        await client.post('/api/settings', json={'key': 'temp', 'value': 1}, headers=admin_auth_headers)
        assert (await client.delete('/api/settings/temp', headers=admin_auth_headers)).status_code == 200
        assert (await client.get('/api/settings/temp')).status_code == 404

    @pytest.mark.asyncio
    async def test_members_cannot_write(self, client, auth_headers):
        response = await client.post('/api/settings', json={'key': 'x', 'value': 1}, headers=auth_headers)
        assert response.status_code == 403
