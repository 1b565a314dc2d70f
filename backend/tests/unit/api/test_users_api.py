"""
Tests for password accounts, profiles and admin user management
"""
import pytest

from crea.models.user import MembershipType


class TestRegisterLogin:

    @pytest.mark.asyncio
    async def test_register(self, client):
        response = await client.post('/api/users/register', json={
            'name': 'Ravi Kumar',
            'email': 'Ravi@Example.com',
            'password': 'secret123',
            'division': 'Mumbai',
        })

        assert response.status_code == 201
        data = response.json()
        assert data['email'] == 'ravi@example.com'
        assert data['token']
        assert 'hashedPassword' not in data

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client, test_user):
        response = await client.post('/api/users/register', json={
            'name': 'Dup', 'email': test_user.email, 'password': 'secret123'
        })
        assert response.status_code == 400
        assert response.json()['error']['code'] == 'DUPLICATE_RESOURCE'
        assert response.json()['message'] == 'User already exists'

    @pytest.mark.asyncio
    async def test_login(self, client, test_user):
        response = await client.post('/api/users/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })
        assert response.status_code == 200
        assert response.json()['id'] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, test_user):
        response = await client.post('/api/users/login', json={
            'email': test_user.email, 'password': 'wrong-password'
        })
        assert response.status_code == 401
        assert response.json()['message'] == 'Invalid email or password'


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client, test_user, auth_headers):
        response = await client.get('/api/users/profile', headers=auth_headers)
        assert response.status_code == 200
        assert response.json()['division'] == 'Pune'

    @pytest.mark.asyncio
    async def test_update_profile_and_password(self, client, test_user, auth_headers):
        response = await client.put('/api/users/profile', headers=auth_headers, json={
            'designation': 'AEN',
            'mobile': '9123456789',
            'password': 'newsecret123',
        })
        assert response.status_code == 200
        assert response.json()['designation'] == 'AEN'

        login = await client.post('/api/users/login', json={'email': test_user.email, 'password': 'newsecret123'})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_mobile(self, client, auth_headers):
        response = await client.put('/api/users/profile', headers=auth_headers, json={'mobile': '12345'})
        assert response.status_code == 422


class TestAdminUserManagement:

    @pytest.mark.asyncio
    async def test_list_requires_admin(self, client, auth_headers):
        response = await client.get('/api/users', headers=auth_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_list_filtered_by_division(self, client, test_user, other_user, admin_auth_headers):
        response = await client.get('/api/users', headers=admin_auth_headers, params={'division': 'Nagpur'})

        assert response.status_code == 200
        assert [u['id'] for u in response.json()] == [str(other_user.id)]

    @pytest.mark.asyncio
    async def test_generate_member_id(self, client, test_user, admin_auth_headers):
        missing = await client.post(f'/api/users/{test_user.id}/generate-member-id', headers=admin_auth_headers)
        assert missing.status_code == 400

        await client.put(f'/api/users/{test_user.id}', headers=admin_auth_headers, json={
            'membershipType': MembershipType.LIFETIME.value
        })
        response = await client.post(f'/api/users/{test_user.id}/generate-member-id', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['memberId'] == 'LIF-0001'
        assert response.json()['isMember'] is True

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(self, client, admin_user, admin_auth_headers):
        response = await client.delete(f'/api/users/{admin_user.id}', headers=admin_auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_user(self, client, other_user, admin_auth_headers):
        response = await client.delete(f'/api/users/{other_user.id}', headers=admin_auth_headers)
        assert response.status_code == 200

        again = await client.delete(f'/api/users/{other_user.id}', headers=admin_auth_headers)
        assert again.status_code == 404
        assert again.json()['message'] == 'User not found'
