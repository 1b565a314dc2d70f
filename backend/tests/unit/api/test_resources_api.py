"""
Create / update / delete behave the same way for every simple resource
"""
import pytest


RESOURCES = [
    ('/api/external-links', {'title': 'Railway Board', 'url': 'https://indianrailways.gov.in', 'category': 'government'},
     'put', {'title': 'Railway Board (RB)'}, 'title'),
    ('/api/body-members', {'name': 'S. Kulkarni', 'designation': 'President', 'photoUrl': '/uploads/body-members/p.jpg', 'division': 'Pune'},
     'put', {'designation': 'General Secretary'}, 'designation'),
    ('/api/advertisements', {'title': 'AGM notice', 'type': 'announcement', 'priority': 'high'},
     'put', {'title': 'AGM notice (revised)'}, 'title'),
    ('/api/achievements', {'title': 'Pay anomaly resolved', 'type': 'courtCase'},
     'put', {'title': 'Pay anomaly case won'}, 'title'),
    ('/api/breaking-news', {'title': 'Strike called off', 'priority': 8},
     'put', {'priority': 9}, 'priority'),
    ('/api/suggestions', {'text': 'Hold the AGM online too'},
     'put', {'text': 'Hold the AGM online and offline'}, 'text'),
    ('/api/mutual-transfers', {'post': 'SSE/P.Way', 'currentLocation': 'Pune', 'desiredLocation': 'Nagpur'},
     'patch', {'desiredLocation': 'Solapur'}, 'desiredLocation'),
]


@pytest.mark.parametrize('path,payload,method,changes,field', RESOURCES, ids=[r[0] for r in RESOURCES])
class TestResourceContract:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client, admin_auth_headers, path, payload, method, changes, field):
        created = await client.post(path, json=payload, headers=admin_auth_headers)
        assert created.status_code == 201, created.text
        record = created.json()
        assert record['id']

        url = f"{path}/{record['id']}"
        updated = await client.request(method.upper(), url, json=changes, headers=admin_auth_headers)
        assert updated.status_code == 200
        assert updated.json()[field] == changes[field]

        # updating with the same values changes nothing
        again = await client.request(method.upper(), url, json=changes, headers=admin_auth_headers)
        assert again.json() == updated.json()

        assert (await client.delete(url, headers=admin_auth_headers)).status_code == 200
        missing = await client.delete(url, headers=admin_auth_headers)
        assert missing.status_code == 404
        assert missing.json()['success'] is False

    @pytest.mark.asyncio
    async def test_unknown_id(self, client, admin_auth_headers, path, payload, method, changes, field):
        response = await client.request(method.upper(), f'{path}/does-not-exist', json=changes, headers=admin_auth_headers)
        assert response.status_code == 404
