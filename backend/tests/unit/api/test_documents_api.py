"""
Tests for circulars, manuals, court cases and the combined documents listing
"""
import pytest


PDF = ('notice.pdf', b'%PDF-1.4 circular body', 'application/pdf')


async def create_circular(client, headers, **extra):
    data = {'subject': 'Revision of allowances', 'dateOfIssue': '2025-03-01T00:00:00', 'boardNumber': 'RBE 12/2025'}
    data.update(extra.pop('data', {}))
    return await client.post('/api/circulars', data=data, headers=headers, **extra)


class TestCirculars:

    @pytest.mark.asyncio
    async def test_upload_pdf(self, client, upload_root, admin_auth_headers):
        response = await create_circular(client, admin_auth_headers, files={'file': PDF})

        assert response.status_code == 201
        data = response.json()
        assert data['fileName'] == 'notice.pdf'
        assert data['mimeType'] == 'application/pdf'
        assert data['url'].startswith('/uploads/circulars/')
        assert len(list((upload_root / 'circulars').iterdir())) == 1

    @pytest.mark.asyncio
    async def test_external_url(self, client, admin_auth_headers):
        response = await create_circular(client, admin_auth_headers, data={'url': 'https://indianrailways.gov.in/rbe.pdf'})

        assert response.status_code == 201
        assert response.json()['fileName'] is None

    @pytest.mark.asyncio
    async def test_file_and_url_rejected(self, client, admin_auth_headers):
        response = await create_circular(
            client, admin_auth_headers,
            data={'url': 'https://example.com/a.pdf'}, files={'file': PDF},
        )
        assert response.status_code == 400
        assert response.json()['message'] == 'Provide either a file or a URL, not both'

    @pytest.mark.asyncio
    async def test_neither_rejected(self, client, admin_auth_headers):
        response = await create_circular(client, admin_auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_executable_rejected(self, client, admin_auth_headers):
        response = await create_circular(
            client, admin_auth_headers, files={'file': ('tool.exe', b'MZ', 'application/octet-stream')}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_members_only(self, client):
        assert (await client.get('/api/circulars')).status_code == 401

    @pytest.mark.asyncio
    async def test_replacing_file_removes_old_one(self, client, upload_root, admin_auth_headers):
        circular = (await create_circular(client, admin_auth_headers, files={'file': PDF})).json()

        response = await client.put(
            f"/api/circulars/{circular['id']}",
            data={'url': 'https://example.com/new.pdf'},
            headers=admin_auth_headers,
        )
        assert response.json()['url'] == 'https://example.com/new.pdf'
        assert list((upload_root / 'circulars').iterdir()) == []


class TestDocumentsListing:

    @pytest.mark.asyncio
    async def test_combined_listing_and_download(self, client, auth_headers, admin_auth_headers):
        await create_circular(client, admin_auth_headers, files={'file': PDF})
        await client.post('/api/manuals', data={'title': 'Track manual', 'url': 'https://example.com/manual.pdf'}, headers=admin_auth_headers)
        await client.post('/api/court-cases', data={'caseNumber': 'OA 101/2024', 'subject': 'Promotion'}, files={'file': PDF}, headers=admin_auth_headers)

        response = await client.get('/api/documents', headers=auth_headers)

        assert response.status_code == 200
        items = {item['type']: item for item in response.json()}
        assert set(items) == {'circular', 'manual', 'court-case'}
        assert items['manual']['externalUrl'] == 'https://example.com/manual.pdf'
        assert items['court-case']['label'] == 'ongoing'

        download = await client.get(items['circular']['downloadUrl'], headers=auth_headers)
        assert download.status_code == 200
        assert download.content == PDF[1]

        redirect = await client.get(items['manual']['downloadUrl'], headers=auth_headers)
        assert redirect.status_code == 307
        assert redirect.headers['location'] == 'https://example.com/manual.pdf'

    @pytest.mark.asyncio
    async def test_unknown_kind(self, client, auth_headers):
        response = await client.get('/api/documents/memo/abc/download', headers=auth_headers)
        assert response.status_code == 400
