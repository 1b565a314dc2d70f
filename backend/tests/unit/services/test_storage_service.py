"""
Unit Tests for local upload storage
"""
import io
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from crea.core.exceptions import InvalidFileTypeError, FileTooLargeError, ValidationError
from crea.services.storage_service import storage_service


def upload(name, content, content_type):
    return UploadFile(
        file=io.BytesIO(content),
        filename=name,
        headers=Headers({'content-type': content_type}),
    )


class TestSaveUpload:

    @pytest.mark.asyncio
    async def test_pdf_saved_under_subdir(self, upload_root):
        stored = await storage_service.save_upload(upload('notice.pdf', b'%PDF-1.4 test', 'application/pdf'), 'circulars')

        assert stored.url.startswith('/uploads/circulars/')
        assert stored.file_name == 'notice.pdf'
        assert stored.size == len(b'%PDF-1.4 test')
        assert stored.path.parent == upload_root / 'circulars'
        assert storage_service.resolve(stored.url) == stored.path.resolve()

    @pytest.mark.asyncio
    async def test_disallowed_type_rejected(self):
        with pytest.raises(InvalidFileTypeError):
            await storage_service.save_upload(upload('run.sh', b'echo hi', 'text/x-shellscript'), 'circulars')

    @pytest.mark.asyncio
    async def test_image_kind_rejects_pdf(self):
        with pytest.raises(InvalidFileTypeError):
            await storage_service.save_upload(upload('photo.pdf', b'%PDF', 'application/pdf'), 'events', kind='image')

    @pytest.mark.asyncio
    async def test_size_limit(self):
        with pytest.raises(FileTooLargeError):
            await storage_service.save_upload(
                upload('big.pdf', b'x' * 2048, 'application/pdf'), 'circulars', max_size=1024
            )

    @pytest.mark.asyncio
    async def test_empty_file_rejected(self):
        with pytest.raises(ValidationError):
            await storage_service.save_upload(upload('empty.pdf', b'', 'application/pdf'), 'circulars')


class TestResolveAndDelete:

    def test_paths_outside_root_ignored(self):
        assert storage_service.resolve('/uploads/../../etc/passwd') is None
        assert storage_service.resolve('https://example.com/file.pdf') is None

    @pytest.mark.asyncio
    async def test_delete(self):
        stored = await storage_service.save_upload(upload('a.png', b'\x89PNG', 'image/png'), 'events', kind='image')

        assert storage_service.delete(stored.url) is True
        assert not stored.path.exists()
        assert storage_service.delete(stored.url) is False
