"""
Attachment handling for circulars, manuals and court cases.

A document points either at an uploaded file (stored under /uploads/<subdir>/)
or at an external url, never both.
"""
from typing import Any, Dict, Optional

from fastapi import UploadFile

from crea.core.exceptions import ValidationError
from crea.services.storage_service import storage_service

CLEARED_FILE_FIELDS = {"file_name": None, "mime_type": None, "size": None}


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def _clean_url(url: Optional[str]) -> Optional[str]:
    url = (url or "").strip()
    return url or None


async def attachment_for_create(
    subdir: str,
    url: Optional[str],
    upload: Optional[UploadFile],
) -> Dict[str, Any]:
    """Attachment columns for a new document; exactly one of url or file"""
    url = _clean_url(url)
    has_file = _has_file(upload)
    if has_file and url:
        raise ValidationError("Provide either a file or a URL, not both", field="file")
    if not has_file and not url:
        raise ValidationError("A file or a URL is required", field="file")

    if has_file:
        stored = await storage_service.save_upload(upload, subdir, kind="document")
        return {
            "url": stored.url,
            "file_name": stored.file_name,
            "mime_type": stored.mime_type,
            "size": stored.size,
        }
    return {"url": url, **CLEARED_FILE_FIELDS}


async def attachment_for_update(
    record: Any,
    subdir: str,
    url: Optional[str],
    upload: Optional[UploadFile],
) -> Dict[str, Any]:
    """
    Attachment changes for an existing document.

    A new file or url replaces the current attachment (a replaced stored file
    is deleted); sending neither keeps it.
    """
    url = _clean_url(url)
    has_file = _has_file(upload)
    if has_file and url:
        raise ValidationError("Provide either a file or a URL, not both", field="file")
    if not has_file and (not url or url == record.url):
        return {}

    changes = await attachment_for_create(subdir, url, upload)
    storage_service.delete(record.url)
    return changes


def remove_attachment(record: Any) -> None:
    storage_service.delete(record.url)
