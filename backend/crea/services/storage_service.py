"""
Local upload storage.

Files live below settings.UPLOAD_DIR/<subdir>/ and are served by the app at
/uploads/<subdir>/<name>. Type and size are checked before anything is written.
"""
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
from fastapi import UploadFile

from crea.core.config import settings
from crea.core.exceptions import InvalidFileTypeError, FileTooLargeError, ValidationError
from crea.core.logging_config import logger

PUBLIC_PREFIX = "/uploads/"

DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
DOCUMENT_EXTENSIONS = {".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png", ".gif", ".webp"}

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

SPREADSHEET_MIME_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
SPREADSHEET_EXTENSIONS = {".csv", ".xls", ".xlsx"}


@dataclass
class StoredFile:
    url: str
    file_name: str
    mime_type: str
    size: int
    path: Path


class LocalStorageService:
    """Save, resolve and delete uploaded files"""

    def __init__(self, root: Optional[Path] = None):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root or settings.UPLOAD_ROOT

    @staticmethod
    def is_document(mime_type: str, extension: str) -> bool:
        if mime_type.startswith("image/") or mime_type in DOCUMENT_MIME_TYPES:
            return extension in DOCUMENT_EXTENSIONS
        return False

    @staticmethod
    def is_image(mime_type: str, extension: str) -> bool:
        return mime_type.startswith("image/") and extension in IMAGE_EXTENSIONS

    @staticmethod
    def is_spreadsheet(mime_type: str, extension: str) -> bool:
        # Browsers report csv inconsistently; the extension decides
        return extension in SPREADSHEET_EXTENSIONS and (
            mime_type in SPREADSHEET_MIME_TYPES or mime_type in ("", "application/octet-stream", "text/plain")
        )

    def _generate_name(self, original: str) -> str:
        ext = Path(original).suffix.lower()
        return f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}{ext}"

    async def read_validated(
        self,
        upload: UploadFile,
        kind: str = "document",
        max_size: Optional[int] = None,
    ) -> bytes:
        """Read an upload into memory after checking its type and size"""
        filename = upload.filename or ""
        if not filename:
            raise ValidationError("File name is required", field="file")

        extension = Path(filename).suffix.lower()
        mime_type = (upload.content_type or "").lower()
        checks = {
            "document": (self.is_document, sorted(DOCUMENT_EXTENSIONS)),
            "image": (self.is_image, sorted(IMAGE_EXTENSIONS)),
            "spreadsheet": (self.is_spreadsheet, sorted(SPREADSHEET_EXTENSIONS)),
        }
        check, allowed = checks[kind]
        if not check(mime_type, extension):
            raise InvalidFileTypeError(mime_type or extension or "unknown", allowed)

        max_size = max_size or settings.max_upload_bytes
        content = await upload.read()
        if len(content) > max_size:
            raise FileTooLargeError(len(content), max_size)
        if not content:
            raise ValidationError("Uploaded file is empty", field="file")
        return content

    async def save_upload(
        self,
        upload: UploadFile,
        subdir: str,
        kind: str = "document",
        max_size: Optional[int] = None,
    ) -> StoredFile:
        content = await self.read_validated(upload, kind=kind, max_size=max_size)
        stored_name = self._generate_name(upload.filename)
        return await self.save_bytes(
            content,
            subdir,
            stored_name,
            original_name=upload.filename,
            mime_type=upload.content_type or "application/octet-stream",
        )

    async def save_bytes(
        self,
        content: bytes,
        subdir: str,
        stored_name: str,
        original_name: Optional[str] = None,
        mime_type: str = "application/octet-stream",
    ) -> StoredFile:
        target_dir = self.root / subdir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / stored_name

        async with aiofiles.open(path, "wb") as f:
            await f.write(content)

        logger.info(f"[Storage] Saved {subdir}/{stored_name} ({len(content)} bytes)")
        return StoredFile(
            url=f"{PUBLIC_PREFIX}{subdir}/{stored_name}",
            file_name=original_name or stored_name,
            mime_type=mime_type,
            size=len(content),
            path=path,
        )

    def resolve(self, url: Optional[str]) -> Optional[Path]:
        """Map a public /uploads/... url back to a path inside the upload root"""
        if not url or not url.startswith(PUBLIC_PREFIX):
            return None
        relative = url[len(PUBLIC_PREFIX):]
        root = self.root.resolve()
        path = (root / relative).resolve()
        if root not in path.parents:
            return None
        return path

    def delete(self, url: Optional[str]) -> bool:
        path = self.resolve(url)
        if path is None or not path.exists():
            return False
        path.unlink()
        logger.info(f"[Storage] Deleted {url}")
        return True

    def delete_many(self, urls: Iterable[str]) -> int:
        return sum(1 for url in urls if self.delete(url))


storage_service = LocalStorageService()
