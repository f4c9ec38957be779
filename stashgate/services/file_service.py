from __future__ import annotations

import logging
from typing import Any

from stashgate.core.config import settings
from stashgate.core.errors import InvalidInput, NotFound
from stashgate.core.minio_client import ObjectStorage
from stashgate.models.file import File
from stashgate.models.share_link import ShareLink
from stashgate.repositories.files import FileRepository
from stashgate.services.file_query import FileListCriteria, Pagination, build_file_query, paginate
from stashgate.services.identity import TenantIdentity
from stashgate.services.ownership import build_storage_key, ensure_owned
from stashgate.services.paths import normalize_path
from stashgate.utils.clock import Clock, utcnow

logger = logging.getLogger("stashgate")


def active_share_links(file: File, now) -> list[ShareLink]:
    return [link for link in file.share_links if link.is_usable(now)]


class FileService:
    def __init__(
        self,
        repository: FileRepository,
        storage: ObjectStorage,
        *,
        clock: Clock = utcnow,
        max_file_size: int | None = None,
        download_url_ttl: int | None = None,
    ):
        self.repository = repository
        self.storage = storage
        self.clock = clock
        self.max_file_size = max_file_size or settings.MAX_FILE_SIZE
        self.download_url_ttl = download_url_ttl or settings.DOWNLOAD_URL_TTL_SECONDS

    async def upload(
        self,
        tenant: TenantIdentity,
        *,
        filename: str,
        data: bytes,
        mime: str,
        custom_name: str | None = None,
        path: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> File:
        """Store the object, then record it.

        Everything is validated before the object store is touched, and the
        metadata row is only written once the object write succeeded.
        """
        if not filename:
            raise InvalidInput("Filename is required")
        if not mime:
            raise InvalidInput("MIME type is required")
        if not data:
            raise InvalidInput("File size must be positive")
        if len(data) > self.max_file_size:
            raise InvalidInput(f"File exceeds the maximum size of {self.max_file_size} bytes")
        normalized = normalize_path(path)

        uploaded_at = self.clock()
        key = build_storage_key(tenant.id, normalized, filename, uploaded_at)

        await self.storage.put(key, data, mime)

        record = File(
            name=filename,
            custom_name=custom_name or None,
            key=key,
            path=normalized,
            mime=mime,
            size=len(data),
            file_metadata=metadata,
            created_at=uploaded_at,
            updated_at=uploaded_at,
        )
        try:
            record = await self.repository.add(record)
        except Exception:
            logger.exception("Metadata write failed after upload, object left orphaned consumer=%s", tenant.name)
            raise
        logger.info("File uploaded id=%s name=%s consumer=%s", record.id, filename, tenant.name)
        return record

    async def get_owned(self, tenant: TenantIdentity, file_id: int) -> File:
        record = await self.repository.get(file_id, with_share_links=True)
        if record is None:
            raise NotFound("File not found")
        ensure_owned(tenant, record)
        return record

    async def download_url(self, record: File) -> str:
        return await self.storage.presigned_get_url(record.key, self.download_url_ttl)

    async def update(
        self,
        tenant: TenantIdentity,
        file_id: int,
        changes: dict[str, Any],
    ) -> File:
        record = await self.get_owned(tenant, file_id)
        if "custom_name" in changes:
            record.custom_name = changes["custom_name"] or None
        if "metadata" in changes:
            record.file_metadata = changes["metadata"]
        record.updated_at = self.clock()
        record = await self.repository.save(record)
        logger.info("File updated id=%s fields=%s", record.id, sorted(changes))
        return record

    async def delete(self, tenant: TenantIdentity, file_id: int) -> None:
        """Remove the object first so a crash never leaves a dangling record."""
        record = await self.get_owned(tenant, file_id)
        await self.storage.delete(record.key)
        await self.repository.delete(record)
        logger.info("File deleted id=%s consumer=%s", file_id, tenant.name)

    async def list_files(self, tenant: TenantIdentity, criteria: FileListCriteria) -> tuple[list[File], Pagination]:
        query = build_file_query(tenant, criteria)
        total = await self.repository.count(query.count_statement)
        files = await self.repository.fetch_page(query.page_statement)
        return files, paginate(query.page, query.limit, total)
