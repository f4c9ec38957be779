"""Public share access.

Each call walks the same states in order and stops at the first failure:

    LOOKUP -> REVOKED_CHECK -> EXPIRY_CHECK -> PASSWORD_CHECK -> GRANT

Nothing is cached between calls. The access counter is touched only in GRANT,
after the retrieval URL has been obtained.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from starlette.concurrency import run_in_threadpool

from stashgate.core.config import settings
from stashgate.core.errors import (
    Expired,
    InvalidPassword,
    InvalidToken,
    NotFound,
    PasswordRequired,
    Revoked,
    StashgateError,
)
from stashgate.core.minio_client import ObjectStorage
from stashgate.core.security import verify_password
from stashgate.models.share_link import ShareLink, ShareLinkState
from stashgate.monitoring.setup import report_share_access
from stashgate.repositories.share_links import ShareLinkRepository
from stashgate.services.identity import TenantIdentity
from stashgate.services.ownership import ensure_owned
from stashgate.utils.clock import Clock, utcnow
from stashgate.utils.keys import is_share_token

logger = logging.getLogger("stashgate")


@dataclass(frozen=True)
class SharedFile:
    id: int
    name: str
    custom_name: str | None
    mime: str
    size: int
    created_at: datetime


@dataclass(frozen=True)
class ShareAccessGrant:
    file: SharedFile
    download_url: str
    expires_at: datetime
    access_count: int


class ShareAccessGate:
    def __init__(
        self,
        repository: ShareLinkRepository,
        storage: ObjectStorage,
        *,
        clock: Clock = utcnow,
        download_url_ttl: int | None = None,
    ):
        self.repository = repository
        self.storage = storage
        self.clock = clock
        self.download_url_ttl = download_url_ttl or settings.DOWNLOAD_URL_TTL_SECONDS

    async def _lookup(self, token: str) -> ShareLink:
        if not is_share_token(token):
            raise InvalidToken()
        link = await self.repository.find_by_token(token)
        if link is None or link.file is None:
            raise NotFound("Share link not found")
        return link

    async def _check_password(self, link: ShareLink, password: str | None) -> None:
        if not link.has_password:
            return
        if not password:
            raise PasswordRequired()
        matches = await run_in_threadpool(verify_password, password, link.password)
        if not matches:
            raise InvalidPassword()

    def _download_ttl(self, link: ShareLink, now: datetime) -> int:
        remaining = (link.expires_at - now).total_seconds()
        return max(1, min(self.download_url_ttl, math.ceil(remaining)))

    async def access(self, token: str, password: str | None = None) -> ShareAccessGrant:
        try:
            grant = await self._access(token, password)
        except StashgateError as e:
            report_share_access(e.reason)
            raise
        report_share_access("granted")
        return grant

    async def _access(self, token: str, password: str | None) -> ShareAccessGrant:
        link = await self._lookup(token)
        now = self.clock()

        if link.state is ShareLinkState.REVOKED:
            raise Revoked()
        if link.is_expired(now):
            raise Expired()
        await self._check_password(link, password)

        file = link.file
        download_url = await self.storage.presigned_get_url(file.key, self._download_ttl(link, now))

        # snapshot before the write; a rollback below expires the instances
        shared = SharedFile(
            id=file.id,
            name=file.name,
            custom_name=file.custom_name,
            mime=file.mime,
            size=file.size,
            created_at=file.created_at,
        )
        link_id, expires_at, access_count = link.id, link.expires_at, link.access_count
        try:
            access_count = await self.repository.increment_access_count(link)
        except Exception:
            # The grant already happened; a lost increment is only logged.
            logger.exception("Failed to record share access link_id=%s file_id=%s", link_id, shared.id)
            await self.repository.session.rollback()

        logger.info("Share link accessed file_id=%s access_count=%s", shared.id, access_count)
        return ShareAccessGrant(
            file=shared,
            download_url=download_url,
            expires_at=expires_at,
            access_count=access_count,
        )

    async def revoke(self, tenant: TenantIdentity, token: str) -> ShareLink:
        link = await self._lookup(token)
        ensure_owned(tenant, link.file)
        if link.state is ShareLinkState.ACTIVE:
            link.revoke()
            await self.repository.save(link)
        logger.info("Share link revoked file_id=%s consumer=%s", link.file_id, tenant.name)
        return link
