from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from starlette.concurrency import run_in_threadpool

from stashgate.core.config import settings
from stashgate.core.errors import InvalidInput, NotFound
from stashgate.core.security import get_password_hash
from stashgate.models.file import File
from stashgate.models.share_link import ShareLink
from stashgate.repositories.share_links import ShareLinkRepository
from stashgate.utils.clock import Clock, utcnow
from stashgate.utils.keys import generate_share_token

logger = logging.getLogger("stashgate")


@dataclass(frozen=True)
class IssuedShare:
    token: str
    expires_at: datetime
    has_password: bool
    ttl: int
    link: ShareLink


class ShareTokenIssuer:
    """Creates share links for files that already passed the ownership check."""

    def __init__(
        self,
        repository: ShareLinkRepository,
        *,
        bcrypt_rounds: int | None = None,
        default_ttl: int | None = None,
        max_ttl: int | None = None,
        clock: Clock = utcnow,
    ):
        self.repository = repository
        self.bcrypt_rounds = bcrypt_rounds or settings.SHARE_PASSWORD_BCRYPT_ROUNDS
        self.default_ttl = default_ttl or settings.DEFAULT_SHARE_TTL_SECONDS
        self.max_ttl = max_ttl or settings.MAX_SHARE_TTL_SECONDS
        self.clock = clock

    def _effective_ttl(self, ttl_seconds: int | None) -> int:
        if ttl_seconds is None:
            return self.default_ttl
        if ttl_seconds <= 0:
            raise InvalidInput("TTL must be a positive number of seconds")
        if ttl_seconds > self.max_ttl:
            raise InvalidInput(f"TTL must not exceed {self.max_ttl} seconds")
        return ttl_seconds

    async def issue(
        self,
        file: File | None,
        ttl_seconds: int | None = None,
        password: str | None = None,
    ) -> IssuedShare:
        if file is None:
            raise NotFound("File not found")
        ttl = self._effective_ttl(ttl_seconds)

        token = generate_share_token()
        expires_at = self.clock() + timedelta(seconds=ttl)
        password_hash = None
        if password:
            password_hash = await run_in_threadpool(get_password_hash, password, self.bcrypt_rounds)

        link = ShareLink(
            token=token,
            file_id=file.id,
            expires_at=expires_at,
            password=password_hash,
            access_count=0,
            is_active=True,
        )
        link = await self.repository.add(link)

        logger.info(
            "Share link created file_id=%s expires_at=%s has_password=%s",
            file.id, expires_at.isoformat(), password_hash is not None,
        )
        return IssuedShare(
            token=token,
            expires_at=expires_at,
            has_password=password_hash is not None,
            ttl=ttl,
            link=link,
        )
