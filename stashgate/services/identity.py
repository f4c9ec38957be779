from __future__ import annotations

import logging
from dataclasses import dataclass

from stashgate.core.errors import Unauthenticated
from stashgate.repositories.api_keys import APIKeyRepository

logger = logging.getLogger("stashgate")


@dataclass(frozen=True)
class TenantIdentity:
    id: int
    name: str


async def resolve_tenant(repository: APIKeyRepository, credential: str | None) -> TenantIdentity:
    """Map an API key to its tenant.

    Unknown and deactivated keys fail with the same message so the response
    does not reveal whether a key ever existed.
    """
    if not credential:
        logger.warning("Missing API key")
        raise Unauthenticated("API key required. Provide X-API-Key header.")

    record = await repository.find_active_by_key(credential)
    if record is None:
        logger.warning("Invalid or inactive API key key=%s...", credential[:10])
        raise Unauthenticated("Invalid or inactive API key")

    logger.info("Authenticated request consumer=%s", record.name)
    return TenantIdentity(id=record.id, name=record.name)
