from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from stashgate.core.database import get_db
from stashgate.repositories.api_keys import APIKeyRepository
from stashgate.services.identity import TenantIdentity, resolve_tenant


async def get_current_tenant(
    x_api_key: str | None = Header(None, alias="X-API-Key"),
    db: AsyncSession = Depends(get_db),
) -> TenantIdentity:
    return await resolve_tenant(APIKeyRepository(db), x_api_key)
