from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stashgate.models.api_key import APIKey


class APIKeyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_active_by_key(self, key: str) -> APIKey | None:
        res = await self.session.execute(
            select(APIKey).where(APIKey.key == key, APIKey.is_active == True)  # noqa: E712
        )
        return res.scalars().first()

    async def get(self, key_id: int) -> APIKey | None:
        return await self.session.get(APIKey, key_id)

    async def list_all(self) -> list[APIKey]:
        res = await self.session.execute(select(APIKey).order_by(APIKey.created_at.desc(), APIKey.id.desc()))
        return list(res.scalars().all())

    async def add(self, api_key: APIKey) -> APIKey:
        self.session.add(api_key)
        await self.session.commit()
        await self.session.refresh(api_key)
        return api_key

    async def save(self, api_key: APIKey) -> None:
        self.session.add(api_key)
        await self.session.commit()

    async def delete(self, api_key: APIKey) -> None:
        await self.session.delete(api_key)
        await self.session.commit()
