from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload
from sqlalchemy.orm.attributes import set_committed_value

from stashgate.models.share_link import ShareLink


class ShareLinkRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_token(self, token: str) -> ShareLink | None:
        res = await self.session.execute(
            select(ShareLink).options(joinedload(ShareLink.file)).where(ShareLink.token == token)
        )
        return res.scalars().first()

    async def add(self, link: ShareLink) -> ShareLink:
        self.session.add(link)
        await self.session.commit()
        await self.session.refresh(link)
        return link

    async def save(self, link: ShareLink) -> None:
        self.session.add(link)
        await self.session.commit()

    async def increment_access_count(self, link: ShareLink) -> int:
        """Atomically bump the counter and return the stored value."""
        res = await self.session.execute(
            update(ShareLink)
            .where(ShareLink.id == link.id)
            .values(access_count=ShareLink.access_count + 1)
            .returning(ShareLink.access_count)
            .execution_options(synchronize_session=False)
        )
        count = res.scalar_one()
        await self.session.commit()
        set_committed_value(link, "access_count", count)
        return count
