from __future__ import annotations

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from stashgate.models.file import File


class FileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, file_id: int, with_share_links: bool = False) -> File | None:
        options = [selectinload(File.share_links)] if with_share_links else []
        return await self.session.get(File, file_id, options=options)

    async def add(self, file: File) -> File:
        self.session.add(file)
        await self.session.commit()
        await self.session.refresh(file)
        return file

    async def save(self, file: File) -> File:
        self.session.add(file)
        await self.session.commit()
        return file

    async def delete(self, file: File) -> None:
        await self.session.delete(file)
        await self.session.commit()

    async def count(self, statement: Select) -> int:
        return (await self.session.execute(statement)).scalar_one()

    async def fetch_page(self, statement: Select) -> list[File]:
        res = await self.session.execute(statement.options(selectinload(File.share_links)))
        return list(res.scalars().all())
