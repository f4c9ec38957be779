from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stashgate.core.database import get_db
from stashgate.core.minio_client import ObjectStorage, get_storage
from stashgate.repositories.files import FileRepository
from stashgate.repositories.share_links import ShareLinkRepository
from stashgate.services.file_service import FileService
from stashgate.services.share_access import ShareAccessGate
from stashgate.services.share_tokens import ShareTokenIssuer
from stashgate.utils.clock import Clock, utcnow


def get_clock() -> Clock:
    return utcnow


def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    clock: Clock = Depends(get_clock),
) -> FileService:
    return FileService(FileRepository(db), storage, clock=clock)


def get_share_issuer(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ShareTokenIssuer:
    return ShareTokenIssuer(ShareLinkRepository(db), clock=clock)


def get_share_gate(
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    clock: Clock = Depends(get_clock),
) -> ShareAccessGate:
    return ShareAccessGate(ShareLinkRepository(db), storage, clock=clock)
