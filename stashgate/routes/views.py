from datetime import datetime

from fastapi import Request

from stashgate.models.file import File
from stashgate.models.share_link import ShareLink
from stashgate.schemas.file import FileDetail, FileInfo, FileWithShares
from stashgate.schemas.share import ShareLinkInfo
from stashgate.services.file_service import active_share_links
from stashgate.utils.urls import build_share_url


def share_link_view(request: Request, link: ShareLink) -> ShareLinkInfo:
    return ShareLinkInfo(
        token=link.token,
        share_url=build_share_url(request, link.token),
        expires_at=link.expires_at,
        has_password=link.has_password,
        access_count=link.access_count,
    )


def file_view(record: File) -> FileInfo:
    return FileInfo.model_validate(record)


def file_with_shares_view(request: Request, record: File, now: datetime) -> FileWithShares:
    return FileWithShares(
        **file_view(record).model_dump(),
        share_links=[share_link_view(request, link) for link in active_share_links(record, now)],
    )


def file_detail_view(request: Request, record: File, now: datetime, download_url: str) -> FileDetail:
    return FileDetail(
        **file_with_shares_view(request, record, now).model_dump(),
        download_url=download_url,
    )
