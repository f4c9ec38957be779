from __future__ import annotations

import json
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Form, Query, Request, UploadFile, status

from stashgate.core.config import settings
from stashgate.core.errors import InvalidInput
from stashgate.dependencies.auth import get_current_tenant
from stashgate.dependencies.services import get_clock, get_file_service, get_share_issuer
from stashgate.routes.views import file_detail_view, file_view, file_with_shares_view
from stashgate.schemas.file import FileDetail, FileInfo, FileListResponse, FileUpdate, FileWithShares, PaginationInfo
from stashgate.schemas.share import ShareCreate, ShareResponse
from stashgate.services.file_query import FileListCriteria
from stashgate.services.file_service import FileService
from stashgate.services.identity import TenantIdentity
from stashgate.services.share_tokens import ShareTokenIssuer
from stashgate.utils.clock import Clock
from stashgate.utils.urls import build_share_url

logger = logging.getLogger("stashgate")

router = APIRouter(prefix="/files", tags=["Files"])


def _parse_metadata(raw: str | None) -> dict | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidInput("metadata must be a JSON object") from None
    if not isinstance(value, dict):
        raise InvalidInput("metadata must be a JSON object")
    return value


@router.post("/upload", response_model=FileInfo, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile,
    custom_name: str | None = Form(None, max_length=255),
    path: str | None = Form(None),
    metadata: str | None = Form(None, description="JSON object"),
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
):
    parsed_metadata = _parse_metadata(metadata)
    # one byte past the limit is enough for upload() to reject it
    data = await file.read(files.max_file_size + 1)
    record = await files.upload(
        tenant,
        filename=file.filename or "",
        data=data,
        mime=file.content_type or "application/octet-stream",
        custom_name=custom_name,
        path=path,
        metadata=parsed_metadata,
    )
    return file_view(record)


@router.get("", response_model=FileListResponse)
async def list_files(
    request: Request,
    search: str | None = Query(None, description="Case-insensitive match on name or custom name"),
    path: str | None = Query(None, description="Case-insensitive match on the virtual path"),
    mime: str | None = Query(None, description="Exact MIME type"),
    min_size: int | None = Query(None, ge=0),
    max_size: int | None = Query(None, ge=0),
    date_from: datetime | None = Query(None, description="created_at >= (ISO 8601)"),
    date_to: datetime | None = Query(None, description="created_at <= (ISO 8601)"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
    clock: Clock = Depends(get_clock),
):
    criteria = FileListCriteria(
        search=search,
        path=path,
        mime=mime,
        min_size=min_size,
        max_size=max_size,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )
    records, pagination = await files.list_files(tenant, criteria)
    now = clock()
    return FileListResponse(
        files=[file_with_shares_view(request, r, now) for r in records],
        pagination=PaginationInfo(**vars(pagination)),
    )


@router.get("/{file_id}", response_model=FileDetail)
async def get_file(
    file_id: int,
    request: Request,
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
    clock: Clock = Depends(get_clock),
):
    record = await files.get_owned(tenant, file_id)
    download_url = await files.download_url(record)
    return file_detail_view(request, record, clock(), download_url)


@router.patch("/{file_id}", response_model=FileWithShares)
async def update_file(
    file_id: int,
    body: FileUpdate,
    request: Request,
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
    clock: Clock = Depends(get_clock),
):
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise InvalidInput("Nothing to update")
    record = await files.update(tenant, file_id, changes)
    return file_with_shares_view(request, record, clock())


@router.delete("/{file_id}")
async def delete_file(
    file_id: int,
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
):
    await files.delete(tenant, file_id)
    return {"message": "File deleted successfully", "id": file_id}


@router.post("/{file_id}/share", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def create_share_link(
    file_id: int,
    request: Request,
    body: ShareCreate | None = None,
    tenant: TenantIdentity = Depends(get_current_tenant),
    files: FileService = Depends(get_file_service),
    issuer: ShareTokenIssuer = Depends(get_share_issuer),
):
    body = body or ShareCreate()
    record = await files.get_owned(tenant, file_id)
    issued = await issuer.issue(record, ttl_seconds=body.ttl, password=body.password)
    return ShareResponse(
        share_url=build_share_url(request, issued.token),
        token=issued.token,
        expires_at=issued.expires_at,
        has_password=issued.has_password,
        ttl=issued.ttl,
    )
