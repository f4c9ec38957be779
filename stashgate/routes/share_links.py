from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from stashgate.dependencies.auth import get_current_tenant
from stashgate.dependencies.services import get_share_gate
from stashgate.schemas.share import ShareAccessBody, ShareAccessResponse, SharedFileInfo
from stashgate.services.identity import TenantIdentity
from stashgate.services.share_access import ShareAccessGate, ShareAccessGrant

router = APIRouter(prefix="/share", tags=["Share Links"])


def _grant_response(grant: ShareAccessGrant) -> ShareAccessResponse:
    return ShareAccessResponse(
        file=SharedFileInfo(**vars(grant.file)),
        download_url=grant.download_url,
        expires_at=grant.expires_at,
        access_count=grant.access_count,
    )


@router.get("/{token}", response_model=ShareAccessResponse)
async def access_share_link(
    token: str,
    password: str | None = Query(None),
    gate: ShareAccessGate = Depends(get_share_gate),
):
    """Public. Password-protected links answer 401 with ``requires_password``."""
    return _grant_response(await gate.access(token, password))


@router.post("/{token}", response_model=ShareAccessResponse)
async def access_share_link_with_body(
    token: str,
    body: ShareAccessBody | None = None,
    password: str | None = Query(None),
    gate: ShareAccessGate = Depends(get_share_gate),
):
    supplied = body.password if body and body.password is not None else password
    return _grant_response(await gate.access(token, supplied))


@router.delete("/{token}")
async def revoke_share_link(
    token: str,
    tenant: TenantIdentity = Depends(get_current_tenant),
    gate: ShareAccessGate = Depends(get_share_gate),
):
    await gate.revoke(tenant, token)
    return {"message": "Share link revoked successfully"}
