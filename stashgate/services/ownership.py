"""Tenant scoping of storage keys.

A file belongs to a tenant when its storage key starts with ``"{tenantId}/"``.
Nothing else is consulted, so ``is_owned_by`` is the one place that knows the
encoding.
"""

from __future__ import annotations

from datetime import datetime, timezone

from stashgate.core.errors import Forbidden
from stashgate.services.identity import TenantIdentity
from stashgate.services.paths import SEPARATOR


def tenant_prefix(tenant_id: int) -> str:
    return f"{tenant_id}{SEPARATOR}"


def is_owned_by(tenant_id: int, storage_key: str | None) -> bool:
    return bool(storage_key) and storage_key.startswith(tenant_prefix(tenant_id))


def ensure_owned(tenant: TenantIdentity, record) -> None:
    if not is_owned_by(tenant.id, record.key):
        raise Forbidden()


def _epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def safe_filename(filename: str) -> str:
    return filename.replace("/", "_").replace("\\", "_")


def build_storage_key(tenant_id: int, path: str | None, filename: str, uploaded_at: datetime) -> str:
    """``{tenantId}/{path}/{timestamp}-{filename}``, path omitted when absent.

    ``path`` must already be normalized.
    """
    leaf = f"{_epoch_millis(uploaded_at)}-{safe_filename(filename)}"
    parts = [str(tenant_id)]
    if path:
        parts.append(path)
    parts.append(leaf)
    return SEPARATOR.join(parts)
