"""Tests for API key resolution."""

from __future__ import annotations

import pytest

from stashgate.core.errors import Unauthenticated
from stashgate.repositories.api_keys import APIKeyRepository
from stashgate.services.identity import TenantIdentity, resolve_tenant


class TestResolveTenant:
    async def test_active_key_resolves(self, make_tenant, async_session):
        tenant, key = await make_tenant("nextjs-app")
        identity = await resolve_tenant(APIKeyRepository(async_session), key)
        assert identity == TenantIdentity(id=tenant.id, name="nextjs-app")

    @pytest.mark.parametrize("credential", [None, ""])
    async def test_missing_key(self, async_session, credential):
        with pytest.raises(Unauthenticated, match="API key required"):
            await resolve_tenant(APIKeyRepository(async_session), credential)

    async def test_unknown_and_inactive_keys_look_the_same(self, make_tenant, async_session):
        _, inactive_key = await make_tenant("old", is_active=False)
        repo = APIKeyRepository(async_session)

        with pytest.raises(Unauthenticated) as unknown:
            await resolve_tenant(repo, "sk_does_not_exist")
        with pytest.raises(Unauthenticated) as inactive:
            await resolve_tenant(repo, inactive_key)

        assert unknown.value.message == inactive.value.message == "Invalid or inactive API key"

    async def test_failed_lookup_logs_only_a_key_prefix(self, async_session, caplog):
        secret = "sk_" + "a" * 64
        with caplog.at_level("WARNING", logger="stashgate"):
            with pytest.raises(Unauthenticated):
                await resolve_tenant(APIKeyRepository(async_session), secret)
        assert secret not in caplog.text
        assert secret[:10] in caplog.text
