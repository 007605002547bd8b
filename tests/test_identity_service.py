"""Tests for UUID-to-role resolution."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.exceptions import InfrastructureError, UnauthorizedError
from app.models.identity import Role
from app.services.identity_service import IdentityResolver


class TestResolve:
    """Tests for IdentityResolver.resolve."""

    @pytest.mark.asyncio
    async def test_admin(self, services, settings):
        identity = await services.identity.resolve(settings.admin_uuid)
        assert identity.valid is True
        assert identity.role is Role.ADMIN

    @pytest.mark.asyncio
    async def test_dashboard(self, services, settings):
        identity = await services.identity.resolve(settings.dashboard_uuid)
        assert identity.role is Role.DASHBOARD

    @pytest.mark.asyncio
    async def test_user(self, services, user_uuid):
        identity = await services.identity.resolve(user_uuid)
        assert identity.role is Role.USER
        assert identity.user.id == user_uuid

    @pytest.mark.asyncio
    async def test_prefix_grants_nothing(self, services):
        identity = await services.identity.resolve("admin-not-the-real-one")
        assert identity.valid is False
        assert identity.role is Role.NONE

    @pytest.mark.asyncio
    async def test_malformed_uuid_skips_store(self):
        store = MagicMock()
        store.get_config = AsyncMock()
        store.get_user = AsyncMock()

        identity = await IdentityResolver(store).resolve("<script>")

        assert identity.role is Role.NONE
        store.get_config.assert_not_awaited()
        store.get_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        store = MagicMock()
        store.get_config = AsyncMock(side_effect=InfrastructureError())

        with pytest.raises(InfrastructureError):
            await IdentityResolver(store).resolve("user-abcdefgh")


class TestRequireRole:
    """Tests for IdentityResolver.require_role."""

    @pytest.mark.asyncio
    async def test_wrong_role_rejected(self, services, settings):
        with pytest.raises(UnauthorizedError) as exc_info:
            await services.identity.require_role(
                settings.dashboard_uuid, Role.ADMIN, message="Admin access required"
            )
        assert exc_info.value.message == "Admin access required"

    @pytest.mark.asyncio
    async def test_any_listed_role_accepted(self, services, settings):
        identity = await services.identity.require_role(
            settings.dashboard_uuid, Role.ADMIN, Role.DASHBOARD
        )
        assert identity.role is Role.DASHBOARD
