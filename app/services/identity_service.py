"""Identity Resolver: maps an opaque UUID to exactly one role."""

import logging

from app.core.exceptions import UnauthorizedError
from app.core.sanitizer import is_valid_uuid
from app.models.identity import Identity, Role
from app.services.store_service import CredentialStore

logger = logging.getLogger(__name__)


class IdentityResolver:
    """
    Exact-match resolution: admin UUID, then dashboard UUID, then user table.

    Prefixes such as ``admin-`` or ``user-`` are for humans only and carry no
    authority. Store failures propagate; they never resolve to a role.
    """

    def __init__(self, store: CredentialStore):
        self.store = store

    async def resolve(self, uuid: str) -> Identity:
        if not is_valid_uuid(uuid):
            return Identity.anonymous()

        config = await self.store.get_config()
        if config is not None:
            if uuid == config.admin_uuid:
                return Identity(valid=True, role=Role.ADMIN)
            if uuid == config.dashboard_uuid:
                return Identity(valid=True, role=Role.DASHBOARD)

        user = await self.store.get_user(uuid)
        if user is not None:
            return Identity(valid=True, role=Role.USER, user=user)

        return Identity.anonymous()

    async def require_role(self, uuid: str, *roles: Role, message: str = "Access denied") -> Identity:
        """Resolve and insist on one of ``roles``."""
        identity = await self.resolve(uuid)
        if not identity.valid or identity.role not in roles:
            logger.warning(f"Rejected {uuid[:12]}... for roles {[r.value for r in roles]}")
            raise UnauthorizedError(message)
        return identity
