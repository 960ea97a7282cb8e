"""Org service for provisioning and lifecycle operations."""

from uuid import UUID

import structlog

from grokloc.core import crypt
from grokloc.core.models import Status
from grokloc.core.safe import SafeValue
from grokloc.modules.orgs.models import Org
from grokloc.modules.orgs.schemas import OrgCreate
from grokloc.modules.users.models import User
from grokloc.state import AppState


logger = structlog.get_logger()


class OrgService:
    """Service for org provisioning.

    Writes go to the master store, reads to the replica. The state key
    encrypts owner PII.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state

    async def provision(self, data: OrgCreate) -> tuple[Org, User]:
        """Create an org and its active owner from raw input.

        Args:
            data: Org creation data with the raw owner password

        Returns:
            Tuple of (org, owner)

        Raises:
            UnsafeStringError: If a value fails the safe value gate
            DuplicateError: If the org name is already taken
        """
        # the derived password is re-checked by the gate like any other value
        password = SafeValue(crypt.kdf(data.owner_password, self.state.kdf_rounds))
        org, owner = await Org.create(
            self.state.master,
            SafeValue(data.name),
            SafeValue(data.owner_display_name),
            SafeValue(data.owner_email),
            password,
            self.state.key,
        )
        logger.info("org_provisioned", org_id=str(org.id))
        return org, owner

    async def get(self, org_id: UUID) -> Org:
        """Get an org by id.

        Raises:
            NotFoundError: If org not found
        """
        return await Org.read(self.state.replica, org_id)

    async def get_owner(self, org: Org) -> User:
        """Get the decrypted owner of an org.

        Raises:
            NotFoundError: If the owner row is missing
        """
        return await User.read(self.state.replica, org.owner, self.state.key)

    async def set_status(self, org: Org, status: Status) -> Org:
        """Set an org's status.

        Raises:
            NotFoundError: If org not found
        """
        await org.update_status(self.state.master, status)
        return org

    async def deactivate(self, org: Org) -> Org:
        """Deactivate an org."""
        return await self.set_status(org, Status.INACTIVE)

    async def activate(self, org: Org) -> Org:
        """Activate an org."""
        return await self.set_status(org, Status.ACTIVE)
