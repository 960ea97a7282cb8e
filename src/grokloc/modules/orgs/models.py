"""Org database model and atomic org provisioning."""

from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column, validates

from grokloc.core.constants import ORG_SCHEMA_VERSION
from grokloc.core.database import (
    Base,
    MetaMixin,
    SafeString,
    SessionFactory,
    UUIDMixin,
    UUIDString,
    transaction,
)
from grokloc.core.errors import (
    AppException,
    NotFoundError,
    ValidationError,
    translate_store_error,
)
from grokloc.core.models import Status
from grokloc.core.safe import SafeValue
from grokloc.modules.users.models import User


logger = structlog.get_logger()


class Org(Base, UUIDMixin, MetaMixin):
    """Org model representing an orgs row (a tenant).

    Every org has exactly one owner, written in the same transaction
    as the org by ``Org.create``. The owner is set once and never
    reassigned.

    Attributes:
        name: Unique org name
        owner: Id of the owning User
    """

    __tablename__ = "orgs"

    name: Mapped[SafeValue] = mapped_column(SafeString, unique=True, nullable=False)
    owner: Mapped[UUID] = mapped_column(UUIDString, nullable=False)

    def __repr__(self) -> str:
        return f"<Org(id={self.id}, name={self.name}, owner={self.owner})>"

    @validates("owner")
    def validate_owner(self, _key: str, value: UUID) -> UUID:
        current = self.__dict__.get("owner")
        if current is not None and current != value:
            raise ValidationError("Org owner cannot be changed", details={"org_id": str(self.id)})
        return value

    async def insert(self, session: AsyncSession) -> None:
        """Insert the row with no integrity check on owner (see ``create``).

        Raises:
            DuplicateError: If the org name or id is already taken
            StoreError: For any other store failure
        """
        session.add(self)
        try:
            await session.flush()
            await session.refresh(self)
        except SQLAlchemyError as e:
            raise translate_store_error(e, resource="org", resource_id=str(self.id)) from e

    @classmethod
    async def create(
        cls,
        factory: SessionFactory,
        name: SafeValue,
        owner_display_name: SafeValue,
        owner_email: SafeValue,
        owner_password: SafeValue,
        key: str,
    ) -> tuple["Org", User]:
        """Form a new Org with a new active User as owner.

        The owner row and the org row are written in one transaction:
        both become visible together or neither does. Concurrent creates
        with the same name are arbitrated by the unique index alone.

        Args:
            factory: Session factory for the master store
            name: Org name
            owner_display_name: Owner display name (plaintext)
            owner_email: Owner email (plaintext)
            owner_password: Owner password, already derived
            key: Hex-encoded key for the owner's PII

        Returns:
            Tuple of (org, owner), both active

        Raises:
            DuplicateError: If the org name is already taken
            PasswordNotDerivedError: If owner_password is not a KDF output
            CryptoError: If the key is malformed
            StoreError: For any other store failure
        """
        org_id = uuid4()

        owner = User.encrypted(owner_display_name, owner_email, org_id, owner_password, key)
        owner.status = Status.ACTIVE

        try:
            async with transaction(factory) as session:
                await owner.insert(session)

                org = cls(
                    id=org_id,
                    name=name,
                    owner=owner.id,
                    schema_version=ORG_SCHEMA_VERSION,
                    status=Status.ACTIVE,
                )
                await org.insert(session)
        except SQLAlchemyError as e:
            logger.warning("org_create_failed", org_id=str(org_id), error=type(e).__name__)
            raise translate_store_error(e, resource="org", resource_id=str(org_id)) from e
        except AppException as e:
            logger.warning(
                "org_create_failed",
                org_id=str(org_id),
                error_code=e.error_code,
            )
            raise

        logger.info("org_created", org_id=str(org.id), owner_id=str(owner.id))
        return org, owner

    @classmethod
    async def read(cls, factory: SessionFactory, org_id: UUID) -> "Org":
        """Read an orgs row.

        Raises:
            NotFoundError: If no row has org_id
            UnknownStatusError: If the stored status code is unknown
        """
        async with factory() as session:
            try:
                result = await session.execute(select(cls).where(cls.id == org_id))
                return result.scalar_one()
            except SQLAlchemyError as e:
                raise translate_store_error(e, resource="org", resource_id=str(org_id)) from e

    async def update_status(self, factory: SessionFactory, status: Status) -> None:
        """Set the org status in the store, then in memory.

        Exactly one row must be updated. The in-memory status and mtime
        change only after the store commits.

        Raises:
            NotFoundError: If no row has this org's id
        """
        stmt = (
            update(Org)
            .where(Org.id == self.id)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        try:
            async with transaction(factory) as session:
                result: Any = await session.execute(stmt)
                if result.rowcount != 1:
                    raise NotFoundError(
                        "Org not found",
                        resource="org",
                        resource_id=str(self.id),
                    )
                mtime = (
                    await session.execute(select(Org.mtime).where(Org.id == self.id))
                ).scalar_one()
        except SQLAlchemyError as e:
            raise translate_store_error(e, resource="org", resource_id=str(self.id)) from e

        self.status = status
        self.mtime = mtime
        logger.info("org_status_updated", org_id=str(self.id), status=str(status))
