"""User database model with encrypted PII fields."""

from uuid import UUID, uuid4

import structlog
from sqlalchemy import Index, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from grokloc.core import crypt
from grokloc.core.constants import USER_SCHEMA_VERSION
from grokloc.core.database import (
    Base,
    MetaMixin,
    SafeString,
    SessionFactory,
    UUIDMixin,
    UUIDString,
)
from grokloc.core.errors import (
    DataIntegrityError,
    PasswordNotDerivedError,
    translate_store_error,
)
from grokloc.core.models import Status
from grokloc.core.safe import SafeValue


logger = structlog.get_logger()


class User(Base, UUIDMixin, MetaMixin):
    """User model representing a users row.

    As stored, ``api_secret``, ``display_name`` and ``email`` are
    ciphertext under a caller-supplied key. Each has a digest of its
    plaintext, usable for lookup without decryption. The per-user iv is
    derived from ``email_digest``, which the ``(email_digest, org)`` index
    keeps unique within an org.

    ``org`` is not a foreign key. Only ``Org.create`` guarantees that it
    references an org written in the same transaction.

    Attributes:
        api_secret: Encrypted opaque per-user secret
        api_secret_digest: Digest of the plaintext api secret
        display_name: Encrypted display name
        display_name_digest: Digest of the plaintext display name
        email: Encrypted email
        email_digest: Digest of the plaintext email
        org: Owning org id
        password: Password as already derived by the caller
    """

    __tablename__ = "users"
    __table_args__ = (Index("users_email_org", "email_digest", "org", unique=True),)

    api_secret: Mapped[SafeValue] = mapped_column(SafeString, unique=True, nullable=False)
    api_secret_digest: Mapped[SafeValue] = mapped_column(
        SafeString, unique=True, nullable=False
    )
    display_name: Mapped[SafeValue] = mapped_column(SafeString, nullable=False)
    display_name_digest: Mapped[SafeValue] = mapped_column(SafeString, nullable=False)
    email: Mapped[SafeValue] = mapped_column(SafeString, nullable=False)
    email_digest: Mapped[SafeValue] = mapped_column(SafeString, nullable=False)
    org: Mapped[UUID] = mapped_column(UUIDString, nullable=False)
    password: Mapped[SafeValue] = mapped_column(SafeString, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, org={self.org}, status={self.status})>"

    @classmethod
    def encrypted(
        cls,
        display_name: SafeValue,
        email: SafeValue,
        org: UUID,
        password: SafeValue,
        key: str,
    ) -> "User":
        """Make a new User with PII fields encrypted under key.

        No store check is made that org exists; see ``Org.create``.

        Args:
            display_name: Plaintext display name
            email: Plaintext email, seeds the per-user iv
            org: Owning org id
            password: Password already derived with ``crypt.kdf``
            key: Hex-encoded symmetric key

        Returns:
            An unsaved, unconfirmed User

        Raises:
            PasswordNotDerivedError: If password is not a KDF output
            CryptoError: If the key is malformed or encryption fails
        """
        if not crypt.is_derived(str(password)):
            raise PasswordNotDerivedError()

        email_digest = crypt.sha256_hex(str(email))
        iv = crypt.derive_iv(email_digest)
        api_secret = str(uuid4())

        # Hex output of encrypt and sha256_hex cannot trip the gate
        return cls(
            id=uuid4(),
            api_secret=SafeValue.trusted(crypt.encrypt(key, iv, api_secret)),
            api_secret_digest=SafeValue.trusted(crypt.sha256_hex(api_secret)),
            display_name=SafeValue.trusted(crypt.encrypt(key, iv, str(display_name))),
            display_name_digest=SafeValue.trusted(crypt.sha256_hex(str(display_name))),
            email=SafeValue.trusted(crypt.encrypt(key, iv, str(email))),
            email_digest=SafeValue.trusted(email_digest),
            org=org,
            password=password,
            schema_version=USER_SCHEMA_VERSION,
            status=Status.UNCONFIRMED,
        )

    async def insert(self, session: AsyncSession) -> None:
        """Insert the row with no integrity check on org (see ``Org.create``).

        Assumed to run inside a transaction the caller owns; store-assigned
        timestamps are loaded back before returning.

        Raises:
            DuplicateError: If a unique index rejects the row
            StoreError: For any other store failure
        """
        session.add(self)
        try:
            await session.flush()
            await session.refresh(self)
        except SQLAlchemyError as e:
            raise translate_store_error(e, resource="user", resource_id=str(self.id)) from e

    @classmethod
    async def read(cls, factory: SessionFactory, user_id: UUID, key: str) -> "User":
        """Read a users row and decrypt it.

        Args:
            factory: Session factory for the store
            user_id: The user's UUID
            key: Hex-encoded key the row was encrypted with

        Returns:
            A detached User holding plaintext PII

        Raises:
            NotFoundError: If no row has user_id
            CryptoError: If decryption fails
            DataIntegrityError: If a decrypted value does not match its digest
        """
        async with factory() as session:
            try:
                result = await session.execute(select(cls).where(cls.id == user_id))
                stored = result.scalar_one()
            except SQLAlchemyError as e:
                raise translate_store_error(e, resource="user", resource_id=str(user_id)) from e

        return stored.decrypted(key)

    def decrypted(self, key: str) -> "User":
        """Build a plaintext copy of a stored User.

        The iv is re-derived from the stored email digest. Every decrypted
        value is checked against its stored digest.
        """
        iv = crypt.derive_iv(str(self.email_digest))
        plain = {
            "api_secret": crypt.decrypt(key, iv, str(self.api_secret)),
            "display_name": crypt.decrypt(key, iv, str(self.display_name)),
            "email": crypt.decrypt(key, iv, str(self.email)),
        }
        digests = {
            "api_secret": self.api_secret_digest,
            "display_name": self.display_name_digest,
            "email": self.email_digest,
        }
        for field, value in plain.items():
            if crypt.sha256_hex(value) != str(digests[field]):
                logger.warning("user_digest_mismatch", user_id=str(self.id), field=field)
                raise DataIntegrityError(details={"resource": "user", "field": field})

        # Transient copy; never add it to a session
        return User(
            id=self.id,
            api_secret=SafeValue.trusted(plain["api_secret"]),
            api_secret_digest=self.api_secret_digest,
            display_name=SafeValue.trusted(plain["display_name"]),
            display_name_digest=self.display_name_digest,
            email=SafeValue.trusted(plain["email"]),
            email_digest=self.email_digest,
            org=self.org,
            password=self.password,
            schema_version=self.schema_version,
            status=self.status,
            ctime=self.ctime,
            mtime=self.mtime,
        )
