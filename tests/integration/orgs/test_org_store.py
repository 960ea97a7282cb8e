"""Integration tests for Org provisioning, reads and status updates."""

import asyncio
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from grokloc.core import crypt
from grokloc.core.database import transaction
from grokloc.core.errors import (
    CipherError,
    DataIntegrityError,
    DuplicateError,
    NotFoundError,
    StoreErrorKind,
    ValidationError,
    classify_store_error,
)
from grokloc.core.models import Status
from grokloc.core.safe import SafeValue
from grokloc.modules.orgs.models import Org
from grokloc.modules.users.models import User
from grokloc.state import AppState


pytestmark = pytest.mark.integration


async def count_rows(state: AppState, model: type[Org] | type[User]) -> int:
    """Helper to count rows of a table."""
    async with state.replica() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


async def create_org(state: AppState, password: SafeValue, name: str | None = None):
    """Helper to create an org with a random owner."""
    return await Org.create(
        state.master,
        SafeValue(name) if name else SafeValue.random(),
        SafeValue.random(),
        SafeValue.random(),
        password,
        state.key,
    )


class TestOrgInsert:
    """Tests for Org.insert."""

    async def test_insert_unchecked_owner(self, state: AppState):
        org = Org(
            id=uuid4(),
            name=SafeValue.random(),
            owner=uuid4(),
            schema_version=0,
            status=Status.UNCONFIRMED,
        )

        async with transaction(state.master) as session:
            await org.insert(session)

        read = await Org.read(state.replica, org.id)
        assert read.id == org.id
        assert read.owner == org.owner
        assert read.status is Status.UNCONFIRMED

    def test_owner_immutable(self):
        org = Org(id=uuid4(), name=SafeValue.random(), owner=uuid4())

        with pytest.raises(ValidationError):
            org.owner = uuid4()


class TestOrgCreate:
    """Tests for Org.create."""

    async def test_create(self, state: AppState, derived_password: SafeValue):
        org, owner = await create_org(state, derived_password)

        assert org.owner == owner.id
        assert owner.org == org.id
        assert org.status is Status.ACTIVE
        assert owner.status is Status.ACTIVE
        assert org.meta.ctime <= org.meta.mtime

        org_read = await Org.read(state.replica, org.id)
        assert org_read.id == org.id
        assert org_read.name == org.name
        assert org_read.meta.status is Status.ACTIVE

        user_read = await User.read(state.replica, owner.id, state.key)
        assert user_read.id == owner.id
        assert user_read.status is Status.ACTIVE

    async def test_acme_scenario(self, state: AppState, derived_password: SafeValue):
        org, owner = await Org.create(
            state.master,
            SafeValue("acme"),
            SafeValue("Acme Owner"),
            SafeValue("owner@acme.test"),
            derived_password,
            state.key,
        )

        org_read = await Org.read(state.replica, org.id)
        assert org_read.id == org.id
        assert org_read.owner == owner.id

        user_read = await User.read(state.replica, owner.id, state.key)
        assert str(user_read.email) == "owner@acme.test"
        assert str(user_read.display_name) == "Acme Owner"

        with pytest.raises((CipherError, DataIntegrityError)):
            await User.read(state.replica, owner.id, crypt.random_key())

    async def test_duplicate_name_is_atomic(self, state: AppState, derived_password: SafeValue):
        """A colliding org name leaves no owner row behind."""
        await create_org(state, derived_password, name="acme")
        users_before = await count_rows(state, User)
        orgs_before = await count_rows(state, Org)

        with pytest.raises(DuplicateError) as exc_info:
            await create_org(state, derived_password, name="acme")

        assert classify_store_error(exc_info.value) is StoreErrorKind.DUPLICATE
        assert await count_rows(state, User) == users_before == 1
        assert await count_rows(state, Org) == orgs_before == 1

    async def test_distinct_names(self, state: AppState, derived_password: SafeValue):
        for _ in range(3):
            await create_org(state, derived_password)

        assert await count_rows(state, Org) == 3
        assert await count_rows(state, User) == 3

    async def test_concurrent_same_name(self, state: AppState, derived_password: SafeValue):
        """Overlapping creates with one name: one wins, the rest are duplicates."""
        results = await asyncio.gather(
            *(create_org(state, derived_password, name="acme") for _ in range(3)),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, BaseException)]
        failed = [r for r in results if isinstance(r, BaseException)]
        assert len(created) == 1
        assert len(failed) == 2
        assert all(isinstance(e, DuplicateError) for e in failed)

        assert await count_rows(state, Org) == 1
        assert await count_rows(state, User) == 1

        org, owner = created[0]
        assert (await Org.read(state.replica, org.id)).owner == owner.id
        assert (await User.read(state.replica, owner.id, state.key)).org == org.id

    async def test_concurrent_failure_keeps_other_creates(
        self, state: AppState, derived_password: SafeValue
    ):
        """A failing create does not roll back creates running beside it."""
        await create_org(state, derived_password, name="taken")

        results = await asyncio.gather(
            create_org(state, derived_password, name="taken"),
            create_org(state, derived_password, name="fresh0"),
            create_org(state, derived_password, name="fresh1"),
            return_exceptions=True,
        )

        assert isinstance(results[0], DuplicateError)
        for org, owner in results[1:]:
            assert (await Org.read(state.replica, org.id)).name == org.name
            assert (await User.read(state.replica, owner.id, state.key)).id == owner.id

        assert await count_rows(state, Org) == 3
        assert await count_rows(state, User) == 3


class TestOrgRead:
    """Tests for Org.read."""

    async def test_read_miss(self, state: AppState):
        with pytest.raises(NotFoundError) as exc_info:
            await Org.read(state.replica, uuid4())

        assert classify_store_error(exc_info.value) is StoreErrorKind.NOT_FOUND
        assert not isinstance(exc_info.value, DuplicateError)


class TestOrgUpdateStatus:
    """Tests for Org.update_status."""

    async def test_update_status(self, state: AppState, derived_password: SafeValue):
        org, _ = await create_org(state, derived_password)

        await org.update_status(state.master, Status.INACTIVE)

        assert org.status is Status.INACTIVE
        assert (await Org.read(state.replica, org.id)).status is Status.INACTIVE

        # reverting to active is allowed
        await org.update_status(state.master, Status.ACTIVE)
        read = await Org.read(state.replica, org.id)
        assert read.status is Status.ACTIVE
        assert read.mtime == org.mtime

    async def test_update_status_miss(self, state: AppState):
        org = Org(
            id=uuid4(),
            name=SafeValue.random(),
            owner=uuid4(),
            schema_version=0,
            status=Status.ACTIVE,
        )

        with pytest.raises(NotFoundError):
            await org.update_status(state.master, Status.INACTIVE)

        assert org.status is Status.ACTIVE
        assert await count_rows(state, Org) == 0
