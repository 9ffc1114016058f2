# tests/adapters/test_sqlalchemy_repository.py
import pytest

from user_service.adapters.persistence.database import create_database_engine, create_session_factory
from user_service.adapters.persistence.models import Base
from user_service.adapters.persistence.sqlalchemy_user_repository import SqlAlchemyUserRepository
from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import (
    DeadlineExceededError,
    RepositoryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from user_service.core.domain.models import User


@pytest.fixture
async def engine():
    engine = create_database_engine("sqlite+aiosqlite:///:memory:")
    yield engine
    await engine.dispose()

@pytest.fixture
async def sql_repo(engine):
    """Repository on a fresh in-memory SQLite database with the schema created."""
    repo = SqlAlchemyUserRepository(engine, create_session_factory(engine), auto_migrate=True)
    await repo.connect()
    return repo


@pytest.mark.asyncio
class TestSqlAlchemyUserRepository:

    async def test_create_and_read_back(self, ctx, sql_repo):
        created = await sql_repo.create(ctx, User(name="Ann", email="ann@x.com", phone="555"))

        assert created.id > 0
        assert created.created_at is not None
        assert created.created_at.tzinfo is not None

        by_id = await sql_repo.get_by_id(ctx, created.id)
        by_email = await sql_repo.get_by_email(ctx, "ann@x.com")
        assert by_id.id == by_email.id == created.id
        assert by_id.phone == "555"
        assert by_id.active is True

    async def test_unique_index_rejects_duplicate(self, ctx, sql_repo):
        """The partial unique index, not a pre-check, rejects the second insert."""
        await sql_repo.create(ctx, User(name="A", email="dup@x.com"))

        with pytest.raises(UserAlreadyExistsError):
            await sql_repo.create(ctx, User(name="B", email="dup@x.com"))

        assert await sql_repo.count(ctx) == 1

    async def test_email_reusable_after_soft_delete(self, ctx, sql_repo):
        first = await sql_repo.create(ctx, User(name="A", email="a@x.com"))
        await sql_repo.delete(ctx, first.id)

        second = await sql_repo.create(ctx, User(name="A", email="a@x.com"))
        assert second.id != first.id

    async def test_soft_delete_hides_row(self, ctx, sql_repo):
        user = await sql_repo.create(ctx, User(name="A", email="a@x.com"))

        await sql_repo.delete(ctx, user.id)

        with pytest.raises(UserNotFoundError):
            await sql_repo.get_by_id(ctx, user.id)
        with pytest.raises(UserNotFoundError):
            await sql_repo.get_by_email(ctx, "a@x.com")
        with pytest.raises(UserNotFoundError):
            await sql_repo.delete(ctx, user.id)
        with pytest.raises(UserNotFoundError):
            await sql_repo.update(ctx, user.model_copy(update={"name": "ghost"}))
        assert await sql_repo.count(ctx) == 0

    async def test_update(self, ctx, sql_repo):
        user = await sql_repo.create(ctx, User(name="A", email="a@x.com"))

        updated = await sql_repo.update(
            ctx, user.model_copy(update={"name": "A2", "phone": "123", "active": False})
        )

        assert updated.name == "A2"
        assert updated.phone == "123"
        assert updated.active is False
        assert updated.created_at == user.created_at
        assert updated.updated_at >= user.updated_at

    async def test_update_email_collision(self, ctx, sql_repo):
        await sql_repo.create(ctx, User(name="A", email="a@x.com"))
        b = await sql_repo.create(ctx, User(name="B", email="b@x.com"))

        with pytest.raises(UserAlreadyExistsError):
            await sql_repo.update(ctx, b.model_copy(update={"email": "a@x.com"}))

        assert (await sql_repo.get_by_id(ctx, b.id)).email == "b@x.com"

    async def test_get_all_ordering_and_window(self, ctx, sql_repo):
        ids = []
        for i in range(5):
            ids.append((await sql_repo.create(ctx, User(name=f"U{i}", email=f"u{i}@x.com"))).id)

        everything = await sql_repo.get_all(ctx, 10, 0)
        assert [u.id for u in everything] == list(reversed(ids))

        window = await sql_repo.get_all(ctx, 2, 1)
        assert [u.id for u in window] == [ids[3], ids[2]]

        assert await sql_repo.get_all(ctx, 10, 50) == []
        assert await sql_repo.count(ctx) == 5

    async def test_expired_context(self, sql_repo):
        with pytest.raises(DeadlineExceededError):
            await sql_repo.get_all(RequestContext.with_timeout(0), 10, 0)

    async def test_storage_failure_is_repository_error(self, ctx, engine, sql_repo):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        with pytest.raises(RepositoryError) as excinfo:
            await sql_repo.count(ctx)

        # Driver text (statement, bind parameters) never reaches the message.
        assert excinfo.value.message == "storage failure"
        assert "SELECT" not in str(excinfo.value)

    async def test_out_of_range_id_is_not_found(self, ctx, sql_repo):
        """
        Scenario: An id wider than the 64-bit id column is requested.
        Expected: NotFound, not a driver overflow.
        """
        huge = 2**64

        with pytest.raises(UserNotFoundError):
            await sql_repo.get_by_id(ctx, huge)
        with pytest.raises(UserNotFoundError):
            await sql_repo.delete(ctx, huge)
        with pytest.raises(UserNotFoundError):
            await sql_repo.update(ctx, User.model_construct(id=huge, name="X", email="x@x.com"))

    async def test_huge_offset_is_empty_page(self, ctx, sql_repo):
        await sql_repo.create(ctx, User(name="A", email="a@x.com"))
        assert await sql_repo.get_all(ctx, 10, 2**64) == []

    async def test_health_check(self, sql_repo):
        assert await sql_repo.health_check() is True
