# user_service/adapters/persistence/sqlalchemy_user_repository.py
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, TypeVar

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import (
    RepositoryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from user_service.core.domain.models import MAX_USER_ID, User
from user_service.core.ports.user_repository import IUserRepository

from .database import init_models, ping
from .models import UserRecord

logger = structlog.get_logger()

T = TypeVar("T")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(record: UserRecord) -> User:
    return User(
        id=record.id,
        name=record.name,
        email=record.email,
        phone=record.phone,
        active=record.active,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
        deleted_at=_as_utc(record.deleted_at),
    )


class SqlAlchemyUserRepository(IUserRepository):
    """
    Relational implementation of the User repository port.

    Every call opens its own short-lived session and runs under the caller's
    RequestContext. Duplicate emails are rejected by the partial unique
    index, which is what makes concurrent creates safe.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker,
        auto_migrate: bool = True,
    ):
        self._engine = engine
        self._session_factory = session_factory
        self._auto_migrate = auto_migrate

    # --- Lifecycle ---

    async def connect(self) -> None:
        await ping(self._engine)
        if self._auto_migrate:
            await init_models(self._engine)
        logger.info("repository_connected", backend="sql", auto_migrate=self._auto_migrate)

    async def disconnect(self) -> None:
        await self._engine.dispose()
        logger.info("repository_disconnected", backend="sql")

    async def health_check(self) -> bool:
        try:
            await ping(self._engine)
            return True
        except Exception as e:
            logger.warning("repository_health_check_failed", error=str(e))
            return False

    # --- Reads ---

    async def get_by_id(self, ctx: RequestContext, user_id: int) -> User:
        if user_id > MAX_USER_ID:
            raise UserNotFoundError(user_id)

        async def op(session: AsyncSession) -> User:
            result = await session.execute(
                select(UserRecord).where(
                    UserRecord.id == user_id,
                    UserRecord.deleted_at.is_(None),
                )
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise UserNotFoundError(user_id)
            return _to_domain(record)

        return await self._run(ctx, op)

    async def get_by_email(self, ctx: RequestContext, email: str) -> User:
        async def op(session: AsyncSession) -> User:
            result = await session.execute(
                select(UserRecord).where(
                    UserRecord.email == email,
                    UserRecord.deleted_at.is_(None),
                )
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise UserNotFoundError(email)
            return _to_domain(record)

        return await self._run(ctx, op)

    async def get_all(self, ctx: RequestContext, limit: int, offset: int) -> List[User]:
        # Past the largest possible id there is nothing to return.
        if offset > MAX_USER_ID:
            return []

        async def op(session: AsyncSession) -> List[User]:
            result = await session.execute(
                select(UserRecord)
                .where(UserRecord.deleted_at.is_(None))
                .order_by(UserRecord.created_at.desc(), UserRecord.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [_to_domain(r) for r in result.scalars().all()]

        return await self._run(ctx, op)

    async def count(self, ctx: RequestContext) -> int:
        async def op(session: AsyncSession) -> int:
            result = await session.execute(
                select(func.count()).select_from(UserRecord).where(UserRecord.deleted_at.is_(None))
            )
            return int(result.scalar_one())

        return await self._run(ctx, op)

    # --- Writes ---

    async def create(self, ctx: RequestContext, user: User) -> User:
        now = datetime.now(timezone.utc)

        async def op(session: AsyncSession) -> User:
            record = UserRecord(
                name=user.name,
                email=user.email,
                phone=user.phone,
                active=user.active,
                created_at=now,
                updated_at=now,
                deleted_at=None,
            )
            session.add(record)
            await session.commit()
            return _to_domain(record)

        return await self._run(ctx, op, conflict_email=user.email)

    async def update(self, ctx: RequestContext, user: User) -> User:
        if user.id > MAX_USER_ID:
            raise UserNotFoundError(user.id)

        async def op(session: AsyncSession) -> User:
            result = await session.execute(
                select(UserRecord).where(
                    UserRecord.id == user.id,
                    UserRecord.deleted_at.is_(None),
                )
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise UserNotFoundError(user.id)

            record.name = user.name
            record.email = user.email
            record.phone = user.phone
            record.active = user.active
            record.updated_at = datetime.now(timezone.utc)
            await session.commit()
            return _to_domain(record)

        return await self._run(ctx, op, conflict_email=user.email)

    async def delete(self, ctx: RequestContext, user_id: int) -> None:
        if user_id > MAX_USER_ID:
            raise UserNotFoundError(user_id)

        async def op(session: AsyncSession) -> None:
            now = datetime.now(timezone.utc)
            result = await session.execute(
                update(UserRecord)
                .where(UserRecord.id == user_id, UserRecord.deleted_at.is_(None))
                .values(deleted_at=now, updated_at=now)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise UserNotFoundError(user_id)
            await session.commit()

        await self._run(ctx, op)

    # --- Internals ---

    async def _run(
        self,
        ctx: RequestContext,
        op: Callable[[AsyncSession], Awaitable[T]],
        conflict_email: Optional[str] = None,
    ) -> T:
        """
        Executes `op` in a fresh session under `ctx`, translating storage
        errors into domain errors.
        """

        async def in_session() -> T:
            async with self._session_factory() as session:
                return await op(session)

        try:
            return await ctx.run(in_session())
        except IntegrityError as e:
            if conflict_email is not None:
                logger.info("user_email_conflict", email=conflict_email)
                raise UserAlreadyExistsError(conflict_email) from e
            logger.error("repository_integrity_error", error=str(e.orig))
            raise RepositoryError(str(e.orig)) from e
        except SQLAlchemyError as e:
            # Statement and bind parameters go to the log only.
            logger.error("repository_query_failed", error=str(e))
            raise RepositoryError(type(e).__name__) from e
