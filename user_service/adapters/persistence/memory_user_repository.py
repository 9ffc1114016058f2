# user_service/adapters/persistence/memory_user_repository.py
import asyncio
from datetime import datetime, timezone
from typing import Dict, List

import structlog

from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import UserAlreadyExistsError, UserNotFoundError
from user_service.core.domain.models import User
from user_service.core.ports.user_repository import IUserRepository

logger = structlog.get_logger()


class InMemoryUserRepository(IUserRepository):
    """
    Dict-backed implementation of the User repository port.

    Behaves like the SQL adapter, including soft deletes and email uniqueness
    among live rows. Each call yields once to the event loop and then
    does its check-and-write without another suspension point, so the
    uniqueness check cannot interleave with a concurrent insert.
    """

    def __init__(self):
        self._rows: Dict[int, User] = {}
        self._next_id = 1

    async def connect(self) -> None:
        logger.info("repository_connected", backend="memory")

    async def disconnect(self) -> None:
        logger.info("repository_disconnected", backend="memory")

    async def health_check(self) -> bool:
        return True

    async def _enter(self, ctx: RequestContext) -> None:
        await asyncio.sleep(0)
        ctx.raise_if_done()

    def _live(self) -> List[User]:
        return [u for u in self._rows.values() if u.deleted_at is None]

    def _email_owner(self, email: str):
        for user in self._live():
            if user.email == email:
                return user
        return None

    async def create(self, ctx: RequestContext, user: User) -> User:
        await self._enter(ctx)

        if self._email_owner(user.email) is not None:
            raise UserAlreadyExistsError(user.email)

        now = datetime.now(timezone.utc)
        stored = user.model_copy(update={
            "id": self._next_id,
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
        })
        self._rows[stored.id] = stored
        self._next_id += 1
        return stored

    async def get_by_id(self, ctx: RequestContext, user_id: int) -> User:
        await self._enter(ctx)
        user = self._rows.get(user_id)
        if user is None or user.is_deleted:
            raise UserNotFoundError(user_id)
        return user

    async def get_by_email(self, ctx: RequestContext, email: str) -> User:
        await self._enter(ctx)
        user = self._email_owner(email)
        if user is None:
            raise UserNotFoundError(email)
        return user

    async def get_all(self, ctx: RequestContext, limit: int, offset: int) -> List[User]:
        await self._enter(ctx)
        ordered = sorted(self._live(), key=lambda u: (u.created_at, u.id), reverse=True)
        return ordered[offset:offset + limit]

    async def update(self, ctx: RequestContext, user: User) -> User:
        await self._enter(ctx)

        current = self._rows.get(user.id)
        if current is None or current.is_deleted:
            raise UserNotFoundError(user.id)

        owner = self._email_owner(user.email)
        if owner is not None and owner.id != user.id:
            raise UserAlreadyExistsError(user.email)

        stored = current.model_copy(update={
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "active": user.active,
            "updated_at": datetime.now(timezone.utc),
        })
        self._rows[stored.id] = stored
        return stored

    async def delete(self, ctx: RequestContext, user_id: int) -> None:
        await self._enter(ctx)

        current = self._rows.get(user_id)
        if current is None or current.is_deleted:
            raise UserNotFoundError(user_id)

        now = datetime.now(timezone.utc)
        self._rows[user_id] = current.model_copy(update={"deleted_at": now, "updated_at": now})

    async def count(self, ctx: RequestContext) -> int:
        await self._enter(ctx)
        return len(self._live())
