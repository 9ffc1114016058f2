# user_service/core/use_cases/manage_users.py
import math
from typing import List, Tuple

import structlog

from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import (
    DomainError,
    EmailTakenError,
    InvalidUserEmailError,
    InvalidUserIDError,
    RepositoryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from user_service.core.domain.models import User
from user_service.core.ports.user_repository import IUserRepository
from user_service.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def normalize_pagination(page: int, page_size: int) -> Tuple[int, int]:
    """
    Coerces out-of-range paging input instead of rejecting it.

    page < 1 becomes 1; a page_size below 1 or above MAX_PAGE_SIZE becomes
    DEFAULT_PAGE_SIZE.
    """
    if page < 1:
        page = 1
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0


class UserUseCase:
    """
    Use Case: Manages the lifecycle of User records.

    Responsibilities:
    1. Validates users before any I/O where the rule allows it.
    2. Enforces existence checks and email uniqueness.
    3. Normalizes pagination input.
    4. Drives the active/inactive transitions.

    Every method takes the caller's RequestContext first and forwards it to
    the repository unchanged. Nothing is cached between calls.
    """

    def __init__(self, repository: IUserRepository):
        # We inject the interface (Port), not the concrete implementation
        self.repository = repository

    async def create_user(self, ctx: RequestContext, user: User) -> User:
        with tracer.start_as_current_span("use_case.create_user"):
            user.ensure_valid()

            try:
                # Best-effort pre-check; the storage constraint stays authoritative.
                await self._call(self.repository.get_by_email(ctx, user.email))
            except UserNotFoundError:
                pass
            else:
                logger.info("user_create_rejected", reason="email_exists")
                raise UserAlreadyExistsError(user.email)

            fresh = user.model_copy(update={
                "id": 0,
                "created_at": None,
                "updated_at": None,
                "deleted_at": None,
            })
            created = await self._call(self.repository.create(ctx, fresh))
            logger.info("user_created", user_id=created.id)
            return created

    async def get_user(self, ctx: RequestContext, user_id: int) -> User:
        with tracer.start_as_current_span("use_case.get_user") as span:
            span.set_attribute("app.user_id", user_id)
            if user_id == 0:
                raise InvalidUserIDError(user_id)
            return await self._call(self.repository.get_by_id(ctx, user_id))

    async def get_user_by_email(self, ctx: RequestContext, email: str) -> User:
        with tracer.start_as_current_span("use_case.get_user_by_email"):
            if email == "":
                raise InvalidUserEmailError()
            return await self._call(self.repository.get_by_email(ctx, email))

    async def get_all_users(
        self, ctx: RequestContext, page: int, page_size: int
    ) -> Tuple[List[User], int]:
        """
        Returns one page of live users plus the total live count.
        Fails as a whole if either repository call fails.
        """
        with tracer.start_as_current_span("use_case.get_all_users") as span:
            page, page_size = normalize_pagination(page, page_size)
            offset = (page - 1) * page_size
            span.set_attribute("app.page", page)
            span.set_attribute("app.page_size", page_size)

            users = await self._call(self.repository.get_all(ctx, page_size, offset))
            total = await self._call(self.repository.count(ctx))
            return users, total

    async def update_user(self, ctx: RequestContext, user_id: int, user: User) -> User:
        """
        Replaces the mutable fields of an existing user.

        The route id always wins over any id carried by `user`. The email
        uniqueness lookup only runs when the email actually changes.
        """
        with tracer.start_as_current_span("use_case.update_user") as span:
            span.set_attribute("app.user_id", user_id)
            if user_id == 0:
                raise InvalidUserIDError(user_id)

            existing = await self._call(self.repository.get_by_id(ctx, user_id))

            user.ensure_valid()

            if user.email != existing.email:
                try:
                    owner = await self._call(self.repository.get_by_email(ctx, user.email))
                except UserNotFoundError:
                    pass
                else:
                    if owner.id != user_id:
                        logger.info("user_update_rejected", user_id=user_id, reason="email_taken")
                        raise EmailTakenError(user.email)

            pinned = user.model_copy(update={
                "id": user_id,
                "created_at": existing.created_at,
                "deleted_at": None,
            })
            updated = await self._call(self.repository.update(ctx, pinned))
            logger.info("user_updated", user_id=user_id)
            return updated

    async def delete_user(self, ctx: RequestContext, user_id: int) -> None:
        with tracer.start_as_current_span("use_case.delete_user") as span:
            span.set_attribute("app.user_id", user_id)
            if user_id == 0:
                raise InvalidUserIDError(user_id)

            # Existence pre-check; the repository reports NotFound as well.
            await self._call(self.repository.get_by_id(ctx, user_id))
            await self._call(self.repository.delete(ctx, user_id))
            logger.info("user_deleted", user_id=user_id)

    async def activate_user(self, ctx: RequestContext, user_id: int) -> User:
        user = await self.get_user(ctx, user_id)
        with tracer.start_as_current_span("use_case.activate_user"):
            updated = await self._call(self.repository.update(ctx, user.activate()))
            logger.info("user_activated", user_id=user_id)
            return updated

    async def deactivate_user(self, ctx: RequestContext, user_id: int) -> User:
        user = await self.get_user(ctx, user_id)
        with tracer.start_as_current_span("use_case.deactivate_user"):
            updated = await self._call(self.repository.update(ctx, user.deactivate()))
            logger.info("user_deactivated", user_id=user_id)
            return updated

    async def _call(self, awaitable):
        """
        Awaits a repository call, passing domain errors through untouched and
        wrapping anything unexpected in RepositoryError.
        """
        try:
            return await awaitable
        except DomainError:
            raise
        except Exception as e:
            logger.error("repository_call_failed", error=str(e), exc_info=True)
            raise RepositoryError(str(e)) from e
