# user_service/core/ports/user_repository.py
from typing import List, Protocol

from user_service.core.domain.context import RequestContext
from user_service.core.domain.models import User


class IUserRepository(Protocol):
    """
    Port for persisting Users.
    Implementations: SqlAlchemyUserRepository (relational database) and
    InMemoryUserRepository (map-backed, zero I/O).

    Every operation honors the RequestContext: a cancelled or expired context
    raises OperationCancelledError / DeadlineExceededError. Soft-deleted
    records are invisible to every read.
    """

    async def create(self, ctx: RequestContext, user: User) -> User:
        """
        Persists a new user and assigns its id and timestamps.

        Returns:
            The stored User.

        Raises:
            UserAlreadyExistsError: If the email collides with a live record.
        """
        ...

    async def get_by_id(self, ctx: RequestContext, user_id: int) -> User:
        """
        Raises:
            UserNotFoundError: If no live record has this id.
        """
        ...

    async def get_by_email(self, ctx: RequestContext, email: str) -> User:
        """
        Raises:
            UserNotFoundError: If no live record has this email.
        """
        ...

    async def get_all(self, ctx: RequestContext, limit: int, offset: int) -> List[User]:
        """
        Returns at most `limit` live users, newest first, skipping `offset`.
        An empty page is an empty list, never an error.
        """
        ...

    async def update(self, ctx: RequestContext, user: User) -> User:
        """
        Overwrites the mutable fields of the live record matching `user.id`.

        Raises:
            UserNotFoundError: If the id does not match a live record.
            UserAlreadyExistsError: If the new email belongs to a different record.
        """
        ...

    async def delete(self, ctx: RequestContext, user_id: int) -> None:
        """
        Soft-deletes the record.

        Raises:
            UserNotFoundError: If no live record matched.
        """
        ...

    async def count(self, ctx: RequestContext) -> int:
        """Total number of live records."""
        ...

    async def connect(self) -> None:
        """Prepares the underlying storage (schema, pools)."""
        ...

    async def disconnect(self) -> None:
        """Releases the underlying storage resources."""
        ...

    async def health_check(self) -> bool:
        """Returns True if the underlying storage is accessible."""
        ...
