# tests/conftest.py
import os

# Must be set before user_service.shared.config is imported.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from user_service.adapters.persistence.memory_user_repository import InMemoryUserRepository
from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import UserNotFoundError
from user_service.core.domain.models import User
from user_service.core.ports.user_repository import IUserRepository
from user_service.core.use_cases.manage_users import UserUseCase
from user_service.shared.container import container as app_container


def make_user(user_id=1, name="Ann", email="ann@x.com", active=True, **extra) -> User:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return User(
        id=user_id,
        name=name,
        email=email,
        active=active,
        created_at=extra.pop("created_at", now),
        updated_at=extra.pop("updated_at", now),
        **extra,
    )

@pytest.fixture
def ctx():
    """A context with no deadline."""
    return RequestContext.background()

@pytest.fixture(scope="function")
def mock_repo():
    """Returns a mock User Repository. Lookups miss by default."""
    repo = MagicMock(spec=IUserRepository)
    # Async methods must be mocked with AsyncMock
    repo.create = AsyncMock(side_effect=lambda ctx, user: user.model_copy(update={"id": 1}))
    repo.get_by_id = AsyncMock(side_effect=UserNotFoundError())
    repo.get_by_email = AsyncMock(side_effect=UserNotFoundError())
    repo.get_all = AsyncMock(return_value=[])
    repo.update = AsyncMock(side_effect=lambda ctx, user: user)
    repo.delete = AsyncMock(return_value=None)
    repo.count = AsyncMock(return_value=0)
    repo.connect = AsyncMock()
    repo.disconnect = AsyncMock()
    repo.health_check = AsyncMock(return_value=True)
    return repo

@pytest.fixture
def memory_repo():
    return InMemoryUserRepository()

@pytest.fixture
def mock_use_case(mock_repo):
    return UserUseCase(repository=mock_repo)

@pytest.fixture
def use_case(memory_repo):
    """UserUseCase backed by the in-memory repository."""
    return UserUseCase(repository=memory_repo)

@pytest.fixture(scope="function")
def container(memory_repo):
    """
    The application container with the repository provider overridden.
    Overrides are reset after each test.
    """
    app_container.user_repository.override(memory_repo)

    yield app_container

    app_container.user_repository.reset_override()
