# user_service/shared/container.py
from dependency_injector import containers, providers

from user_service.adapters.persistence.database import create_database_engine, create_session_factory
from user_service.adapters.persistence.memory_user_repository import InMemoryUserRepository
from user_service.adapters.persistence.sqlalchemy_user_repository import SqlAlchemyUserRepository
from user_service.core.use_cases.manage_users import UserUseCase
from user_service.shared.config import settings


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    This declarative container defines the assembly instructions for the application.
    """

    # 1. Configuration
    # We load settings directly, but wrapping them allows overriding in tests.
    config = providers.Configuration(pydantic_settings=[settings])

    # 2. Gateways (Infrastructure Adapters)

    # Engine (Singleton: one connection pool shared). Created lazily, so the
    # memory backend never touches a database driver.
    db_engine = providers.Singleton(
        create_database_engine,
        url=providers.Object(settings.database_url),
        echo=config.DB_ECHO,
        pool_size=config.DB_POOL_SIZE,
    )

    session_factory = providers.Singleton(
        create_session_factory,
        engine=db_engine,
    )

    # Persistence, chosen by STORAGE_BACKEND ("sql" | "memory").
    user_repository = providers.Selector(
        providers.Object(settings.STORAGE_BACKEND.value),
        sql=providers.Singleton(
            SqlAlchemyUserRepository,
            engine=db_engine,
            session_factory=session_factory,
            auto_migrate=config.DB_AUTO_MIGRATE,
        ),
        memory=providers.Singleton(InMemoryUserRepository),
    )

    # 3. Use Cases (Application Logic)

    # Factory: New instance created for every request (stateless logic),
    # but with Singleton dependencies injected.
    user_use_case = providers.Factory(
        UserUseCase,
        repository=user_repository,
    )

# Instantiate the container for global access (e.g. by FastAPI)
container = Container()
