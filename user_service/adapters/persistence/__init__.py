# user_service/adapters/persistence/__init__.py
"""
Persistence Adapters.

This package implements the Repository port defined in the Core.
It handles the translation between the User entity and the underlying storage.

Components:
- SqlAlchemyUserRepository: async SQLAlchemy implementation (PostgreSQL / SQLite).
- InMemoryUserRepository: dict-backed implementation for tests and local runs.
"""

from .memory_user_repository import InMemoryUserRepository
from .sqlalchemy_user_repository import SqlAlchemyUserRepository

__all__ = [
    "InMemoryUserRepository",
    "SqlAlchemyUserRepository",
]
