# user_service/core/ports/__init__.py
"""
Core Ports (Interfaces).

This package defines the Protocols that the Infrastructure Adapters must
implement. These interfaces allow the Core Domain to interact with storage
without knowing the implementation details.
"""

from .user_repository import IUserRepository

__all__ = [
    "IUserRepository",
]
