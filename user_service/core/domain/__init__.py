# user_service/core/domain/__init__.py
"""
Domain Entities and Value Objects.

This package defines the core data structures used throughout the application:
the User entity, the error kinds raised by the core, and the RequestContext
handle that carries cancellation and deadlines down to the repositories.
"""

from .context import RequestContext
from .exceptions import (
    DeadlineExceededError,
    DomainError,
    EmailTakenError,
    ErrorKind,
    InvalidUserEmailError,
    InvalidUserIDError,
    InvalidUserNameError,
    OperationCancelledError,
    RepositoryError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .models import User

__all__ = [
    "RequestContext",
    "User",
    "DomainError",
    "ErrorKind",
    "InvalidUserIDError",
    "InvalidUserNameError",
    "InvalidUserEmailError",
    "UserNotFoundError",
    "UserAlreadyExistsError",
    "EmailTakenError",
    "OperationCancelledError",
    "DeadlineExceededError",
    "RepositoryError",
]
