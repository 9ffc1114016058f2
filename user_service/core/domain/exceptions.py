# user_service/core/domain/exceptions.py
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Transport-independent classification of every failure the core can raise."""
    INVALID_ID = "invalid_id"
    INVALID_NAME = "invalid_name"
    INVALID_EMAIL = "invalid_email"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    EMAIL_TAKEN = "email_taken"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    STORAGE = "storage"  # Unclassified lower-layer failure


class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Validation Errors ---

class InvalidUserIDError(DomainError):
    """Raised when the zero sentinel (or nothing) is passed where a user id is required."""
    kind = ErrorKind.INVALID_ID

    def __init__(self, user_id: Optional[int] = None):
        self.user_id = user_id
        super().__init__("invalid user ID")

class InvalidUserNameError(DomainError):
    """Raised when a user is submitted with an empty name."""
    kind = ErrorKind.INVALID_NAME

    def __init__(self):
        super().__init__("invalid user name")

class InvalidUserEmailError(DomainError):
    """Raised when a user is submitted (or looked up) with an empty email."""
    kind = ErrorKind.INVALID_EMAIL

    def __init__(self):
        super().__init__("invalid user email")

# --- Entity Not Found / Conflict Errors ---

class UserNotFoundError(DomainError):
    """Raised when no non-deleted user matches the requested id or email."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, identifier: object = None):
        self.identifier = identifier
        super().__init__("user not found")

class UserAlreadyExistsError(DomainError):
    """Raised when creating a user whose email already belongs to a live record."""
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, email: Optional[str] = None):
        self.email = email
        super().__init__("user already exists")

class EmailTakenError(DomainError):
    """Raised when an update tries to move a user onto another user's email."""
    kind = ErrorKind.EMAIL_TAKEN

    def __init__(self, email: str):
        self.email = email
        super().__init__("email already taken by another user")

# --- Process/State Errors ---

class OperationCancelledError(DomainError):
    """Raised when the caller cancelled the RequestContext of an in-flight operation."""
    kind = ErrorKind.CANCELLED

    def __init__(self):
        super().__init__("operation cancelled")

class DeadlineExceededError(DomainError):
    """Raised when the RequestContext deadline passed before the operation finished."""
    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(self):
        super().__init__("deadline exceeded")

class RepositoryError(DomainError):
    """Raised when the storage layer fails for a reason the core does not classify."""
    kind = ErrorKind.STORAGE

    def __init__(self, details: str = ""):
        # Raw driver text stays server-side (logs); clients only see the message.
        self.details = details
        super().__init__("storage failure")
