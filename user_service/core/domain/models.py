# user_service/core/domain/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidUserEmailError, InvalidUserNameError

# Ids are stored as signed 64-bit integers.
MAX_USER_ID = 2**63 - 1

# --- Entities ---

class User(BaseModel):
    """
    The identity record managed by the service.

    The persistence layer assigns `id` and the timestamps; an `id` of 0 means
    the user has not been persisted yet. A set `deleted_at` marks a
    soft-deleted record that normal reads never return.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(0, ge=0, le=MAX_USER_ID, description="Storage-assigned identifier (0 = not persisted)")
    name: str = Field("", description="Display name, required")
    email: str = Field("", description="Contact email, unique among live users")
    phone: Optional[str] = Field(None, description="Optional phone number")
    active: bool = True

    # Set by the repository
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_persisted(self) -> bool:
        return self.id != 0

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_valid(self) -> bool:
        """True iff both name and email are non-empty. No I/O."""
        return self.name != "" and self.email != ""

    def ensure_valid(self) -> None:
        """
        Raises the error kind matching the first failing field.

        Raises:
            InvalidUserNameError: If the name is empty.
            InvalidUserEmailError: If the email is empty.
        """
        if self.name == "":
            raise InvalidUserNameError()
        if self.email == "":
            raise InvalidUserEmailError()

    def activate(self) -> "User":
        return self.model_copy(update={"active": True})

    def deactivate(self) -> "User":
        return self.model_copy(update={"active": False})
