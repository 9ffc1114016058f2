# user_service/adapters/api/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from user_service.core.domain.models import User


# --- Request Models ---

class UserCreateRequest(BaseModel):
    name: str = Field(..., description="Display name; must not be empty")
    email: str = Field(..., description="Unique among active users; must not be empty")
    phone: Optional[str] = Field(None, description="Free-form phone number")
    active: bool = Field(True, description="Initial activation state")

    def to_domain(self) -> User:
        return User(name=self.name, email=self.email, phone=self.phone, active=self.active)


class UserUpdateRequest(BaseModel):
    """
    Full replacement of the mutable fields.
    Any `id` in the body is ignored; the path id wins.
    """

    name: str
    email: str
    phone: Optional[str] = None
    active: bool = True

    def to_domain(self) -> User:
        return User(name=self.name, email=self.email, phone=self.phone, active=self.active)


# --- Response Models ---

class UserResponse(BaseModel):
    """Public view of a User. `deleted_at` is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> dict:
        return cls.model_validate(user).model_dump(mode="json")
