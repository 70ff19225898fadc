"""Authentication data models."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from scuba_admin.models.base import ApiRecord, BaseDataModel


class LoginForm(BaseDataModel):
    email: EmailStr
    password: str = Field(..., repr=False)

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class User(ApiRecord):
    """The logged-in staff member."""

    id: int
    full_name: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    dive_center_id: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.name or self.email or f"User {self.id}"
