# storefront/schemas/user.py
from pydantic import EmailStr, Field, field_validator

from storefront.schemas.common import CamelModel


class SignupRequest(CamelModel):
    """
    Payload for account creation.

    Validation rules:
      - name: 2-255 chars after trimming
      - email: valid syntax, normalized to lower case
      - password: at least 6 chars
    """

    name: str
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 255:
            raise ValueError("Name must be between 2 and 255 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(CamelModel):
    """Public user representation (no password hash)."""

    id: int
    name: str
    email: str


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserRead
