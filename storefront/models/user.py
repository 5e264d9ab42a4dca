# storefront/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered storefront customer.

    Identity:
      - id: autoincrement integer, used as the token subject

    The password is never stored; only its bcrypt hash.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        max_length=255,
        description="Display name (2-255 chars)",
    )

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="Login email, stored lower-cased",
    )

    password_hash: str = Field(
        max_length=255,
        description="bcrypt hash of the password",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
        description="Last update timestamp (UTC)",
    )
