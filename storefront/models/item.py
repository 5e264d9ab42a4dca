# storefront/models/item.py
from datetime import datetime
from decimal import Decimal

from sqlmodel import SQLModel, Field, Text

from storefront.models.user import utcnow


class Item(SQLModel, table=True):
    """
    Catalog entry.

    Matches ERD:
      - id, name, description, category, price, created_at, updated_at
    """

    __tablename__ = "items"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the item",
    )

    description: str | None = Field(
        default=None,
        sa_type=Text,
        description="Optional long description",
    )

    category: str = Field(
        max_length=100,
        index=True,
        description="Free-form category, matched case-insensitively",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price with cent precision",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
        description="Last update timestamp (UTC)",
    )
