# storefront/schemas/item.py
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from pydantic import ConfigDict, Field, field_validator, model_validator

from storefront.schemas.common import CamelModel

CENT = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")


def quantize_price(v: Decimal) -> Decimal:
    return v.quantize(CENT, rounding=ROUND_HALF_UP)


def _strip_required(v: str, max_length: int, label: str) -> str:
    v = v.strip()
    if not 1 <= len(v) <= max_length:
        raise ValueError(f"{label} must be between 1 and {max_length} characters")
    return v


class ItemCreate(CamelModel):
    """
    Payload for creating a catalog item.

    - price is rounded to cents (half-up) before storage.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    category: str
    price: Decimal = Field(ge=0, le=MAX_PRICE)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, 255, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _strip_required(v, 100, "Category")

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()

    @field_validator("price")
    @classmethod
    def round_price(cls, v: Decimal) -> Decimal:
        return quantize_price(v)


class ItemUpdate(CamelModel):
    """
    Partial update payload for items.
    All fields are optional; only the ones sent are applied.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    category: str | None = None
    price: Decimal | None = Field(default=None, ge=0, le=MAX_PRICE)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v, 255, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v, 100, "Category")

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()

    @field_validator("price")
    @classmethod
    def round_price(cls, v: Decimal | None) -> Decimal | None:
        if v is None:
            return v
        return quantize_price(v)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "ItemUpdate":
        # only description may be cleared
        for field in ("name", "category", "price"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class ItemFilters(CamelModel):
    """
    Catalog listing filters. Every field is independently optional.

    - category: case-insensitive substring
    - min_price / max_price: inclusive bounds
    """

    category: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)


class ItemRead(CamelModel):
    """
    Item representation for clients.
    """

    id: int
    name: str
    description: str | None = None
    category: str
    price: float
    created_at: datetime
    updated_at: datetime


class ItemResponse(CamelModel):
    message: str | None = None
    item: ItemRead


class ItemListResponse(CamelModel):
    items: list[ItemRead]
    count: int
