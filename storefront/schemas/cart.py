# storefront/schemas/cart.py
from datetime import datetime

from pydantic import Field

from storefront.schemas.common import MAX_INT, CamelModel
from storefront.schemas.item import ItemRead


class CartAddRequest(CamelModel):
    """
    Payload for adding to cart. Repeated adds accumulate.
    """

    item_id: int = Field(ge=1, le=MAX_INT)
    quantity: int = Field(default=1, ge=1, le=MAX_INT)


class CartRemoveRequest(CamelModel):
    """
    Payload for removing from cart.

    - remove_all=False: decrement by exactly one (line deleted at 1)
    - remove_all=True: delete the whole line
    """

    item_id: int = Field(ge=1, le=MAX_INT)
    remove_all: bool = False


class CartItemRead(CamelModel):
    """
    Read model for a single cart line, joined with its item.
    """

    id: int
    user_id: int
    item_id: int
    quantity: int
    item: ItemRead
    created_at: datetime
    updated_at: datetime


class CartSummary(CamelModel):
    """
    Full cart response model with totals.
    """

    cart_items: list[CartItemRead]
    total: float
    item_count: int


class CartItemResponse(CamelModel):
    message: str
    cart_item: CartItemRead
