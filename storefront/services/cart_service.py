# storefront/services/cart_service.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from sqlmodel import Session

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.cart import CartItem
from storefront.models.item import Item
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.item_repo import ItemRepository
from storefront.schemas.cart import CartItemRead, CartSummary
from storefront.schemas.common import MAX_INT
from storefront.schemas.item import ItemRead

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MAX_QUANTITY = MAX_INT


def line_total(price: Decimal, quantity: int) -> Decimal:
    return Decimal(price) * quantity


def summarize(lines: Iterable[tuple[CartItem, Item]]) -> tuple[Decimal, int]:
    """
    Cart totals: (sum of price * quantity rounded to cents, sum of quantities).
    """
    total = Decimal("0")
    count = 0
    for cart_item, item in lines:
        total += line_total(item.price, cart_item.quantity)
        count += cart_item.quantity
    return total.quantize(CENT, rounding=ROUND_HALF_UP), count


def to_cart_item_read(cart_item: CartItem, item: Item) -> CartItemRead:
    return CartItemRead(
        id=cart_item.id,
        user_id=cart_item.user_id,
        item_id=cart_item.item_id,
        quantity=cart_item.quantity,
        item=ItemRead.model_validate(item),
        created_at=cart_item.created_at,
        updated_at=cart_item.updated_at,
    )


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - at most one line per (user, item): repeated adds merge
      - remove decrements by exactly one, or drops the line
      - compute cart total and item count
    """

    def __init__(
        self,
        session: Session,
        cart_repo: CartRepository | None = None,
        item_repo: ItemRepository | None = None,
    ):
        self.session = session
        self.cart_repo = cart_repo or CartRepository()
        self.item_repo = item_repo or ItemRepository()

    # ---- internal helpers ----

    def _read_line(self, user_id: int, item_id: int) -> CartItemRead | None:
        line = self.cart_repo.get_line(self.session, user_id, item_id)
        if line is None:
            return None
        return to_cart_item_read(*line)

    # ---- public operations ----

    def get_cart(self, user_id: int) -> CartSummary:
        """
        Return full cart summary:
          - lines joined with item, newest first
          - total (rounded to cents)
          - item_count
        """
        lines = self.cart_repo.list_for_user(self.session, user_id)
        total, count = summarize(lines)

        return CartSummary(
            cart_items=[to_cart_item_read(cart_item, item) for cart_item, item in lines],
            total=float(total),
            item_count=count,
        )

    def add_item(
        self,
        user_id: int,
        item_id: int,
        quantity: int = 1,
    ) -> tuple[CartItemRead, bool]:
        """
        Add `quantity` units of an item to the user's cart.

        Rules:
          - item must exist
          - 1 <= quantity, and the line never grows past MAX_QUANTITY
          - existing line => quantity accumulates, never a second line

        Returns:
            (resulting line, created) where created is False on merge.
        """
        if not 1 <= quantity <= MAX_QUANTITY:
            raise ValidationError(f"Quantity must be between 1 and {MAX_QUANTITY}")

        if item_id > MAX_INT or self.item_repo.get_by_id(self.session, item_id) is None:
            raise NotFoundError("Item not found")

        result = self.cart_repo.add_quantity(
            self.session, user_id, item_id, quantity, max_quantity=MAX_QUANTITY
        )
        if result is None:
            raise ValidationError(f"Cart quantity cannot exceed {MAX_QUANTITY}")
        _, created = result
        line = self._read_line(user_id, item_id)
        if line is None:
            # removed by a concurrent request right after our write
            raise NotFoundError("Item not found in cart")

        logger.info(
            "Cart %s: item %s %s (quantity=%s)",
            user_id,
            item_id,
            "added" if created else "merged",
            line.quantity,
        )
        return line, created

    def remove_item(
        self,
        user_id: int,
        item_id: int,
        remove_all: bool = False,
    ) -> CartItemRead | None:
        """
        Remove one unit of an item, or the whole line.

        Returns:
            The updated line, or None if the line was deleted.

        Raises:
            NotFoundError: if the item is not in the cart.
        """
        if remove_all:
            if not self.cart_repo.delete_line(self.session, user_id, item_id):
                raise NotFoundError("Item not found in cart")
            logger.info("Cart %s: item %s removed", user_id, item_id)
            return None

        if self.cart_repo.decrement(self.session, user_id, item_id):
            return self._read_line(user_id, item_id)

        # quantity was 1 (or the line is absent)
        if self.cart_repo.delete_line(self.session, user_id, item_id, max_quantity=1):
            logger.info("Cart %s: item %s removed", user_id, item_id)
            return None

        if self.cart_repo.get_item(self.session, user_id, item_id) is None:
            raise NotFoundError("Item not found in cart")

        # line grew between the two statements; decrement the new quantity
        return self.remove_item(user_id, item_id)

    def clear_cart(self, user_id: int) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(self.session, user_id)
        return CartSummary(cart_items=[], total=0.0, item_count=0)
