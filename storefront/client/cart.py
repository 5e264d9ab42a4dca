# storefront/client/cart.py
import logging
from typing import Any

from storefront.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)


class CartStore:
    """
    Local mirror of the signed-in user's cart.

    The server is the source of truth: every mutation is sent to the API
    and followed by a full re-fetch. Nothing is updated optimistically.

    State:
      - cart: last `GET /cart` body ({cartItems, total, itemCount}) or None
      - error: message of the last failure, cleared by the next call
      - is_loading: True while a refresh is in flight
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.cart: dict[str, Any] | None = None
        self.error: str | None = None
        self.is_loading = False

    def _require_login(self, action: str) -> None:
        if not self.api.tokens.token:
            raise ApiError(f"Please log in to {action}", 401)

    def refresh(self) -> dict[str, Any] | None:
        if not self.api.tokens.token:
            self.cart = None
            return None

        self.is_loading = True
        self.error = None
        try:
            self.cart = self.api.get("/cart")
        except ApiError as e:
            self.error = e.message
            self.cart = None
        finally:
            self.is_loading = False
        return self.cart

    def _mutate(self, action: str, endpoint: str, data: dict[str, Any]) -> Any:
        self.error = None
        try:
            result = self.api.post(endpoint, data)
        except ApiError as e:
            self.error = e.message
            logger.debug("Cart %s failed: %s", action, e.message)
            raise
        self.refresh()
        return result

    def add_to_cart(self, item_id: int, quantity: int = 1) -> Any:
        self._require_login("add items to cart")
        return self._mutate("add", "/cart/add", {"itemId": item_id, "quantity": quantity})

    def remove_from_cart(self, item_id: int, remove_all: bool = False) -> Any:
        self._require_login("modify cart")
        return self._mutate(
            "remove", "/cart/remove", {"itemId": item_id, "removeAll": remove_all}
        )

    def update_quantity(self, item_id: int, quantity: int) -> None:
        """
        Drive the server line to `quantity`.

        The API only adds N or removes one unit at a time, so the
        difference is applied as one add or as repeated single removals.
        """
        self._require_login("modify cart")
        if quantity <= 0:
            self.remove_from_cart(item_id, remove_all=True)
            return

        # never reconcile against a mirror that failed to load
        if self.refresh() is None:
            raise ApiError(self.error or "Unable to load cart")
        delta = quantity - self.get_item_quantity(item_id)
        if delta > 0:
            self.add_to_cart(item_id, delta)
        for _ in range(-delta):
            self.remove_from_cart(item_id)

    def get_item_quantity(self, item_id: int) -> int:
        if not self.cart:
            return 0
        for line in self.cart.get("cartItems", []):
            if line["item"]["id"] == item_id:
                return line["quantity"]
        return 0

    @property
    def total(self) -> float:
        return self.cart["total"] if self.cart else 0.0

    @property
    def item_count(self) -> int:
        return self.cart["itemCount"] if self.cart else 0

    def clear_error(self) -> None:
        self.error = None
