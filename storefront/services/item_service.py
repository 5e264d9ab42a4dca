# storefront/services/item_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import NotFoundError
from storefront.models.item import Item
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.item_repo import ItemRepository
from storefront.schemas.item import ItemCreate, ItemFilters, ItemUpdate

logger = logging.getLogger(__name__)


class ItemService:
    """
    Business logic for the catalog.

    Any authenticated user may create, update or delete items
    (enforced at router via require_auth); there is no ownership.
    """

    def __init__(
        self,
        session: Session,
        repo: ItemRepository | None = None,
        cart_repo: CartRepository | None = None,
    ):
        self.session = session
        self.repo = repo or ItemRepository()
        self.cart_repo = cart_repo or CartRepository()

    def find_item(self, item_id: int) -> Item | None:
        return self.repo.get_by_id(self.session, item_id)

    def get_item(self, item_id: int) -> Item:
        item = self.find_item(item_id)
        if not item:
            raise NotFoundError("Item not found")
        return item

    def list_items(self, filters: ItemFilters | None = None) -> list[Item]:
        filters = filters or ItemFilters()
        return self.repo.list(
            self.session,
            category=filters.category.strip() if filters.category else None,
            min_price=filters.min_price,
            max_price=filters.max_price,
        )

    def create_item(self, payload: ItemCreate) -> Item:
        item = Item(
            name=payload.name,
            description=payload.description,
            category=payload.category,
            price=payload.price,
        )
        item = self.repo.create(self.session, item)
        logger.info("Item %s created", item.id)
        return item

    def update_item(self, item_id: int, payload: ItemUpdate) -> Item:
        """
        Partial update: only fields present in the request are applied.
        """
        item = self.get_item(item_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(item, field, value)

        item = self.repo.update(self.session, item)
        logger.info("Item %s updated", item.id)
        return item

    def delete_item(self, item_id: int) -> None:
        """
        Delete an item together with the cart lines that reference it.
        """
        item = self.get_item(item_id)
        self.cart_repo.delete_for_item(self.session, item.id)
        self.repo.delete(self.session, item)
        logger.info("Item %s deleted", item_id)
