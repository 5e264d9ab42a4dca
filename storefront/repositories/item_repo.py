# storefront/repositories/item_repo.py
from decimal import Decimal

from sqlmodel import Session, select

from storefront.models.item import Item


class ItemRepository:
    """
    Data access layer for the catalog.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, item_id: int) -> Item | None:
        return session.get(Item, item_id)

    def list(
        self,
        session: Session,
        category: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[Item]:
        """
        Newest first. `category` is a case-insensitive substring match,
        price bounds are inclusive.
        """
        stmt = select(Item)
        if category:
            stmt = stmt.where(Item.category.icontains(category, autoescape=True))
        if min_price is not None:
            stmt = stmt.where(Item.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Item.price <= max_price)
        stmt = stmt.order_by(Item.created_at.desc(), Item.id.desc())
        return list(session.exec(stmt).all())

    def create(self, session: Session, item: Item) -> Item:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: Item) -> Item:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: Item) -> None:
        session.delete(item)
        session.commit()
