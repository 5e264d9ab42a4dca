# storefront/repositories/cart_repo.py
from sqlalchemy import delete, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from storefront.models.cart import CartItem
from storefront.models.item import Item
from storefront.models.user import utcnow

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CartRepository:
    """
    Data access layer for cart lines.

    Every mutation is a single statement keyed on (user_id, item_id), so
    concurrent requests for the same line never lose an update.
    """

    # ---- reads ----

    def list_for_user(self, session: Session, user_id: int) -> list[tuple[CartItem, Item]]:
        """Lines joined with their item, most recently created first."""
        stmt = (
            select(CartItem, Item)
            .join(Item, Item.id == CartItem.item_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        )
        return list(session.exec(stmt).all())

    def get_item(self, session: Session, user_id: int, item_id: int) -> CartItem | None:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    def get_line(
        self, session: Session, user_id: int, item_id: int
    ) -> tuple[CartItem, Item] | None:
        stmt = (
            select(CartItem, Item)
            .join(Item, Item.id == CartItem.item_id)
            .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    # ---- mutations ----

    def add_quantity(
        self,
        session: Session,
        user_id: int,
        item_id: int,
        quantity: int,
        max_quantity: int,
    ) -> tuple[int, bool] | None:
        """
        Insert the line, or add `quantity` to the existing one.

        The merge only happens while the result stays <= max_quantity.

        Returns:
            (line id, created) where created is True if the row was inserted,
            or None if the merged quantity would exceed max_quantity.
        """
        dialect = session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect: {dialect}")

        now = utcnow()
        stmt = insert(CartItem).values(
            user_id=user_id,
            item_id=item_id,
            quantity=quantity,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "item_id"],
            set_={
                "quantity": CartItem.quantity + stmt.excluded.quantity,
                "updated_at": now,
            },
            # written as a subtraction so 32-bit columns never overflow
            where=CartItem.quantity <= max_quantity - stmt.excluded.quantity,
        ).returning(CartItem.id, CartItem.quantity)

        row = session.exec(stmt).first()
        session.commit()
        if row is None:
            return None
        line_id, new_quantity = row
        # An existing line always ends above the requested quantity.
        return line_id, new_quantity == quantity

    def decrement(self, session: Session, user_id: int, item_id: int) -> bool:
        """
        Decrease quantity by one, only while it stays >= 1.

        Returns True if a row was updated.
        """
        stmt = (
            update(CartItem)
            .where(
                CartItem.user_id == user_id,
                CartItem.item_id == item_id,
                CartItem.quantity > 1,
            )
            .values(quantity=CartItem.quantity - 1, updated_at=utcnow())
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def delete_line(
        self,
        session: Session,
        user_id: int,
        item_id: int,
        max_quantity: int | None = None,
    ) -> bool:
        """
        Delete the line. With `max_quantity`, only if quantity <= max_quantity.

        Returns True if a row was deleted.
        """
        stmt = delete(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.item_id == item_id,
        )
        if max_quantity is not None:
            stmt = stmt.where(CartItem.quantity <= max_quantity)
        result = session.exec(stmt)
        session.commit()
        return result.rowcount > 0

    def clear_user_cart(self, session: Session, user_id: int) -> int:
        result = session.exec(delete(CartItem).where(CartItem.user_id == user_id))
        session.commit()
        return result.rowcount

    def delete_for_item(self, session: Session, item_id: int) -> None:
        """
        Drop every line pointing at an item. No commit; the caller
        commits together with the item deletion.
        """
        session.exec(delete(CartItem).where(CartItem.item_id == item_id))
