"""
Unit tests for the cart engine (CartService) against a real SQLite store.

They cover the line state machine:

    [absent] --add(N)--> [N] --add(k)--> [N+k]
    [N>1] --remove--> [N-1],  [1] --remove--> [absent]
    [N] --remove(all)--> [absent]

and the pricing rules for total / itemCount.
"""
import threading
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.core.errors import NotFoundError, ValidationError
from storefront.database import create_db_and_tables, make_engine
from storefront.models.cart import CartItem
from storefront.models.item import Item
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.item_repo import ItemRepository
from storefront.repositories.user_repo import UserRepository
from storefront.services import cart_service
from storefront.services.cart_service import CartService, summarize


@pytest.fixture
def service(session: Session) -> CartService:
    return CartService(session)


def lines_for(session: Session, user_id: int, item_id: int) -> list[CartItem]:
    stmt = select(CartItem).where(CartItem.user_id == user_id, CartItem.item_id == item_id)
    return list(session.exec(stmt).all())


class TestAddItem:
    def test_first_add_creates_line(self, service, user, make_item):
        item = make_item()

        line, created = service.add_item(user.id, item.id, 3)

        assert created is True
        assert line.quantity == 3
        assert line.item_id == item.id
        assert line.user_id == user.id
        assert line.item.name == "Mug"
        assert line.item.price == 19.99

    def test_repeated_adds_merge_into_one_line(self, service, session, user, make_item):
        """Quantity equals the sum of every add; never a duplicate line."""
        item = make_item()

        service.add_item(user.id, item.id, 1)
        service.add_item(user.id, item.id, 4)
        line, created = service.add_item(user.id, item.id, 2)

        assert created is False
        assert line.quantity == 7
        assert len(lines_for(session, user.id, item.id)) == 1

        cart = service.get_cart(user.id)
        assert len(cart.cart_items) == 1
        assert cart.cart_items[0].quantity == 7

    def test_scenario_a_two_single_adds(self, service, user, make_item):
        """$19.99 added twice with quantity 1 -> quantity 2, total $39.98."""
        item = make_item(price="19.99")

        service.add_item(user.id, item.id)
        line, _ = service.add_item(user.id, item.id)

        assert line.quantity == 2
        assert service.get_cart(user.id).total == 39.98

    def test_unknown_item_raises_not_found(self, service, user):
        with pytest.raises(NotFoundError) as exc:
            service.add_item(user.id, 9999, 1)
        assert exc.value.message == "Item not found"
        assert service.get_cart(user.id).cart_items == []

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, service, user, make_item, quantity):
        item = make_item()
        with pytest.raises(ValidationError):
            service.add_item(user.id, item.id, quantity)

    def test_carts_are_isolated_per_user(self, service, session, user, make_item):
        other = UserRepository().create(
            session, User(name="Carol", email="carol@example.com", password_hash="x")
        )
        item = make_item()

        service.add_item(user.id, item.id, 2)
        service.add_item(other.id, item.id, 5)

        assert service.get_cart(user.id).item_count == 2
        assert service.get_cart(other.id).item_count == 5


class TestRemoveItem:
    def test_decrements_by_exactly_one(self, service, user, make_item):
        item = make_item()
        service.add_item(user.id, item.id, 5)

        line = service.remove_item(user.id, item.id)

        assert line is not None
        assert line.quantity == 4

    def test_quantity_one_removes_line(self, service, session, user, make_item):
        """Scenario C: add 1, remove once -> empty cart."""
        item = make_item()
        service.add_item(user.id, item.id, 1)

        assert service.remove_item(user.id, item.id) is None
        assert lines_for(session, user.id, item.id) == []

        cart = service.get_cart(user.id)
        assert cart.cart_items == []
        assert cart.total == 0.0
        assert cart.item_count == 0

    @pytest.mark.parametrize("quantity", [1, 2, 10])
    def test_remove_all_drops_line_regardless_of_quantity(
        self, service, session, user, make_item, quantity
    ):
        item = make_item()
        service.add_item(user.id, item.id, quantity)

        assert service.remove_item(user.id, item.id, remove_all=True) is None
        assert lines_for(session, user.id, item.id) == []

    def test_never_added_raises_not_found(self, service, user, make_item):
        """Scenario D."""
        item = make_item()
        with pytest.raises(NotFoundError) as exc:
            service.remove_item(user.id, item.id)
        assert exc.value.message == "Item not found in cart"

    def test_remove_all_on_missing_line_raises_not_found(self, service, user, make_item):
        item = make_item()
        with pytest.raises(NotFoundError):
            service.remove_item(user.id, item.id, remove_all=True)

    def test_line_can_be_recreated_after_removal(self, service, user, make_item):
        item = make_item()
        service.add_item(user.id, item.id, 2)
        service.remove_item(user.id, item.id, remove_all=True)

        line, created = service.add_item(user.id, item.id, 1)

        assert created is True
        assert line.quantity == 1

    def test_full_walk_down_to_absent(self, service, user, make_item):
        item = make_item()
        service.add_item(user.id, item.id, 3)

        assert service.remove_item(user.id, item.id).quantity == 2
        assert service.remove_item(user.id, item.id).quantity == 1
        assert service.remove_item(user.id, item.id) is None
        with pytest.raises(NotFoundError):
            service.remove_item(user.id, item.id)


class TestGetCart:
    def test_empty_cart(self, service, user):
        cart = service.get_cart(user.id)
        assert cart.cart_items == []
        assert cart.total == 0.0
        assert cart.item_count == 0

    def test_scenario_b_totals(self, service, user, make_item):
        """A $5.00 x3 + B $10.00 x1 -> total $25.00, itemCount 4."""
        item_a = make_item(name="A", price="5.00")
        item_b = make_item(name="B", price="10.00")

        service.add_item(user.id, item_a.id, 3)
        service.add_item(user.id, item_b.id, 1)

        cart = service.get_cart(user.id)
        assert cart.total == 25.00
        assert cart.item_count == 4

    def test_most_recently_created_line_first(self, service, user, make_item):
        first = make_item(name="First")
        second = make_item(name="Second")

        service.add_item(user.id, first.id)
        service.add_item(user.id, second.id)
        # merging into the older line does not move it
        service.add_item(user.id, first.id)

        names = [line.item.name for line in service.get_cart(user.id).cart_items]
        assert names == ["Second", "First"]

    def test_repeated_reads_are_identical(self, service, user, make_item):
        item = make_item()
        service.add_item(user.id, item.id, 2)

        assert service.get_cart(user.id) == service.get_cart(user.id)

    def test_total_reflects_current_item_price(self, service, session, user, make_item):
        item = make_item(price="2.50")
        service.add_item(user.id, item.id, 2)

        item.price = Decimal("3.10")
        session.add(item)
        session.commit()

        assert service.get_cart(user.id).total == 6.20

    def test_clear_cart(self, service, user, make_item):
        service.add_item(user.id, make_item(name="A").id, 2)
        service.add_item(user.id, make_item(name="B").id, 1)

        cleared = service.clear_cart(user.id)

        assert cleared.item_count == 0
        assert service.get_cart(user.id).cart_items == []


class TestSummarize:
    def test_rounds_half_up_to_cents(self):
        lines = [
            (SimpleNamespace(quantity=3), SimpleNamespace(price=Decimal("0.335"))),
        ]
        total, count = summarize(lines)
        assert total == Decimal("1.01")
        assert count == 3

    def test_sums_price_times_quantity(self):
        lines = [
            (SimpleNamespace(quantity=2), SimpleNamespace(price=Decimal("19.99"))),
            (SimpleNamespace(quantity=1), SimpleNamespace(price=Decimal("0.02"))),
        ]
        total, count = summarize(lines)
        assert total == Decimal("40.00")
        assert count == 3


class TestQuantityLimits:
    @pytest.fixture
    def small_cap(self, monkeypatch):
        monkeypatch.setattr(cart_service, "MAX_QUANTITY", 5)

    def test_merge_past_cap_rejected_and_line_unchanged(
        self, service, session, user, make_item, small_cap
    ):
        item = make_item()
        service.add_item(user.id, item.id, 3)

        with pytest.raises(ValidationError):
            service.add_item(user.id, item.id, 3)

        assert lines_for(session, user.id, item.id)[0].quantity == 3

    def test_merge_up_to_cap_allowed(self, service, user, make_item, small_cap):
        item = make_item()
        service.add_item(user.id, item.id, 3)

        line, created = service.add_item(user.id, item.id, 2)

        assert created is False
        assert line.quantity == 5

    def test_single_add_past_cap_rejected(self, service, user, make_item, small_cap):
        item = make_item()
        with pytest.raises(ValidationError):
            service.add_item(user.id, item.id, 6)

    def test_out_of_range_item_id_is_not_found(self, service, user):
        with pytest.raises(NotFoundError):
            service.add_item(user.id, 10**20, 1)


class TestLineUniqueness:
    def test_second_row_for_same_user_and_item_rejected(self, session, user, make_item):
        item = make_item()
        session.add(CartItem(user_id=user.id, item_id=item.id, quantity=1))
        session.commit()

        session.add(CartItem(user_id=user.id, item_id=item.id, quantity=2))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_unsupported_dialect_refused(self):
        bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
        fake_session = SimpleNamespace(get_bind=lambda: bind)

        with pytest.raises(RuntimeError):
            CartRepository().add_quantity(fake_session, 1, 1, 1, max_quantity=10)


class TestConcurrentAdds:
    """
    Parallel adds to the same line from separate sessions accumulate
    (N + workers * k) and never create a second row.
    """

    WORKERS = 8
    ADDS_PER_WORKER = 5

    @pytest.fixture
    def file_engine(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'cart.db'}")
        create_db_and_tables(engine)
        yield engine
        engine.dispose()

    def test_parallel_adds_accumulate(self, file_engine):
        with Session(file_engine) as session:
            user = UserRepository().create(
                session, User(name="Gina", email="gina@example.com", password_hash="x")
            )
            item = ItemRepository().create(
                session, Item(name="Mug", category="Kitchen", price=Decimal("2.00"))
            )
            user_id, item_id = user.id, item.id
            CartService(session).add_item(user_id, item_id, 3)

        errors = []
        start = threading.Barrier(self.WORKERS)

        def worker():
            try:
                with Session(file_engine) as session:
                    start.wait()
                    service = CartService(session)
                    for _ in range(self.ADDS_PER_WORKER):
                        service.add_item(user_id, item_id, 2)
            except Exception as e:  # collected and asserted below
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(self.WORKERS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with Session(file_engine) as session:
            rows = lines_for(session, user_id, item_id)
            assert len(rows) == 1
            assert rows[0].quantity == 3 + self.WORKERS * self.ADDS_PER_WORKER * 2
