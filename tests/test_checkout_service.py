"""Order placement: address -> order -> lines -> cart clear.

Write failures are injected with the repository doubles in tests.fakes;
everything else runs against the in-memory database.
"""

from decimal import Decimal

import pytest
from sqlmodel import select

from storefront.core.exceptions import (
    EmptyCartError,
    OrderPlacementError,
    ValidationError,
)
from storefront.models.cart import CartItem
from storefront.models.order import Address, Order, OrderItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import AddressRepository, OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import CheckoutRequest
from storefront.services.cart_service import CartService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from tests.fakes import (
    FailingAddressDeleteRepository,
    FailingAddressRepository,
    FailingCartRepository,
    FailingOrderLinesRepository,
    FailingOrderRepository,
    RacingOrderRepository,
    StuckOrderRepository,
)


def _checkout(
    address_repo: AddressRepository | None = None,
    order_repo: OrderRepository | None = None,
    cart_repo: CartRepository | None = None,
    compensate: bool = True,
) -> CheckoutService:
    address_repo = address_repo or AddressRepository()
    order_repo = order_repo or OrderRepository()
    return CheckoutService(
        address_repo,
        order_repo,
        cart_repo or CartRepository(),
        OrderService(order_repo, address_repo, ProfileRepository()),
        compensate=compensate,
    )


def _form(**overrides) -> CheckoutRequest:
    data = dict(
        full_name="Asha Rao",
        phone="9876543210",
        address_line1="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        postal_code="560001",
    )
    data.update(overrides)
    return CheckoutRequest(**data)


def _snapshot(session, user_id):
    return CartService(CartRepository(), ProductRepository()).load_cart(
        session, user_id
    )


def _rows(session, model, user_id):
    return list(session.exec(select(model).where(model.user_id == user_id)).all())


def _items(session, order_id):
    return list(
        session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).all()
    )


@pytest.fixture
def filled_cart(shopper, make_product, add_line):
    """Shirt 1500 x 2 + Pants 800 x 1 = 3800."""
    shirt = make_product("Shirt", price="1500")
    pants = make_product("Pants", price="800")
    add_line(shopper, shirt, quantity=2)
    add_line(shopper, pants, quantity=1, color="White", size="L")
    return shirt, pants


class TestSuccessfulCheckout:

    def test_places_one_order_and_empties_cart(self, session, shopper, filled_cart):
        result = _checkout().place_order(
            session, shopper.id, _form(), _snapshot(session, shopper.id)
        )

        assert result.cart_cleared is True
        assert result.replayed is False
        assert result.order.total_amount == Decimal("3800")
        assert result.order.status == "pending"
        assert result.order.address.city == "Bengaluru"

        orders = _rows(session, Order, shopper.id)
        assert len(orders) == 1
        assert orders[0].total_amount == Decimal("3800")

        prices = sorted(item.price for item in _items(session, orders[0].id))
        assert prices == [Decimal("800"), Decimal("1500")]

        assert _rows(session, CartItem, shopper.id) == []
        assert len(_rows(session, Address, shopper.id)) == 1

    def test_result_lines_carry_product_names(self, session, shopper, filled_cart):
        result = _checkout().place_order(
            session, shopper.id, _form(), _snapshot(session, shopper.id)
        )
        names = {item.product_name: item.line_total for item in result.order.items}
        assert names == {"Shirt": Decimal("3000"), "Pants": Decimal("800")}

    def test_later_price_change_does_not_touch_order(
        self, session, shopper, filled_cart
    ):
        shirt, _ = filled_cart
        service = _checkout()
        result = service.place_order(
            session, shopper.id, _form(), _snapshot(session, shopper.id)
        )

        shirt.price = Decimal("2500")
        session.add(shirt)
        session.commit()

        stored = service.order_service.get_user_order(
            session, shopper.id, result.order.id
        )
        assert stored.total_amount == Decimal("3800")
        assert sorted(item.price for item in stored.items) == [
            Decimal("800"),
            Decimal("1500"),
        ]

    def test_total_comes_from_snapshot(self, session, shopper, filled_cart):
        shirt, _ = filled_cart
        lines = _snapshot(session, shopper.id)

        # price moves between cart load and submit
        shirt.price = Decimal("9999")
        session.add(shirt)
        session.commit()

        result = _checkout().place_order(session, shopper.id, _form(), lines)
        assert result.order.total_amount == Decimal("3800")

    def test_other_shoppers_cart_is_untouched(
        self, session, shopper, make_profile, filled_cart, add_line
    ):
        shirt, _ = filled_cart
        other = make_profile(email="other@example.com")
        add_line(other, shirt)

        _checkout().place_order(
            session, shopper.id, _form(), _snapshot(session, shopper.id)
        )
        assert len(_rows(session, CartItem, other.id)) == 1


class TestRejectedBeforeAnyWrite:

    def test_empty_cart(self, session, shopper):
        with pytest.raises(EmptyCartError):
            _checkout().place_order(session, shopper.id, _form(), [])

        assert _rows(session, Address, shopper.id) == []
        assert _rows(session, Order, shopper.id) == []

    def test_line_with_deleted_product(self, session, shopper, filled_cart):
        _, pants = filled_cart
        session.delete(pants)
        session.commit()

        with pytest.raises(ValidationError, match="no longer available"):
            _checkout().place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert _rows(session, Address, shopper.id) == []
        assert len(_rows(session, CartItem, shopper.id)) == 2


class TestAddressFailure:

    def test_nothing_written(self, session, shopper, filled_cart):
        service = _checkout(address_repo=FailingAddressRepository())

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert info.value.stage == "address"
        assert info.value.compensated is True
        assert _rows(session, Address, shopper.id) == []
        assert _rows(session, Order, shopper.id) == []
        assert len(_rows(session, CartItem, shopper.id)) == 2


class TestOrderFailure:

    def test_compensation_removes_address(self, session, shopper, filled_cart):
        service = _checkout(order_repo=FailingOrderRepository())

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert info.value.stage == "order"
        assert info.value.compensated is True
        assert _rows(session, Address, shopper.id) == []
        assert len(_rows(session, CartItem, shopper.id)) == 2

    def test_without_compensation_address_is_orphaned(
        self, session, shopper, filled_cart
    ):
        service = _checkout(order_repo=FailingOrderRepository(), compensate=False)

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        addresses = _rows(session, Address, shopper.id)
        assert len(addresses) == 1
        assert info.value.compensated is False
        assert info.value.address_id == addresses[0].id
        assert _rows(session, Order, shopper.id) == []


class TestOrderLinesFailure:

    def test_without_compensation_order_has_no_lines(
        self, session, shopper, filled_cart
    ):
        service = _checkout(
            order_repo=FailingOrderLinesRepository(), compensate=False
        )

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert info.value.stage == "lines"
        assert info.value.compensated is False

        # the known gap: a header with the full total and zero lines
        orders = _rows(session, Order, shopper.id)
        assert len(orders) == 1
        assert orders[0].total_amount == Decimal("3800")
        assert info.value.order_id == orders[0].id
        assert _items(session, orders[0].id) == []
        assert len(_rows(session, Address, shopper.id)) == 1

        # cart was never cleared
        assert len(_rows(session, CartItem, shopper.id)) == 2

    def test_compensation_removes_order_and_address(
        self, session, shopper, filled_cart
    ):
        service = _checkout(order_repo=FailingOrderLinesRepository())

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert info.value.stage == "lines"
        assert info.value.compensated is True
        assert info.value.order_id is None
        assert _rows(session, Order, shopper.id) == []
        assert _rows(session, Address, shopper.id) == []
        assert len(_rows(session, CartItem, shopper.id)) == 2

    def test_error_body(self, session, shopper, filled_cart):
        service = _checkout(order_repo=FailingOrderLinesRepository())

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        assert info.value.to_dict() == {
            "detail": "Failed to place order at stage 'lines'",
            "code": "ORDER_PLACEMENT_FAILED",
            "stage": "lines",
            "compensated": True,
        }


class TestCompensationFailure:

    def test_order_removed_but_address_stuck(self, session, shopper, filled_cart):
        service = _checkout(
            address_repo=FailingAddressDeleteRepository(),
            order_repo=FailingOrderLinesRepository(),
        )

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        addresses = _rows(session, Address, shopper.id)
        assert _rows(session, Order, shopper.id) == []
        assert len(addresses) == 1

        # only the row that is still there is reported
        assert info.value.to_dict() == {
            "detail": "Failed to place order at stage 'lines'",
            "code": "ORDER_PLACEMENT_FAILED",
            "stage": "lines",
            "compensated": False,
            "address_id": str(addresses[0].id),
        }

    def test_order_delete_fails_keeps_both(self, session, shopper, filled_cart):
        service = _checkout(order_repo=StuckOrderRepository())

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        orders = _rows(session, Order, shopper.id)
        addresses = _rows(session, Address, shopper.id)
        assert len(orders) == 1
        assert len(addresses) == 1
        assert info.value.compensated is False
        assert info.value.order_id == orders[0].id
        assert info.value.address_id == addresses[0].id

    def test_orphan_address_after_order_failure(self, session, shopper, filled_cart):
        service = _checkout(
            address_repo=FailingAddressDeleteRepository(),
            order_repo=FailingOrderRepository(),
        )

        with pytest.raises(OrderPlacementError) as info:
            service.place_order(
                session, shopper.id, _form(), _snapshot(session, shopper.id)
            )

        addresses = _rows(session, Address, shopper.id)
        assert info.value.stage == "order"
        assert info.value.compensated is False
        assert info.value.order_id is None
        assert info.value.address_id == addresses[0].id


class TestCartClearFailure:

    def test_order_stands(self, session, shopper, filled_cart):
        service = _checkout(cart_repo=FailingCartRepository())

        result = service.place_order(
            session, shopper.id, _form(), _snapshot(session, shopper.id)
        )

        assert result.cart_cleared is False
        assert result.order.total_amount == Decimal("3800")
        assert len(_items(session, result.order.id)) == 2
        assert len(_rows(session, CartItem, shopper.id)) == 2


class TestDoubleSubmit:

    def test_without_request_id_places_two_orders(
        self, session, shopper, filled_cart
    ):
        service = _checkout()
        lines = _snapshot(session, shopper.id)

        first = service.place_order(session, shopper.id, _form(), lines)
        second = service.place_order(session, shopper.id, _form(), lines)

        assert first.order.id != second.order.id
        assert len(_rows(session, Order, shopper.id)) == 2
        assert len(_rows(session, Address, shopper.id)) == 2

    def test_same_request_id_replays_first_order(
        self, session, shopper, filled_cart
    ):
        service = _checkout()
        lines = _snapshot(session, shopper.id)

        first = service.place_order(
            session, shopper.id, _form(request_id="chk-1"), lines
        )
        second = service.place_order(
            session, shopper.id, _form(request_id="chk-1"), lines
        )

        assert second.replayed is True
        assert second.cart_cleared is False
        assert second.order.id == first.order.id
        assert second.order.total_amount == Decimal("3800")
        assert len(second.order.items) == 2
        assert len(_rows(session, Order, shopper.id)) == 1
        assert len(_rows(session, Address, shopper.id)) == 1

    def test_retry_after_cart_was_cleared_still_replays(
        self, session, shopper, filled_cart
    ):
        service = _checkout()
        first = service.place_order(
            session, shopper.id, _form(request_id="chk-1"),
            _snapshot(session, shopper.id),
        )

        retry = service.place_order(
            session, shopper.id, _form(request_id="chk-1"),
            _snapshot(session, shopper.id),
        )
        assert retry.replayed is True
        assert retry.order.id == first.order.id

        # a new key with the now empty cart is rejected
        with pytest.raises(EmptyCartError):
            service.place_order(
                session, shopper.id, _form(request_id="chk-2"),
                _snapshot(session, shopper.id),
            )
        assert len(_rows(session, Order, shopper.id)) == 1

    def test_request_ids_are_per_shopper(
        self, session, shopper, make_profile, filled_cart, add_line
    ):
        shirt, _ = filled_cart
        other = make_profile(email="other@example.com")
        add_line(other, shirt)
        service = _checkout()

        service.place_order(
            session, shopper.id, _form(request_id="chk-1"),
            _snapshot(session, shopper.id),
        )
        result = service.place_order(
            session, other.id, _form(request_id="chk-1"),
            _snapshot(session, other.id),
        )

        assert result.replayed is False
        assert result.order.total_amount == Decimal("1500")

    def test_losing_a_race_replays_the_winner(self, session, shopper, filled_cart):
        lines = _snapshot(session, shopper.id)
        winner = _checkout().place_order(
            session, shopper.id, _form(request_id="chk-1"), lines
        )

        # lookup misses, insert hits the unique (user_id, request_id) key
        loser = _checkout(order_repo=RacingOrderRepository(), compensate=False)
        result = loser.place_order(
            session, shopper.id, _form(request_id="chk-1"), lines
        )

        assert result.replayed is True
        assert result.order.id == winner.order.id
        assert len(_rows(session, Order, shopper.id)) == 1
        assert len(_rows(session, Address, shopper.id)) == 1
