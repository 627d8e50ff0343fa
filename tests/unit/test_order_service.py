"""Unit tests for OrderApplicationService (fixed-price checkout)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import FakeOrderRepository, FakeProductRepository, make_fixed_product, make_user
from src.ac_common.errors import (
    InsufficientStockError,
    InvalidOrderItemsError,
    OrderNotFoundError,
    OrderNotOwnedError,
    ProductNotAvailableError,
    ProductNotFoundError,
)
from src.ac_order.application.service import CartLine, OrderApplicationService
from src.ac_order.domain.models import Order
from src.ac_payment.application.sessions import PaymentAttempt


@pytest.fixture
def payments():
    svc = MagicMock()
    svc.gateway.is_configured.return_value = True
    svc.start_for_order = AsyncMock(return_value=PaymentAttempt())
    return svc


def _service(products, orders, payments) -> OrderApplicationService:
    return OrderApplicationService(product_repo=products, order_repo=orders, payments=payments)


class TestCreateOrder:
    async def test_creates_order_and_decrements_stock(self, db, payments):
        products = FakeProductRepository(
            make_fixed_product(id="p1", price_cents=2500, stock_quantity=10),
            make_fixed_product(id="p2", price_cents=1000, stock_quantity=3),
        )
        orders = FakeOrderRepository()
        svc = _service(products, orders, payments)

        result = await svc.create_order(
            db, make_user("user-a"), [CartLine("p2", 3), CartLine("p1", 2)],
            shipping_address="12 Main St",
        )

        order = result.order
        assert order.total_amount_cents == 2 * 2500 + 3 * 1000
        assert order.status == "PENDING_PAYMENT"
        assert [i.product_id for i in order.items] == ["p1", "p2"]
        assert products.products["p1"].stock_quantity == 8
        assert products.products["p2"].stock_quantity == 0
        assert order.id in orders.orders
        assert result.warning is None
        db.commit.assert_awaited_once()
        payments.start_for_order.assert_awaited_once()

    async def test_duplicate_lines_merged(self, db, payments):
        products = FakeProductRepository(make_fixed_product(id="p1", stock_quantity=5))
        svc = _service(products, FakeOrderRepository(), payments)

        result = await svc.create_order(
            db, make_user(), [CartLine("p1", 2), CartLine("p1", 3)]
        )

        (item,) = result.order.items
        assert item.quantity == 5
        assert products.products["p1"].stock_quantity == 0

    async def test_insufficient_stock_rolls_back_everything(self, db, payments):
        products = FakeProductRepository(
            make_fixed_product(id="p1", stock_quantity=10),
            make_fixed_product(id="p2", stock_quantity=1),
        )
        orders = FakeOrderRepository()
        svc = _service(products, orders, payments)

        with pytest.raises(InsufficientStockError):
            await svc.create_order(db, make_user(), [CartLine("p1", 1), CartLine("p2", 2)])

        assert orders.orders == {}
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        payments.start_for_order.assert_not_awaited()

    async def test_empty_cart(self, db, payments):
        svc = _service(FakeProductRepository(), FakeOrderRepository(), payments)
        with pytest.raises(InvalidOrderItemsError):
            await svc.create_order(db, make_user(), [])

    async def test_non_positive_quantity(self, db, payments):
        svc = _service(FakeProductRepository(make_fixed_product(id="p1")),
                       FakeOrderRepository(), payments)
        with pytest.raises(InvalidOrderItemsError):
            await svc.create_order(db, make_user(), [CartLine("p1", 0)])

    async def test_unknown_product(self, db, payments):
        svc = _service(FakeProductRepository(), FakeOrderRepository(), payments)
        with pytest.raises(ProductNotFoundError):
            await svc.create_order(db, make_user(), [CartLine("nope", 1)])

    async def test_auction_product_cannot_be_bought(self, db, payments):
        products = FakeProductRepository(make_fixed_product(id="p1", type="AUCTION"))
        svc = _service(products, FakeOrderRepository(), payments)
        with pytest.raises(ProductNotFoundError):
            await svc.create_order(db, make_user(), [CartLine("p1", 1)])

    async def test_inactive_product(self, db, payments):
        products = FakeProductRepository(make_fixed_product(id="p1", status="INACTIVE"))
        svc = _service(products, FakeOrderRepository(), payments)
        with pytest.raises(ProductNotAvailableError):
            await svc.create_order(db, make_user(), [CartLine("p1", 1)])

    async def test_payment_warning_surfaces(self, db, payments):
        payments.start_for_order = AsyncMock(
            return_value=PaymentAttempt(warning="Payment session not created: timeout")
        )
        products = FakeProductRepository(make_fixed_product(id="p1"))
        orders = FakeOrderRepository()
        svc = _service(products, orders, payments)

        result = await svc.create_order(db, make_user(), [CartLine("p1", 1)])

        assert result.order.id in orders.orders
        assert "timeout" in result.warning

    async def test_unconfigured_gateway_warns(self, db, payments):
        payments.gateway.is_configured.return_value = False
        products = FakeProductRepository(make_fixed_product(id="p1"))
        svc = _service(products, FakeOrderRepository(), payments)

        result = await svc.create_order(db, make_user(), [CartLine("p1", 1)])

        assert result.warning == "Payment gateway is not configured"
        payments.start_for_order.assert_not_awaited()


class TestGetOrder:
    async def test_owner_gets_order(self, db, payments):
        orders = FakeOrderRepository()
        orders.orders["ord-1"] = Order(id="ord-1", user_id="user-a", total_amount_cents=100)
        svc = _service(FakeProductRepository(), orders, payments)

        assert (await svc.get_order(db, "ord-1", "user-a")).id == "ord-1"

    async def test_other_user_forbidden(self, db, payments):
        orders = FakeOrderRepository()
        orders.orders["ord-1"] = Order(id="ord-1", user_id="user-a", total_amount_cents=100)
        svc = _service(FakeProductRepository(), orders, payments)

        with pytest.raises(OrderNotOwnedError):
            await svc.get_order(db, "ord-1", "user-b")

    async def test_missing(self, db, payments):
        svc = _service(FakeProductRepository(), FakeOrderRepository(), payments)
        with pytest.raises(OrderNotFoundError):
            await svc.get_order(db, "nope", "user-a")
