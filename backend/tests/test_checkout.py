from types import SimpleNamespace

import pytest

from models.cart import Cart
from models.order import Order, OrderStatus, PaymentStatus
from models.product import Product
from utils import cart_store
from utils.checkout import materialize, update_status, list_orders, get_order
from utils.errors import (
    CartNotFound, CheckoutValidationError, Forbidden, InvalidInput,
    InvalidStatusTransition, OrderNotFound,
)


def _line(product_id, quantity):
    return SimpleNamespace(product_id=product_id, quantity=quantity)


@pytest.fixture
def filled_cart(db, customer, make_product):
    a = make_product(price=1000, stock=5, name="Mug")
    b = make_product(price=60000, stock=3, name="Lamp")
    cart_store.add_item(db, customer, a.id, 2)
    cart = cart_store.add_item(db, customer, b.id, 1)
    return SimpleNamespace(id=cart.id, a=a, b=b)


def test_materialize_copies_cart_and_computes_totals(db, customer, shipping, filled_cart):
    order = materialize(db, customer, filled_cart.id, shipping, payment_method="cash on delivery")

    assert order.status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.UNPAID
    assert order.payment_method == "cash on delivery"
    assert [(it.product_id, it.quantity, it.unit_price) for it in order.items] == [
        (filled_cart.a.id, 2, 1000),
        (filled_cart.b.id, 1, 60000),
    ]
    assert (order.subtotal, order.shipping, order.total_amount, order.items_count) == (62000, 5000, 67000, 3)
    assert order.shipping_city_id == shipping.city_id


def test_materialize_decrements_stock_and_deletes_cart(db, customer, shipping, filled_cart):
    materialize(db, customer, filled_cart.id, shipping)

    db.expire_all()
    assert db.get(Product, filled_cart.a.id).stock == 3
    assert db.get(Product, filled_cart.b.id).stock == 2
    assert db.get(Cart, filled_cart.id) is None
    assert cart_store.get_cart(db, customer) is None


def test_free_shipping_order(db, customer, shipping, make_product):
    product = make_product(price=60000, stock=5)
    cart = cart_store.add_item(db, customer, product.id, 2)

    order = materialize(db, customer, cart.id, shipping)

    assert (order.subtotal, order.shipping, order.total_amount) == (120000, 0, 120000)


def test_surcharges_are_carried_into_order(db, customer, shipping, make_product):
    product = make_product(price=1000, sizes=[("regular", 250)], designs=[("gold", 100)])
    cart = cart_store.add_item(db, customer, product.id, 2, size_id=product.sizes[0].id, design_id=product.designs[0].id)

    order = materialize(db, customer, cart.id, shipping)

    [item] = order.items
    assert (item.size_label, item.size_surcharge, item.design_title) == ("regular", 250, "gold")
    assert order.subtotal == 2700


@pytest.mark.parametrize("snapshot", [
    "reordered",
    "missing",
    "extra",
    "quantity",
    "product",
    "empty",
])
def test_snapshot_drift_is_rejected(db, customer, shipping, filled_cart, make_product, snapshot):
    a, b = filled_cart.a.id, filled_cart.b.id
    candidates = {
        "reordered": [_line(b, 1), _line(a, 2)],
        "missing": [_line(a, 2)],
        "extra": [_line(a, 2), _line(b, 1), _line(make_product().id, 1)],
        "quantity": [_line(a, 3), _line(b, 1)],
        "product": [_line(a, 2), _line(make_product().id, 1)],
        "empty": [],
    }

    with pytest.raises(CheckoutValidationError):
        materialize(db, customer, filled_cart.id, shipping, items=candidates[snapshot])

    db.expire_all()
    assert db.query(Order).count() == 0
    assert db.get(Cart, filled_cart.id) is not None
    assert db.get(Product, a).stock == 5


def test_exact_snapshot_is_accepted(db, customer, shipping, filled_cart):
    a, b = filled_cart.a.id, filled_cart.b.id
    order = materialize(db, customer, filled_cart.id, shipping, items=[_line(a, 2), _line(b, 1)])
    assert len(order.items) == 2


def test_stock_is_rechecked_at_checkout(db, customer, shipping, filled_cart):
    lamp = db.get(Product, filled_cart.b.id)
    lamp.stock = 0
    db.commit()

    with pytest.raises(CheckoutValidationError, match="Insufficient stock for product: Lamp"):
        materialize(db, customer, filled_cart.id, shipping)

    db.expire_all()
    assert db.query(Order).count() == 0
    # Nothing was taken from the other line either
    assert db.get(Product, filled_cart.a.id).stock == 5


def test_unknown_cart(db, customer, shipping):
    with pytest.raises(CartNotFound):
        materialize(db, customer, 4242, shipping)
    with pytest.raises(InvalidInput):
        materialize(db, customer, "abc", shipping)


def test_cart_of_another_customer_is_forbidden(db, other_customer, shipping, filled_cart):
    with pytest.raises(Forbidden):
        materialize(db, other_customer, filled_cart.id, shipping)


def test_inactive_city_is_rejected(db, customer, shipping, geo, filled_cart):
    shipping.city_id = geo.inactive_city.id
    with pytest.raises(CheckoutValidationError, match="City"):
        materialize(db, customer, filled_cart.id, shipping)


def test_mismatched_province_is_rejected(db, customer, shipping, filled_cart):
    shipping.province_id = 9999
    with pytest.raises(CheckoutValidationError):
        materialize(db, customer, filled_cart.id, shipping)


def test_status_updates(db, customer, shipping, filled_cart):
    order = materialize(db, customer, filled_cart.id, shipping)

    order, previous = update_status(db, order.id, status="confirm", payment_status="paid")
    assert previous == {"status": "pending", "payment_status": "unpaid"}
    assert (order.status, order.payment_status) == (OrderStatus.CONFIRM, PaymentStatus.PAID)

    order, _ = update_status(db, order.id, status="delivered")
    with pytest.raises(InvalidStatusTransition):
        update_status(db, order.id, status="cancelled")


def test_status_update_validation(db, customer, shipping, filled_cart):
    order = materialize(db, customer, filled_cart.id, shipping)

    with pytest.raises(InvalidInput):
        update_status(db, order.id)
    with pytest.raises(InvalidInput):
        update_status(db, order.id, status="shipped")
    with pytest.raises(InvalidInput):
        update_status(db, order.id, payment_status="refunded")
    with pytest.raises(OrderNotFound):
        update_status(db, 999, status="confirm")


def test_orders_are_visible_to_owner_and_admin_only(db, customer, other_customer, admin, shipping, filled_cart):
    order = materialize(db, customer, filled_cart.id, shipping)

    assert get_order(db, customer, order.id).id == order.id
    assert get_order(db, admin, order.id).id == order.id
    with pytest.raises(OrderNotFound):
        get_order(db, other_customer, order.id)

    assert list_orders(db, other_customer)[1] == 0
    rows, total = list_orders(db, admin, search="rahim")
    assert total == 1 and rows[0].id == order.id
    assert list_orders(db, admin, status="delivered")[1] == 0
