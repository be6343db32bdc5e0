# backend/utils/checkout.py
import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.cart import Cart
from models.geo import Country, Province, City
from models.order import Order, OrderItem, OrderStatus, PaymentStatus, TERMINAL_STATUSES
from models.product import Product
from models.users import User
from utils.errors import (
    Unauthenticated, Forbidden, InvalidInput, CartNotFound, CheckoutValidationError,
    OrderNotFound, InvalidStatusTransition,
)
from utils.pricing import totals
from utils.stock_guard import reserve_stock

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return (user.role or "").lower() == "admin"


def _ensure_customer(customer: Optional[User]):
    if not customer or not customer.id:
        raise Unauthenticated()


def _validate_geography(db: Session, shipping):
    country = db.get(Country, shipping.country_id)
    if not country:
        raise CheckoutValidationError("Country not found", details=f"countryId={shipping.country_id}")
    province = db.get(Province, shipping.province_id)
    if not province or province.country_id != country.id:
        raise CheckoutValidationError("Province not found in the selected country")
    city = db.get(City, shipping.city_id)
    if not city or city.province_id != province.id or not city.is_active:
        raise CheckoutValidationError("City not found or is inactive")


def _candidate_lines(cart: Cart, items) -> list:
    # Without a client snapshot the order copies the live cart as-is
    if items is None:
        return [(it.product_id, it.quantity) for it in cart.items]
    return [(it.product_id, it.quantity) for it in items]


def _copy_line(it) -> OrderItem:
    return OrderItem(
        product_id=it.product_id,
        name=it.name,
        image_url=it.image_url,
        unit_price=it.unit_price,
        quantity=it.quantity,
        size_id=it.size_id,
        size_label=it.size_label,
        size_surcharge=it.size_surcharge,
        design_id=it.design_id,
        design_title=it.design_title,
        design_surcharge=it.design_surcharge,
        design_image_url=it.design_image_url,
    )


def materialize(
    db: Session,
    customer: Optional[User],
    cart_id,
    shipping,
    items: Optional[Sequence] = None,
    payment_method: Optional[str] = None,
) -> Order:
    """Turn the customer's cart into a pending, unpaid order.

    The cart is re-validated against the candidate lines and current stock
    before anything is written. Stock is then decremented with conditional
    updates and the cart deleted in the same transaction as the order insert,
    so either all of it lands or none of it does.
    """
    _ensure_customer(customer)
    if not isinstance(cart_id, int) or isinstance(cart_id, bool) or cart_id <= 0:
        raise InvalidInput("Invalid cart ID provided")

    cart = db.get(Cart, cart_id)
    if not cart:
        raise CartNotFound()
    if not cart.items:
        raise CheckoutValidationError("Cannot create checkout with an empty cart")
    if cart.customer_id != customer.id:
        raise Forbidden("Forbidden: You can only checkout your own cart")

    if not db.get(User, customer.id):
        raise CheckoutValidationError(f"User not found for ID: {customer.id}")

    _validate_geography(db, shipping)

    cart_totals = totals(cart.items)
    if cart_totals.items_count == 0:
        raise CheckoutValidationError("No valid items in cart")

    candidate = _candidate_lines(cart, items)
    if not candidate:
        raise CheckoutValidationError("Checkout items array cannot be empty")
    if len(candidate) != len(cart.items):
        raise CheckoutValidationError("Checkout items do not match cart items")
    for (product_id, quantity), cart_item in zip(candidate, cart.items):
        if product_id != cart_item.product_id or quantity != cart_item.quantity:
            raise CheckoutValidationError("Checkout items do not match cart items")

    for it in cart.items:
        product = db.get(Product, it.product_id)
        if not product:
            raise CheckoutValidationError(f"Product not found for ID: {it.product_id}")
        if product.stock < it.quantity:
            raise CheckoutValidationError(f"Insufficient stock for product: {it.name or it.product_id}")

    try:
        for it in cart.items:
            if not reserve_stock(db, it.product_id, it.quantity):
                raise CheckoutValidationError(
                    f"Insufficient stock for product: {it.name or it.product_id}",
                    details="Stock changed while the order was being placed",
                )

        order = Order(
            customer_id=customer.id,
            cart_id=cart.id,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            payment_method=payment_method or None,
            subtotal=cart_totals.subtotal,
            shipping=cart_totals.shipping,
            total_amount=cart_totals.total,
            items_count=cart_totals.items_count,
            shipping_full_name=shipping.full_name.strip(),
            shipping_email=shipping.email.strip(),
            shipping_phone=shipping.phone.strip(),
            shipping_address=shipping.address.strip(),
            shipping_country_id=shipping.country_id,
            shipping_province_id=shipping.province_id,
            shipping_city_id=shipping.city_id,
            shipping_postal_code=(shipping.postal_code or "").strip() or None,
            shipping_location_url=(shipping.location_url or "").strip() or None,
            items=[_copy_line(it) for it in cart.items],
        )
        db.add(order)
        db.delete(cart)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info("Order %s created from cart %s (total %s)", order.id, cart_id, order.total_amount)
    return order


def get_order(db: Session, user: User, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if not order or (order.customer_id != user.id and not is_admin(user)):
        raise OrderNotFound()
    return order


def _parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidInput(f"Invalid order status: {value}")


def list_orders(
    db: Session,
    user: User,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[list, int]:
    q = db.query(Order)
    if not is_admin(user):
        q = q.filter(Order.customer_id == user.id)

    if status and status != "all":
        q = q.filter(Order.status == _parse_status(status))

    if search:
        like = f"%{search}%"
        conditions = [Order.shipping_full_name.ilike(like), Order.shipping_email.ilike(like)]
        if search.isdigit():
            conditions.append(Order.id == int(search))
        q = q.filter(or_(*conditions))

    total = q.count()
    rows = q.order_by(Order.created_at.desc(), Order.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return rows, total


def update_status(db: Session, order_id: int, status: Optional[str] = None, payment_status: Optional[str] = None) -> Tuple[Order, dict]:
    """Staff-driven status change. Returns the order and the previous values."""
    if status is None and payment_status is None:
        raise InvalidInput("No valid fields to update provided")

    new_status = _parse_status(status) if status is not None else None
    new_payment = None
    if payment_status is not None:
        try:
            new_payment = PaymentStatus(payment_status)
        except ValueError:
            raise InvalidInput(f"Invalid payment status: {payment_status}")

    order = db.get(Order, order_id)
    if not order:
        raise OrderNotFound()

    previous = {"status": order.status.value, "payment_status": order.payment_status.value}

    if new_status is not None and new_status != order.status:
        if order.status in TERMINAL_STATUSES:
            raise InvalidStatusTransition(f"Cannot change status from {order.status.value}")
        order.status = new_status
    if new_payment is not None:
        order.payment_status = new_payment

    db.commit()
    db.refresh(order)
    return order, previous
