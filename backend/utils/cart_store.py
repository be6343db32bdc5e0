# backend/utils/cart_store.py
"""One cart per customer, mutated under the stock guard.

Every function takes the request's customer explicitly. Validation happens
before anything is added to the session, so a failed call leaves no trace.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.cart import Cart, CartItem
from models.product import Product, ProductSize, ProductDesign
from models.users import User
from utils.errors import Unauthenticated, InvalidInput, CartNotFound, ItemNotFound, CartFull
from utils.stock_guard import check_availability, validate_product_id, MAX_ITEM_QUANTITY

logger = logging.getLogger(__name__)

MAX_CART_ITEMS = 50


def _ensure_customer(customer: Optional[User]):
    # Validate user authentication
    if not customer or not customer.id:
        raise Unauthenticated()


def find_cart(db: Session, customer_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.customer_id == customer_id).first()


def _find_item(cart: Cart, product_id: int) -> Optional[CartItem]:
    return next((it for it in cart.items if it.product_id == product_id), None)


def _resolve_options(db: Session, product: Product, size_id=None, design_id=None):
    size = design = None
    if size_id is not None:
        size = db.query(ProductSize).filter(
            ProductSize.id == size_id, ProductSize.product_id == product.id
        ).first()
        if not size:
            raise InvalidInput("Invalid size for this product")
    if design_id is not None:
        design = db.query(ProductDesign).filter(
            ProductDesign.id == design_id, ProductDesign.product_id == product.id
        ).first()
        if not design:
            raise InvalidInput("Invalid design for this product")
    return size, design


def _apply_options(item: CartItem, size: Optional[ProductSize], design: Optional[ProductDesign]):
    if size:
        item.size_id = size.id
        item.size_label = size.label
        item.size_surcharge = size.surcharge
    if design:
        item.design_id = design.id
        item.design_title = design.title
        item.design_surcharge = design.surcharge
        item.design_image_url = design.image_url


def _copy_product(item: CartItem, product: Product):
    # Denormalised display fields and the price snapshot
    item.name = product.name
    item.image_url = product.image_url or ""
    item.unit_price = product.price


def _merge_line(cart: Cart, product: Product, quantity: int, size, design) -> CartItem:
    item = _find_item(cart, product.id)
    if not item and len(cart.items) >= MAX_CART_ITEMS:
        raise CartFull(f"Cart cannot exceed {MAX_CART_ITEMS} unique items")

    if item:
        # Saturating merge: the line never goes above the per-item cap
        item.quantity = min(item.quantity + quantity, MAX_ITEM_QUANTITY)
    else:
        item = CartItem(product_id=product.id, quantity=quantity)
        _copy_product(item, product)
        cart.items.append(item)
    _apply_options(item, size, design)
    return item


def get_cart(db: Session, customer: Optional[User]) -> Optional[Cart]:
    _ensure_customer(customer)
    return find_cart(db, customer.id)


def add_item(db: Session, customer: Optional[User], product_id, quantity, size_id=None, design_id=None) -> Cart:
    _ensure_customer(customer)
    product = check_availability(db, product_id, quantity)
    size, design = _resolve_options(db, product, size_id, design_id)

    cart = find_cart(db, customer.id)
    created = cart is None
    if created:
        cart = Cart(customer_id=customer.id)
        db.add(cart)
    item = _merge_line(cart, product, quantity, size, design)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not created:
            raise
        # A concurrent first add created the cart; merge into that one instead
        cart = find_cart(db, customer.id)
        if cart is None:
            raise
        logger.info("Cart for customer %s created concurrently, merging", customer.id)
        item = _merge_line(cart, product, quantity, size, design)
        db.commit()
    db.refresh(cart)
    logger.debug("Cart %s: product %s now x%s", cart.id, product.id, item.quantity)
    return cart


def update_item(db: Session, customer: Optional[User], product_id, quantity, size_id=None, design_id=None) -> Cart:
    _ensure_customer(customer)
    product = check_availability(db, product_id, quantity)
    size, design = _resolve_options(db, product, size_id, design_id)

    cart = find_cart(db, customer.id)
    if not cart:
        raise CartNotFound()
    item = _find_item(cart, product_id)
    if not item:
        raise ItemNotFound()

    item.quantity = quantity
    _copy_product(item, product)
    _apply_options(item, size, design)

    db.commit()
    db.refresh(cart)
    return cart


def remove_item(db: Session, customer: Optional[User], product_id) -> Optional[Cart]:
    """Drop a line; the whole cart goes with its last line and None is returned."""
    _ensure_customer(customer)
    validate_product_id(product_id)

    cart = find_cart(db, customer.id)
    if not cart:
        raise CartNotFound()
    item = _find_item(cart, product_id)
    if not item:
        raise ItemNotFound()

    cart.items.remove(item)
    if not cart.items:
        db.delete(cart)
        db.commit()
        logger.debug("Cart of customer %s emptied and deleted", customer.id)
        return None

    db.commit()
    db.refresh(cart)
    return cart


def clear_cart(db: Session, customer: Optional[User]) -> bool:
    _ensure_customer(customer)
    cart = find_cart(db, customer.id)
    if not cart:
        return False
    db.delete(cart)
    db.commit()
    return True
