# backend/utils/stock_guard.py
from sqlalchemy.orm import Session

from models.product import Product
from utils.errors import InvalidInput, ProductNotFound, InsufficientStock

MAX_ITEM_QUANTITY = 100


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_product_id(product_id):
    if not _is_int(product_id) or product_id <= 0:
        raise InvalidInput("Invalid product ID")


def validate_quantity(quantity):
    if not _is_int(quantity) or quantity < 1 or quantity > MAX_ITEM_QUANTITY:
        raise InvalidInput(f"Quantity must be a number between 1 and {MAX_ITEM_QUANTITY}")


def check_availability(db: Session, product_id, requested_quantity) -> Product:
    """Point-in-time stock check; nothing is reserved."""
    validate_product_id(product_id)
    validate_quantity(requested_quantity)

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ProductNotFound()
    if product.stock < requested_quantity:
        raise InsufficientStock()
    return product


def reserve_stock(db: Session, product_id: int, quantity: int) -> bool:
    # Single conditional UPDATE so two checkouts cannot both take the last units
    updated = (
        db.query(Product)
        .filter(Product.id == product_id, Product.stock >= quantity)
        .update({Product.stock: Product.stock - quantity}, synchronize_session=False)
    )
    return updated == 1
