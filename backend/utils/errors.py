"""Domain errors raised by the cart and checkout code.

Each error carries the HTTP status it maps to; ``main.py`` turns them into the
``{error, message, details}`` envelope. Validation errors are always raised
before anything is written.
"""
from typing import Optional


class StoreError(Exception):
    status_code = 400
    message = "Request failed"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class Unauthenticated(StoreError):
    status_code = 401
    message = "Authentication required"


class Forbidden(StoreError):
    status_code = 403
    message = "Forbidden"


class InvalidInput(StoreError):
    status_code = 400
    message = "Invalid input"


class ProductNotFound(StoreError):
    status_code = 404
    message = "Product not found"


class InsufficientStock(StoreError):
    status_code = 400
    message = "Insufficient stock"


class CartNotFound(StoreError):
    status_code = 404
    message = "Cart not found"


class ItemNotFound(StoreError):
    status_code = 404
    message = "Item not found in cart"


class CartFull(StoreError):
    status_code = 400
    message = "Cart cannot exceed 50 unique items"


class CheckoutValidationError(StoreError):
    status_code = 400
    message = "Checkout validation failed"


class OrderNotFound(StoreError):
    status_code = 404
    message = "Order not found"


class InvalidStatusTransition(StoreError):
    status_code = 400
    message = "Order status cannot be changed"
