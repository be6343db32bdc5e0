from pydantic import EmailStr, Field, StrictInt
from typing import List, Optional
from datetime import datetime

from schemas.common import CamelModel
from schemas.cart import SizeOut, DesignOut


# Shipping address submitted with a checkout
class ShippingDetails(CamelModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    country_id: StrictInt
    province_id: StrictInt
    city_id: StrictInt
    postal_code: Optional[str] = None
    location_url: Optional[str] = None


# Line the client believes is in its cart
class CheckoutItemIn(CamelModel):
    product_id: StrictInt
    quantity: StrictInt


# Input schema for creating an order from a cart
class CheckoutCreate(CamelModel):
    cart_id: StrictInt
    shipping_details: ShippingDetails
    items: Optional[List[CheckoutItemIn]] = None
    payment_method: Optional[str] = None


# Output schema for an individual order line item
class OrderItemOut(CamelModel):
    product_id: int
    name: str
    image: Optional[str] = None
    price: float
    quantity: int
    size: Optional[SizeOut] = None
    design: Optional[DesignOut] = None
    line_total: float


# Output schema representing the full order details
class OrderOut(CamelModel):
    id: int
    customer_id: int
    cart_id: int
    shipping_details: ShippingDetails
    items: List[OrderItemOut]
    subtotal: float
    shipping: float
    total_amount: float
    items_count: int
    status: str
    payment_status: str
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Schema for paginated order lists
class OrdersPage(CamelModel):
    checkouts: List[OrderOut]
    total: int
    page: int
    total_pages: int


# Schema for updating order status
class OrderStatusPatch(CamelModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None
