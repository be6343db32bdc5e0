import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from database import Base


# Fulfilment states, advanced manually by staff
class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRM = "confirm"
    PROCESSING = "processing"
    PICKUP = "pickup"
    ON_THE_WAY = "on the way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class PaymentStatus(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # Source cart id; the cart row is removed once the order exists
    cart_id = Column(Integer, index=True, nullable=False)

    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    payment_method = Column(String, nullable=True)

    # Amounts in cents; total_amount is always subtotal + shipping
    subtotal = Column(Integer, nullable=False)
    shipping = Column(Integer, nullable=False)
    total_amount = Column(Integer, nullable=False)
    items_count = Column(Integer, nullable=False)

    # Shipping details
    shipping_full_name = Column(String, nullable=False)
    shipping_email = Column(String, nullable=False)
    shipping_phone = Column(String, nullable=False)
    shipping_address = Column(String, nullable=False)
    shipping_country_id = Column(Integer, ForeignKey("countries.id"), nullable=False)
    shipping_province_id = Column(Integer, ForeignKey("provinces.id"), nullable=False)
    shipping_city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    shipping_postal_code = Column(String, nullable=True)
    shipping_location_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


# Line copied from the cart at checkout time, never edited afterwards
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    unit_price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)

    size_id = Column(Integer, nullable=True)
    size_label = Column(String, nullable=True)
    size_surcharge = Column(Integer, nullable=True)

    design_id = Column(Integer, nullable=True)
    design_title = Column(String, nullable=True)
    design_surcharge = Column(Integer, nullable=True)
    design_image_url = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")
