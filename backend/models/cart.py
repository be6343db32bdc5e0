# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Represents the customer's shopping cart, at most one per customer
class Cart(Base):
    __tablename__ = "carts" # Table name

    id = Column(Integer, primary_key=True, index=True) # Primary key
    customer_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False) # Owning customer
    created_at = Column(DateTime(timezone=True), server_default=func.now()) # Creation timestamp
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # One-to-many relationship with cart items, kept in insertion order
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )


# Represents a single line (product + quantity + options) within a cart
class CartItem(Base):
    __tablename__ = "cart_items" # Table name

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), index=True, nullable=False) # Foreign key to parent cart
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False) # Foreign key to product
    quantity = Column(Integer, CheckConstraint("quantity >= 1 AND quantity <= 100"), nullable=False, default=1)

    # Product data captured when the line was written
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    unit_price = Column(Integer, nullable=False) # Cents

    # Optional size selection
    size_id = Column(Integer, nullable=True)
    size_label = Column(String, nullable=True)
    size_surcharge = Column(Integer, nullable=True)

    # Optional design selection
    design_id = Column(Integer, nullable=True)
    design_title = Column(String, nullable=True)
    design_surcharge = Column(Integer, nullable=True)
    design_image_url = Column(String, nullable=True)

    cart = relationship("Cart", back_populates="items") # Relationship back to Cart

    __table_args__ = (
        # Unique constraint to prevent duplicate product entries in the same cart
        UniqueConstraint("cart_id", "product_id", name="uq_cartitem_cart_product"),
    )
