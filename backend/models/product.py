# backend/models/product.py
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# Catalogue entry read by the cart and checkout. Prices are kept in cents;
# stock is only ever decremented by a successful checkout.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(String)

    price = Column(Integer, CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)

    # Main product picture, copied onto cart lines
    image_url = Column(String, nullable=True)

    sizes = relationship("ProductSize", back_populates="product", cascade="all, delete-orphan")
    designs = relationship("ProductDesign", back_populates="product", cascade="all, delete-orphan")


# Size option with an extra charge per unit
class ProductSize(Base):
    __tablename__ = "product_sizes"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    label = Column(String, nullable=False)
    surcharge = Column(Integer, CheckConstraint("surcharge >= 0"), nullable=False, default=0)

    product = relationship("Product", back_populates="sizes")


# Design option with an extra charge per unit
class ProductDesign(Base):
    __tablename__ = "product_designs"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    title = Column(String, nullable=False)
    surcharge = Column(Integer, CheckConstraint("surcharge >= 0"), nullable=False, default=0)
    image_url = Column(String, nullable=True)

    product = relationship("Product", back_populates="designs")
