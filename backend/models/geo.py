from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

# Shipping geography referenced by checkout addresses
class Country(Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)

    provinces = relationship("Province", back_populates="country", cascade="all, delete-orphan")


class Province(Base):
    __tablename__ = "provinces"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    country_id = Column(Integer, ForeignKey("countries.id"), index=True, nullable=False)

    country = relationship("Country", back_populates="provinces")
    cities = relationship("City", back_populates="province", cascade="all, delete-orphan")


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    province_id = Column(Integer, ForeignKey("provinces.id"), index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True) # Inactive cities are not shipped to

    province = relationship("Province", back_populates="cities")
