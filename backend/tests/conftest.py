import os

# Every test runs against a private in-memory database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from database import Base, engine, SessionLocal
from main import app
from models.users import User
from models.product import Product, ProductSize, ProductDesign
from models.geo import Country, Province, City
from utils.tokenJWT import create_access_token


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _user(db, email, role):
    user = User(email=email, role=role, first_name="Test", last_name=role.title())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def customer(db):
    return _user(db, "customer@example.com", "customer")


@pytest.fixture
def other_customer(db):
    return _user(db, "other@example.com", "customer")


@pytest.fixture
def admin(db):
    return _user(db, "admin@example.com", "admin")


def auth_headers(user):
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(price=1000, stock=10, name=None, sizes=(), designs=()):
        counter["n"] += 1
        n = counter["n"]
        product = Product(
            name=name or f"Product {n}",
            slug=f"product-{n}",
            price=price,
            stock=stock,
            image_url=f"https://cdn.example.com/p{n}.jpg",
        )
        for label, surcharge in sizes:
            product.sizes.append(ProductSize(label=label, surcharge=surcharge))
        for title, surcharge in designs:
            product.designs.append(ProductDesign(title=title, surcharge=surcharge, image_url=f"https://cdn.example.com/{title}.png"))
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def geo(db):
    country = Country(name="Bangladesh")
    province = Province(name="Dhaka Division", country=country)
    city = City(name="Dhaka", province=province, is_active=True)
    closed = City(name="Savar", province=province, is_active=False)
    db.add_all([country, province, city, closed])
    db.commit()
    return SimpleNamespace(country=country, province=province, city=city, inactive_city=closed)


@pytest.fixture
def shipping(geo):
    return SimpleNamespace(
        full_name="Rahim Uddin",
        email="rahim@example.com",
        phone="+8801700000000",
        address="House 12, Road 5",
        country_id=geo.country.id,
        province_id=geo.province.id,
        city_id=geo.city.id,
        postal_code="1207",
        location_url=None,
    )


@pytest.fixture
def shipping_json(shipping):
    return {
        "fullName": shipping.full_name,
        "email": shipping.email,
        "phone": shipping.phone,
        "address": shipping.address,
        "countryId": shipping.country_id,
        "provinceId": shipping.province_id,
        "cityId": shipping.city_id,
        "postalCode": shipping.postal_code,
    }


@pytest.fixture
def auth():
    return auth_headers
