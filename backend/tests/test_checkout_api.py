import pytest

from models.log import Log
from models.product import Product


@pytest.fixture
def cart_id(client, customer, auth, make_product):
    headers = auth(customer)
    a = make_product(price=1000, stock=5, name="Mug")
    b = make_product(price=60000, stock=3, name="Lamp")
    client.post("/cart", json={"productId": a.id, "quantity": 2}, headers=headers)
    res = client.post("/cart", json={"productId": b.id, "quantity": 1}, headers=headers)
    return res.json()["data"]["id"]


def test_create_checkout(client, db, customer, auth, cart_id, shipping_json):
    res = client.post(
        "/checkout",
        json={"cartId": cart_id, "shippingDetails": shipping_json, "paymentMethod": "card"},
        headers=auth(customer),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Checkout created successfully"
    order = body["data"]
    assert order["status"] == "pending"
    assert order["paymentStatus"] == "unpaid"
    assert order["paymentMethod"] == "card"
    assert (order["subtotal"], order["shipping"], order["totalAmount"], order["itemsCount"]) == (620.0, 50.0, 670.0, 3)
    assert [it["name"] for it in order["items"]] == ["Mug", "Lamp"]
    assert order["shippingDetails"]["fullName"] == "Rahim Uddin"

    # Cart is gone and the sale is audited
    assert client.get("/cart", headers=auth(customer)).json()["data"]["id"] is None
    assert db.query(Log).filter(Log.action == "CHECKOUT_CREATE", Log.status == "SUCCESS").count() == 1


def test_checkout_with_drifted_snapshot(client, db, customer, auth, cart_id, shipping_json):
    cart = client.get("/cart", headers=auth(customer)).json()["data"]
    stale = [{"productId": it["productId"], "quantity": it["quantity"]} for it in reversed(cart["items"])]

    res = client.post(
        "/checkout",
        json={"cartId": cart_id, "shippingDetails": shipping_json, "items": stale},
        headers=auth(customer),
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Checkout items do not match cart items"
    assert db.query(Log).filter(Log.action == "CHECKOUT_CREATE", Log.status == "FAIL").count() == 1


def test_checkout_out_of_stock(client, db, customer, auth, cart_id, shipping_json):
    db.query(Product).filter(Product.name == "Mug").update({Product.stock: 1})
    db.commit()

    res = client.post("/checkout", json={"cartId": cart_id, "shippingDetails": shipping_json}, headers=auth(customer))

    assert res.status_code == 400
    assert "Insufficient stock" in res.json()["message"]


def test_checkout_other_customers_cart(client, other_customer, auth, cart_id, shipping_json):
    res = client.post("/checkout", json={"cartId": cart_id, "shippingDetails": shipping_json}, headers=auth(other_customer))
    assert res.status_code == 403


def test_checkout_bad_shipping_details(client, customer, auth, cart_id, shipping_json):
    shipping_json["email"] = "not-an-email"
    res = client.post("/checkout", json={"cartId": cart_id, "shippingDetails": shipping_json}, headers=auth(customer))
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid input"
    assert "email" in res.json()["details"]


def test_checkout_ids_must_be_json_integers(client, customer, auth, cart_id, shipping_json):
    res = client.post("/checkout", json={"cartId": str(cart_id), "shippingDetails": shipping_json}, headers=auth(customer))
    assert res.status_code == 400
    assert "cartId" in res.json()["details"]

    shipping_json["cityId"] = True
    res = client.post("/checkout", json={"cartId": cart_id, "shippingDetails": shipping_json}, headers=auth(customer))
    assert res.status_code == 400
    assert client.get("/cart", headers=auth(customer)).json()["data"]["id"] == cart_id


def _place_order(client, customer, auth, cart_id, shipping_json):
    res = client.post("/checkout", json={"cartId": cart_id, "shippingDetails": shipping_json}, headers=auth(customer))
    return res.json()["data"]["id"]


def test_order_listing_and_detail(client, customer, other_customer, admin, auth, cart_id, shipping_json):
    order_id = _place_order(client, customer, auth, cart_id, shipping_json)

    page = client.get("/checkout", headers=auth(customer)).json()["data"]
    assert (page["total"], page["page"], page["totalPages"]) == (1, 1, 1)
    assert page["checkouts"][0]["id"] == order_id

    assert client.get("/checkout", headers=auth(other_customer)).json()["data"]["total"] == 0
    assert client.get(f"/checkout/{order_id}", headers=auth(admin)).status_code == 200
    assert client.get(f"/checkout/{order_id}", headers=auth(other_customer)).status_code == 404


def test_admin_status_update(client, customer, admin, auth, cart_id, shipping_json):
    order_id = _place_order(client, customer, auth, cart_id, shipping_json)

    res = client.patch(f"/checkout/{order_id}", json={"status": "on the way"}, headers=auth(customer))
    assert res.status_code == 403

    res = client.patch(f"/checkout/{order_id}", json={"status": "on the way", "paymentStatus": "paid"}, headers=auth(admin))
    assert res.status_code == 200
    assert (res.json()["data"]["status"], res.json()["data"]["paymentStatus"]) == ("on the way", "paid")

    client.patch(f"/checkout/{order_id}", json={"status": "cancelled"}, headers=auth(admin))
    res = client.patch(f"/checkout/{order_id}", json={"status": "pending"}, headers=auth(admin))
    assert res.status_code == 400
    assert res.json()["message"] == "Cannot change status from cancelled"

    res = client.patch(f"/checkout/{order_id}", json={}, headers=auth(admin))
    assert res.status_code == 400
    assert res.json()["message"] == "No valid fields to update provided"
