from decimal import Decimal

from fastapi.testclient import TestClient

from app.data.models import CartModel, ProductModel


def test_first_read_creates_empty_cart(client):
    body = client.get("/api/cart").json()

    assert body["items"] == []
    assert body["itemCount"] == 0
    assert body["totalQuantity"] == 0
    assert body["total"] == 0.0
    assert body["cartId"] > 0


def test_add_update_remove_clear(client, make_product):
    chair = make_product(name="Chair", price="19.99", stock=10)
    lamp = make_product(name="Lamp", price="5.00", stock=10)

    client.post("/api/cart/add", json={"productId": chair, "quantity": 2})
    client.post("/api/cart/add", json={"productId": chair})
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 1})

    cart = client.get("/api/cart").json()
    lines = {line["productId"]: line for line in cart["items"]}
    assert lines[chair]["quantity"] == 3
    assert lines[chair]["subtotal"] == 59.97
    assert lines[chair]["imagePath"] == "/images/chair.jpg"
    assert cart["total"] == 64.97
    assert cart["itemCount"] == 2
    assert cart["totalQuantity"] == 4

    item_id = lines[chair]["itemId"]
    assert client.put(f"/api/cart/update/{item_id}", json={"quantity": 1}).status_code == 200
    assert client.get("/api/cart").json()["total"] == 24.99

    assert client.delete(f"/api/cart/remove/{item_id}").status_code == 200
    assert [line["productId"] for line in client.get("/api/cart").json()["items"]] == [lamp]

    assert client.delete("/api/cart/clear").status_code == 200
    assert client.get("/api/cart").json()["items"] == []


def test_adding_past_stock_is_rejected(client, make_product):
    product_id = make_product(stock=3)
    client.post("/api/cart/add", json={"productId": product_id, "quantity": 2})

    response = client.post("/api/cart/add", json={"productId": product_id, "quantity": 2})

    assert response.status_code == 400
    assert response.json()["detail"] == "Not enough stock available"


def test_adding_unknown_product_is_not_found(client):
    response = client.post("/api/cart/add", json={"productId": 999})

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


def test_update_validation(client, make_product):
    product_id = make_product(stock=3)
    client.post("/api/cart/add", json={"productId": product_id})
    item_id = client.get("/api/cart").json()["items"][0]["itemId"]

    assert client.put(f"/api/cart/update/{item_id}", json={"quantity": 0}).status_code == 400
    assert client.put(f"/api/cart/update/{item_id}", json={"quantity": 9}).status_code == 400
    assert client.put("/api/cart/update/999", json={"quantity": 1}).status_code == 404


def test_cart_reads_use_current_prices(client, db, make_product):
    product_id = make_product(price="10.00", stock=5)
    client.post("/api/cart/add", json={"productId": product_id, "quantity": 2})

    db.get(ProductModel, product_id).price = Decimal("12.00")
    db.commit()

    assert client.get("/api/cart").json()["total"] == 24.0


def test_anonymous_cart_is_reassigned_on_login(client, db, make_user, make_product, login_as):
    user_id = make_user("alice")
    product_id = make_product(stock=5)
    client.post("/api/cart/add", json={"productId": product_id, "quantity": 2})
    anonymous_id = client.get("/api/cart").json()["cartId"]

    login_as(client, "alice")

    cart = client.get("/api/cart").json()
    assert cart["cartId"] == anonymous_id
    assert cart["totalQuantity"] == 2
    assert db.get(CartModel, anonymous_id).user_id == user_id


def test_anonymous_lines_merge_into_existing_user_cart(client, app, db, make_user, make_product, login_as):
    make_user("alice")
    chair = make_product(name="Chair", stock=10)
    lamp = make_product(name="Lamp", stock=10)

    with TestClient(app) as earlier:
        login_as(earlier, "alice")
        earlier.post("/api/cart/add", json={"productId": chair, "quantity": 1})
        owned_id = earlier.get("/api/cart").json()["cartId"]

    client.post("/api/cart/add", json={"productId": chair, "quantity": 2})
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 1})
    login_as(client, "alice")

    cart = client.get("/api/cart").json()
    lines = {line["productId"]: line["quantity"] for line in cart["items"]}
    assert cart["cartId"] == owned_id
    assert lines == {chair: 3, lamp: 1}
    assert db.query(CartModel).count() == 1


def test_separate_sessions_have_separate_carts(app, make_product):
    product_id = make_product(stock=5)
    with TestClient(app) as first, TestClient(app) as second:
        first.post("/api/cart/add", json={"productId": product_id})

        assert second.get("/api/cart").json()["items"] == []


def test_merged_lines_are_capped_at_stock(client, app, make_user, make_product, login_as):
    make_user("alice")
    chair = make_product(name="Chair", stock=3)
    lamp = make_product(name="Lamp", stock=10)

    with TestClient(app) as earlier:
        login_as(earlier, "alice")
        earlier.post("/api/cart/add", json={"productId": chair, "quantity": 2})

    client.post("/api/cart/add", json={"productId": chair, "quantity": 2})
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 4})
    login_as(client, "alice")

    cart = client.get("/api/cart").json()
    lines = {line["productId"]: line["quantity"] for line in cart["items"]}
    assert lines == {chair: 3, lamp: 4}
