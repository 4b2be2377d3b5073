import pytest

from app.data.models import AdminLogModel, InventoryLogModel, ProductModel
from app.domain.errors import InvalidQuantityError, NotFoundError
from app.services.inventory_service import InventoryService


def test_set_stock_logs_delta(admin_client, db, make_product):
    product_id = make_product(stock=10)

    response = admin_client.put(
        f"/api/admin/inventory/products/{product_id}/stock",
        json={"stock_quantity": 4, "reason": "recount"},
    )

    assert response.status_code == 200, response.text
    assert response.json() == {"success": True, "product_id": product_id, "stock_quantity": 4, "delta": -6}
    assert db.get(ProductModel, product_id).stock_quantity == 4

    log = db.query(InventoryLogModel).filter_by(product_id=product_id).one()
    assert log.quantity_change == -6
    assert log.reason == "recount"
    assert log.admin_user_id is not None

    admin_log = db.query(AdminLogModel).one()
    assert admin_log.action_type == "stock_update"


def test_setting_same_level_twice_logs_zero_delta(db, make_product):
    product_id = make_product(stock=10)
    svc = InventoryService(db)

    first = svc.set_stock(product_id, 25)
    second = svc.set_stock(product_id, 25)

    assert first["delta"] == 15
    assert second["delta"] == 0
    changes = [
        entry.quantity_change
        for entry in db.query(InventoryLogModel).order_by(InventoryLogModel.id).all()
    ]
    assert changes == [15, 0]
    assert db.query(InventoryLogModel).first().reason == "manual_adjustment"


@pytest.mark.parametrize("quantity", [-1, 2.5, True, "7"])
def test_invalid_quantities_are_rejected(db, make_product, quantity):
    product_id = make_product(stock=10)

    with pytest.raises(InvalidQuantityError):
        InventoryService(db).set_stock(product_id, quantity)

    db.expire_all()
    assert db.get(ProductModel, product_id).stock_quantity == 10
    assert db.query(InventoryLogModel).count() == 0


def test_negative_stock_over_http_is_bad_request(admin_client, make_product):
    product_id = make_product(stock=10)

    response = admin_client.put(f"/api/admin/inventory/products/{product_id}/stock", json={"stock_quantity": -3})

    assert response.status_code == 400
    assert response.json()["detail"] == "Stock quantity must be a non-negative integer"


def test_non_integer_stock_over_http_is_bad_request(admin_client, make_product):
    product_id = make_product(stock=10)

    response = admin_client.put(f"/api/admin/inventory/products/{product_id}/stock", json={"stock_quantity": 1.5})

    assert response.status_code == 400


def test_unknown_product_is_not_found(admin_client, db):
    response = admin_client.put("/api/admin/inventory/products/999/stock", json={"stock_quantity": 3})

    assert response.status_code == 404
    assert db.query(InventoryLogModel).count() == 0

    with pytest.raises(NotFoundError):
        InventoryService(db).set_stock(999, 3)


def test_inventory_routes_need_admin(user_client, make_product):
    product_id = make_product()

    response = user_client.put(f"/api/admin/inventory/products/{product_id}/stock", json={"stock_quantity": 1})

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin privileges required"


def test_inventory_routes_need_login(client, make_product):
    response = client.get("/api/admin/inventory/products")

    assert response.status_code == 401


def test_edit_product_routes_stock_through_adjustment(admin_client, db, make_product):
    product_id = make_product(price="10.00", stock=10, threshold=5)

    response = admin_client.put(
        f"/api/admin/inventory/products/{product_id}",
        json={"stock_quantity": 12, "low_stock_threshold": 3, "price": "14.99"},
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["stock_quantity"] == 12
    assert body["low_stock_threshold"] == 3
    assert body["price"] == 14.99

    log = db.query(InventoryLogModel).one()
    assert (log.quantity_change, log.reason) == (2, "adjustment")


def test_edit_product_rejects_non_positive_price(admin_client, make_product):
    product_id = make_product()

    response = admin_client.put(f"/api/admin/inventory/products/{product_id}", json={"price": 0})

    assert response.status_code == 400


def test_bulk_update_is_all_or_nothing(admin_client, db, make_product):
    first = make_product(name="Chair", stock=1)
    second = make_product(name="Table", stock=2)

    response = admin_client.post(
        "/api/admin/inventory/bulk-update",
        json={"updates": [{"product_id": first, "stock_quantity": 5}, {"product_id": 999, "stock_quantity": 5}]},
    )

    assert response.status_code == 404
    db.expire_all()
    assert db.get(ProductModel, first).stock_quantity == 1
    assert db.query(InventoryLogModel).count() == 0

    response = admin_client.post(
        "/api/admin/inventory/bulk-update",
        json={"updates": [{"product_id": first, "stock_quantity": 5}, {"product_id": second, "stock_quantity": 0}]},
    )

    assert response.json() == {"success": True, "updated": 2}
    db.expire_all()
    assert db.get(ProductModel, first).stock_quantity == 5
    assert db.get(ProductModel, second).stock_quantity == 0
    reasons = {entry.reason for entry in db.query(InventoryLogModel).all()}
    assert reasons == {"bulk_adjustment"}


def test_low_stock_and_product_log(admin_client, make_product):
    make_product(name="Chair", stock=50, threshold=5)
    low = make_product(name="Table", stock=2, threshold=5)
    admin_client.put(f"/api/admin/inventory/products/{low}/stock", json={"stock_quantity": 1})

    rows = admin_client.get("/api/admin/inventory/low-stock").json()
    assert [row["id"] for row in rows] == [low]

    log = admin_client.get(f"/api/admin/inventory/products/{low}/log").json()
    assert [entry["quantity_change"] for entry in log] == [-1]
    assert admin_client.get("/api/admin/inventory/products/999/log").status_code == 404
