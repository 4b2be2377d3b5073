from datetime import datetime, timedelta, timezone

from app.data.models import OrderModel
from app.data.models.catalog import ProductModel
from app.repos.listing import PageRequest, contains, normalize_direction, resolve_sort, total_pages


def test_total_pages_is_never_zero():
    assert total_pages(0, 20) == 1
    assert total_pages(20, 20) == 1
    assert total_pages(21, 20) == 2


def test_direction_normalization():
    assert normalize_direction("asc") == "ASC"
    assert normalize_direction("ASC") == "ASC"
    assert normalize_direction("desc") == "DESC"
    assert normalize_direction("sideways") == "DESC"
    assert normalize_direction(None, default="ASC") == "ASC"


def test_unknown_sort_falls_back_to_default():
    allowed = {"name": ProductModel.name, "price": ProductModel.price}

    assert resolve_sort("price", allowed, "name") is ProductModel.price
    assert resolve_sort("name; DROP TABLE products", allowed, "name") is ProductModel.name
    assert resolve_sort(None, allowed, "name") is ProductModel.name


def test_like_wildcards_are_escaped():
    assert contains("50%_off") == "%50\\%\\_off%"


def test_page_offset():
    assert PageRequest(page=3, limit=20).offset == 40


def _place(db, user_id, total, status="pending", created_at=None, address="1 Main St"):
    order = OrderModel(
        user_id=user_id,
        status=status,
        total_amount=total,
        discount_amount=0,
        shipping_address=address,
        billing_address=address,
        payment_method="card",
    )
    if created_at is not None:
        order.created_at = created_at
    db.add(order)
    db.commit()
    return order.id


def test_admin_orders_pagination(admin_client, db, make_user):
    user_id = make_user("carol")
    for i in range(45):
        _place(db, user_id, 10 + i)

    body = admin_client.get("/api/admin/orders", params={"page": 1, "limit": 20}).json()
    assert len(body["orders"]) == 20
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 45, "totalPages": 3}

    last = admin_client.get("/api/admin/orders", params={"page": 3, "limit": 20}).json()
    assert len(last["orders"]) == 5

    beyond = admin_client.get("/api/admin/orders", params={"page": 9, "limit": 20}).json()
    assert beyond["orders"] == []
    assert beyond["pagination"]["totalPages"] == 3


def test_admin_orders_empty_result_has_one_page(admin_client):
    body = admin_client.get("/api/admin/orders").json()

    assert body["orders"] == []
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 0, "totalPages": 1}


def test_admin_orders_rejects_bad_paging(admin_client):
    assert admin_client.get("/api/admin/orders", params={"page": 0}).status_code == 400
    assert admin_client.get("/api/admin/orders", params={"limit": 500}).status_code == 400


def test_admin_orders_sorting_and_fallback(admin_client, db, make_user):
    user_id = make_user("carol")
    ids = [_place(db, user_id, total) for total in (30, 10, 20)]

    by_total = admin_client.get("/api/admin/orders", params={"sort": "total_amount", "direction": "asc"}).json()
    assert [o["total_amount"] for o in by_total["orders"]] == [10.0, 20.0, 30.0]

    fallback = admin_client.get("/api/admin/orders", params={"sort": "1;DROP TABLE orders"}).json()
    assert [o["id"] for o in fallback["orders"]] == sorted(ids, reverse=True)


def test_admin_orders_filters(admin_client, db, make_user):
    carol = make_user("carol")
    dave = make_user("dave")
    day = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)
    early = _place(db, carol, 10, status="shipped", created_at=day - timedelta(days=3))
    on_day = _place(db, carol, 20, status="pending", created_at=day, address="42 Elm Road")
    _place(db, dave, 30, status="pending", created_at=day + timedelta(days=2))

    shipped = admin_client.get("/api/admin/orders", params={"status": "shipped"}).json()
    assert [o["id"] for o in shipped["orders"]] == [early]

    same_day = admin_client.get(
        "/api/admin/orders", params={"startDate": "2026-03-14", "endDate": "2026-03-14"}
    ).json()
    assert [o["id"] for o in same_day["orders"]] == [on_day]

    by_address = admin_client.get("/api/admin/orders", params={"search": "elm"}).json()
    assert [o["id"] for o in by_address["orders"]] == [on_day]

    by_user = admin_client.get("/api/admin/orders", params={"search": "dave@"}).json()
    assert by_user["pagination"]["total"] == 1
    assert by_user["orders"][0]["username"] == "dave"


def test_admin_inventory_defaults_to_lowest_stock_first(admin_client, make_product, make_category):
    furniture = make_category("Furniture")
    make_product(name="Chair", stock=30, category_id=furniture)
    make_product(name="Table", stock=2, category_id=furniture)
    make_product(name="Lamp", stock=9)

    body = admin_client.get("/api/admin/inventory/products").json()
    assert [p["name"] for p in body["products"]] == ["Table", "Lamp", "Chair"]
    assert body["pagination"]["limit"] == 50
    assert body["products"][0]["category_name"] == "Furniture"

    low = admin_client.get("/api/admin/inventory/products", params={"low_stock": "true"}).json()
    assert [p["name"] for p in low["products"]] == ["Table"]

    capped = admin_client.get("/api/admin/inventory/products", params={"max_stock": 10, "sort": "name"}).json()
    assert [p["name"] for p in capped["products"]] == ["Lamp", "Table"]

    in_category = admin_client.get(
        "/api/admin/inventory/products", params={"category_id": furniture, "sort": "name", "direction": "asc"}
    ).json()
    assert [p["name"] for p in in_category["products"]] == ["Chair", "Table"]

    searched = admin_client.get("/api/admin/inventory/products", params={"search": "SKU-LAMP"}).json()
    assert [p["name"] for p in searched["products"]] == ["Lamp"]
