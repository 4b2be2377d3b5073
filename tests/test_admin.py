from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.data.models import OrderItemModel, OrderModel, UserModel


def test_discount_crud(admin_client):
    created = admin_client.post(
        "/api/admin/discounts",
        json={"code": "SPRING10", "discount_percent": "10", "minimum_order_amount": "20"},
    )
    assert created.status_code == 201, created.text
    code_id = created.json()["code_id"]

    codes = admin_client.get("/api/admin/discounts").json()
    assert [(c["code"], c["discount_percent"], c["times_used"]) for c in codes] == [("SPRING10", 10.0, 0)]

    updated = admin_client.put(f"/api/admin/discounts/{code_id}", json={"is_single_use": True})
    assert updated.status_code == 200
    assert updated.json()["max_uses"] == 1

    assert admin_client.delete(f"/api/admin/discounts/{code_id}").status_code == 200
    assert admin_client.get("/api/admin/discounts").json() == []
    assert admin_client.delete(f"/api/admin/discounts/{code_id}").status_code == 404


def test_discount_validation(admin_client, make_discount):
    make_discount("TAKEN")

    duplicate = admin_client.post("/api/admin/discounts", json={"code": "TAKEN", "discount_amount": "5"})
    assert duplicate.status_code == 409

    no_value = admin_client.post("/api/admin/discounts", json={"code": "EMPTY"})
    assert no_value.status_code == 400

    too_much = admin_client.post("/api/admin/discounts", json={"code": "HUGE", "discount_percent": "150"})
    assert too_much.status_code == 400


def test_single_use_code_defaults_to_one_use(admin_client):
    code_id = admin_client.post(
        "/api/admin/discounts", json={"code": "ONCE", "discount_amount": "5", "is_single_use": True}
    ).json()["code_id"]

    codes = admin_client.get("/api/admin/discounts").json()
    assert [(c["id"], c["max_uses"]) for c in codes] == [(code_id, 1)]


def test_user_roles(admin_client, db, make_user):
    user_id = make_user("carol")

    users = admin_client.get("/api/admin/users").json()
    assert {u["username"] for u in users} == {"boss", "carol"}

    response = admin_client.put(f"/api/admin/users/{user_id}/role", json={"role": "manager"})
    assert response.status_code == 200
    assert response.json()["role"] == "manager"
    assert db.get(UserModel, user_id).role == "manager"

    assert admin_client.put(f"/api/admin/users/{user_id}/role", json={"role": "overlord"}).status_code == 400
    assert admin_client.put("/api/admin/users/999/role", json={"role": "admin"}).status_code == 404


def test_demoted_admin_loses_access(admin_client, db):
    boss = db.query(UserModel).filter_by(username="boss").one()
    boss.role = "customer"
    db.commit()

    assert admin_client.get("/api/admin/users").status_code == 403


def _order(db, user_id, product_id, quantity, price, status="pending", created_at=None):
    total = Decimal(price) * quantity
    order = OrderModel(
        user_id=user_id,
        status=status,
        total_amount=total,
        discount_amount=Decimal("0"),
        shipping_address="1 Main St",
        billing_address="1 Main St",
        payment_method="card",
    )
    if created_at is not None:
        order.created_at = created_at
    db.add(order)
    db.flush()
    db.add(OrderItemModel(order_id=order.id, product_id=product_id, quantity=quantity, price=Decimal(price)))
    db.commit()
    return order.id


def test_order_detail_recent_and_status(admin_client, db, make_user, make_product):
    user_id = make_user("carol")
    product_id = make_product(name="Chair", price="10.00")
    order_ids = [_order(db, user_id, product_id, 1, "10.00") for _ in range(6)]

    detail = admin_client.get(f"/api/admin/orders/{order_ids[0]}").json()
    assert detail["username"] == "carol"
    assert detail["items"][0]["name"] == "Chair"

    recent = admin_client.get("/api/admin/orders/recent").json()
    assert [o["id"] for o in recent] == list(reversed(order_ids))[:5]

    assert admin_client.put(f"/api/admin/orders/{order_ids[0]}/status", json={"status": "shipped"}).status_code == 200
    db.expire_all()
    assert db.get(OrderModel, order_ids[0]).status == "shipped"

    assert admin_client.put(f"/api/admin/orders/{order_ids[0]}/status", json={"status": "lost"}).status_code == 400
    assert admin_client.put("/api/admin/orders/999/status", json={"status": "shipped"}).status_code == 404
    assert admin_client.get("/api/admin/orders/999").status_code == 404


def test_sales_analytics(admin_client, db, make_user, make_product):
    carol = make_user("carol")
    dave = make_user("dave")
    chair = make_product(name="Chair", price="50.00")
    lamp = make_product(name="Lamp", price="10.00")
    day = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)
    _order(db, carol, chair, 2, "50.00", created_at=day)
    _order(db, carol, lamp, 5, "10.00", created_at=day)
    _order(db, dave, lamp, 1, "10.00", created_at=day + timedelta(days=1))
    _order(db, dave, chair, 9, "50.00", status="cancelled", created_at=day)

    overview = admin_client.get("/api/admin/analytics/sales-overview").json()
    assert overview["total_orders"] == 3
    assert overview["total_revenue"] == 160.0
    assert overview["average_order_value"] == 53.33

    by_date = admin_client.get(
        "/api/admin/analytics/sales-by-date", params={"startDate": "2026-05-01", "endDate": "2026-05-02"}
    ).json()
    assert by_date == [
        {"date": "2026-05-02", "orders": 1, "revenue": 10.0},
        {"date": "2026-05-01", "orders": 2, "revenue": 150.0},
    ]

    top = admin_client.get("/api/admin/analytics/top-products", params={"limit": 1}).json()
    assert [(p["name"], p["units_sold"], p["revenue"]) for p in top] == [("Lamp", 6, 60.0)]


def test_customer_insights(admin_client, db, make_user, make_product):
    carol = make_user("carol")
    make_user("erin")
    product_id = make_product(price="60.00")
    for _ in range(2):
        _order(db, carol, product_id, 1, "60.00")

    body = admin_client.get("/api/admin/analytics/customer-insights").json()

    assert body["stats"]["total_customers"] == 2
    assert body["stats"]["avg_orders_per_customer"] == 1.0
    assert body["stats"]["avg_customer_value"] == 60.0
    orders = {row["label"]: row["customer_count"] for row in body["orderDistribution"]}
    assert orders == {"0 orders": 1, "1 order": 0, "2-5 orders": 1, "6-10 orders": 0, "10+ orders": 0}
    spending = {row["label"]: row["customer_count"] for row in body["spendingDistribution"]}
    assert spending["$0"] == 1
    assert spending["$101-500"] == 1


def test_analytics_need_admin(user_client):
    assert user_client.get("/api/admin/analytics/sales-overview").status_code == 403
