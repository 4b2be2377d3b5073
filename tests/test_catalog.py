from app.data.models import PageViewModel, ProductAssetModel, RecentlyViewedModel, ReviewModel
from app.repos.customer_repo import ActivityRepo
from app.services.catalog_service import CatalogService, device_type, optimal_model_resolution

IPHONE = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148"
DESKTOP = "Mozilla/5.0 (X11; Linux x86_64) Gecko/20100101 Firefox/128.0"


def test_model_resolution_heuristic():
    assert optimal_model_resolution({"user-agent": IPHONE}) == "low"
    assert optimal_model_resolution({"user-agent": DESKTOP, "ect": "3g"}) == "low"
    assert optimal_model_resolution({"user-agent": "Mozilla/5.0 (Tablet; rv:109.0)"}) == "medium"
    assert optimal_model_resolution({"user-agent": DESKTOP, "device-memory": "4"}) == "medium"
    assert optimal_model_resolution({"user-agent": DESKTOP, "downlink": "2.5"}) == "medium"
    assert optimal_model_resolution({"user-agent": DESKTOP, "device-memory": "8", "downlink": "10"}) == "high"
    assert optimal_model_resolution({"user-agent": DESKTOP, "device-memory": "lots"}) == "high"


def test_device_type():
    assert device_type(IPHONE) == "mobile"
    assert device_type("Mozilla/5.0 (iPad; CPU OS 17_0)") == "tablet"
    assert device_type(DESKTOP) == "desktop"


def test_product_lists(client, make_product, make_category):
    chairs = make_category("Chairs")
    for name in ("Chair", "Stool", "Bench", "Sofa", "Desk"):
        make_product(name=name, category_id=chairs if name in ("Chair", "Stool") else None)

    assert len(client.get("/api/products").json()) == 5
    assert len(client.get("/api/products/featured").json()) == 4
    assert {p["name"] for p in client.get(f"/api/products/category/{chairs}").json()} == {"Chair", "Stool"}
    assert [p["name"] for p in client.get("/api/products/search/stoo").json()] == ["Stool"]
    assert client.get("/api/products").json()[0]["image_path"].startswith("/images/")


def test_categories_nest_subcategories(client, make_category):
    furniture = make_category("Furniture")
    make_category("Chairs", parent_id=furniture)
    make_category("Lighting")

    body = client.get("/api/products/categories").json()

    assert [c["name"] for c in body] == ["Furniture", "Lighting"]
    assert [c["name"] for c in body[0]["subcategories"]] == ["Chairs"]


def test_product_detail_picks_models_for_client(client, db, make_product, make_user):
    product_id = make_product(name="Chair")
    reviewer = make_user("rita")
    for resolution in ("high", "low"):
        db.add(ProductAssetModel(product_id=product_id, model_path=f"/models/{resolution}/chair.glb", resolution=resolution))
    db.add(ReviewModel(product_id=product_id, user_id=reviewer, rating=4, comment="Sturdy"))
    db.add(ReviewModel(product_id=product_id, user_id=reviewer, rating=5))
    db.commit()

    phone = client.get(f"/api/products/{product_id}", headers={"User-Agent": IPHONE}).json()
    assert phone["model_resolution"] == "low"
    assert [m["model_path"] for m in phone["models"]] == ["/models/low/chair.glb"]
    assert phone["default_model_path"] is None
    assert phone["review_count"] == 2
    assert phone["average_rating"] == 4.5
    assert phone["reviews"][0]["username"] == "rita"

    tablet = client.get(f"/api/products/{product_id}", headers={"User-Agent": "Tablet"}).json()
    assert tablet["models"] == []
    assert tablet["default_model_path"] == "/models/medium/default_placeholder.glb"


def test_missing_product_is_not_found(client):
    response = client.get("/api/products/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


def test_views_are_tracked(user_client, db, make_product):
    chair = make_product(name="Chair")
    lamp = make_product(name="Lamp")

    user_client.get(f"/api/products/{chair}", headers={"User-Agent": IPHONE})
    user_client.get(f"/api/products/{lamp}")
    user_client.get(f"/api/products/{chair}")

    views = db.query(PageViewModel).order_by(PageViewModel.id).all()
    assert [v.product_id for v in views] == [chair, lamp, chair]
    assert views[0].device_type == "mobile"
    assert db.query(RecentlyViewedModel).count() == 2

    recent = user_client.get("/api/products/recently-viewed").json()
    assert [r["product_id"] for r in recent] == [chair, lamp]


def test_recently_viewed_needs_login(client):
    assert client.get("/api/products/recently-viewed").status_code == 401


def test_tracking_failure_does_not_break_browsing(db, make_product, monkeypatch):
    product_id = make_product()
    svc = CatalogService(db)

    def broken(self, view):
        raise RuntimeError("page_views unavailable")

    monkeypatch.setattr(ActivityRepo, "add_page_view", broken)

    svc.record_product_view(product_id, "sid", None, DESKTOP, None)

    assert db.query(PageViewModel).count() == 0


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
