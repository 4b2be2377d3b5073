import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_session_store  # noqa: E402
from app.celery_worker import celery_app  # noqa: E402
from app.data import models  # noqa: E402,F401
from app.data.database import Base, SessionLocal, engine  # noqa: E402
from app.data.models import (  # noqa: E402
    CategoryModel,
    DiscountCodeModel,
    ProductImageModel,
    ProductModel,
    UserModel,
)
from app.main import create_app  # noqa: E402
from app.services.session_store import SessionStore  # noqa: E402
from app.services.user_service import hash_password  # noqa: E402
from app.utils.settings import SESSION_TTL_SECONDS  # noqa: E402

PASSWORD = "Secret123"

celery_app.conf.task_always_eager = True


class MemorySessionStore(SessionStore):
    """Session store kept in a dict so tests never need Redis."""

    def __init__(self):
        self.ttl = SESSION_TTL_SECONDS
        self.sessions = {}

    def load(self, session_id):
        data = self.sessions.get(session_id)
        return dict(data) if data is not None else None

    def save(self, session_id, data):
        self.sessions[session_id] = dict(data)

    def delete(self, session_id):
        self.sessions.pop(session_id, None)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_store():
    return MemorySessionStore()


@pytest.fixture
def app(session_store):
    application = create_app()
    application.dependency_overrides[get_session_store] = lambda: session_store
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(app, make_user):
    make_user("boss", role="admin")
    with TestClient(app) as c:
        login(c, "boss")
        yield c


@pytest.fixture
def make_user(db):
    def _make(username="alice", role="customer", password=PASSWORD):
        user = UserModel(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        return user.id

    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Lamp", price="10.00", stock=10, threshold=5, category_id=None, sku=None, image=True):
        product = ProductModel(
            name=name,
            sku=sku or f"SKU-{name.upper().replace(' ', '-')}",
            price=Decimal(price),
            stock_quantity=stock,
            low_stock_threshold=threshold,
            category_id=category_id,
            description=f"{name} description",
        )
        if image:
            product.images.append(
                ProductImageModel(image_path=f"/images/{name.lower()}.jpg", is_primary=True)
            )
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Furniture", parent_id=None):
        category = CategoryModel(name=name, parent_id=parent_id)
        db.add(category)
        db.commit()
        return category.id

    return _make


@pytest.fixture
def make_discount(db):
    def _make(code="WELCOME15", percent="15", amount=None, minimum="50", max_uses=None, times_used=0):
        discount = DiscountCodeModel(
            code=code,
            discount_percent=Decimal(percent) if percent is not None else None,
            discount_amount=Decimal(amount) if amount is not None else None,
            minimum_order_amount=Decimal(minimum),
            max_uses=max_uses,
            times_used=times_used,
        )
        db.add(discount)
        db.commit()
        return discount.id

    return _make


def login(client, username, password=PASSWORD):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def user_client(client, make_user):
    make_user("alice")
    login(client, "alice")
    return client


@pytest.fixture
def login_as():
    return login
