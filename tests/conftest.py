"""
Pytest fixtures: app trên SQLite in-memory, user cho từng role, client đã
đăng nhập và vài helper tạo dữ liệu.
"""
import pytest

from app import create_app
from configs import db as _db
from dao import item as item_dao, supplier as supplier_dao, user as user_dao
from db.models.item import ItemKind
from db.models.user import UserRole

PASSWORD = "pw"

USERS = {
    "admin": UserRole.ADMIN,
    "power": UserRole.POWER,
    "manager": UserRole.MANAGER,
    "store": UserRole.STORE,
    "production": UserRole.PRODUCTION,
    "viewer": UserRole.VIEWER,
    "operator": UserRole.OPERATOR,
}


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "LOG_LEVEL": "WARNING",
        }
    )
    with app.app_context():
        _db.create_all()
        for username, role in USERS.items():
            user_dao.create_user(username, PASSWORD, role, actor="fixture")

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def ctx(app):
    """App context cho test gọi DAO trực tiếp (không dùng client)."""
    with app.app_context():
        yield app
        _db.session.rollback()


@pytest.fixture
def login(app):
    def _login(username: str):
        client = app.test_client()
        resp = client.post("/auth/login", json={"username": username, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return client

    return _login


@pytest.fixture
def make_item():
    def _make(kind, code, threshold=0, **fields):
        return item_dao.create_item(
            ItemKind(kind), actor="tester", code=code, name=f"Item {code}", threshold=threshold, **fields
        )

    return _make


@pytest.fixture
def make_supplier():
    def _make(name="ACME Supplies"):
        return supplier_dao.create_supplier(name, contact="Jo", actor="tester")

    return _make
