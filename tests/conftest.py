# tests/conftest.py
import os

# Keep the app's own engine off disk; tests bind their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from config import settings
from database import Base, get_db, json_serializer
from main import app
from models.counter import InvoiceCounter
from models.product import PosProduct
from models.users import User
from utils.hashing import get_password_hash
from utils.submission import tracker
from utils.tokenJWT import create_access_token


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        json_serializer=json_serializer,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def invoice_storage(tmp_path, monkeypatch):
    storage = tmp_path / "invoices"
    monkeypatch.setattr(settings, "INVOICE_STORAGE_DIR", str(storage))
    return storage


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    tracker.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    tracker.reset()


def create_user(db, email, role="ADMIN", admin_id=None, password="secret123"):
    user = User(
        email=email, password_hash=get_password_hash(password), role=role,
        first_name="Thandi", last_name="Mokoena", admin_id=admin_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': user.email, 'role': user.role})}"}


def create_product(db, admin_id, sku, name=None, sell_price=10.0, stock_qty=5, **kwargs):
    product = PosProduct(
        admin_id=admin_id, sku=sku, name=name or f"Product {sku}",
        sell_price=sell_price, stock_qty=stock_qty, purchase_price=kwargs.pop("purchase_price", 4.0),
        **kwargs,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def set_counter(db, admin_id, kind, count):
    counter = InvoiceCounter(admin_id=admin_id, type=kind, count=count)
    db.add(counter)
    db.commit()
    return counter


def stub_product(id, sku="A", stock_qty=5, sell_price=10.0, name=None):
    return SimpleNamespace(id=id, name=name or f"Product {sku}", sku=sku, barcode=None,
                           sell_price=sell_price, stock_qty=stock_qty)


@pytest.fixture
def admin(db):
    return create_user(db, "owner@acme-shop.com")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
