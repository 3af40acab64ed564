"""
Pytest configuration and fixtures for the Gudang SAJ API tests.
"""
import os

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-only"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.branch import Branch
from models.category import InboundCategory, OutboundCategory
from models.product import Product
from models.profile import Profile, ROLE_SUPERADMIN, ROLE_USER
from utils.tokenJWT import create_access_token

PASSWORD = "rahasia123"
# Cheap hash, shared by every test profile
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    def _make(email: str, role: str = ROLE_USER, name: str = "Tester") -> Profile:
        profile = Profile(email=email, password_hash=PASSWORD_HASH, name=name, role=role)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


def bearer(profile: Profile) -> dict:
    token = create_access_token(data={"sub": profile.email, "role": profile.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(make_profile):
    return make_profile("budi@gudang.co.id", name="Budi")


@pytest.fixture
def other_user(make_profile):
    return make_profile("siti@gudang.co.id", name="Siti")


@pytest.fixture
def admin(make_profile):
    return make_profile("admin@gudang.co.id", role=ROLE_SUPERADMIN, name="Admin")


@pytest.fixture
def user_headers(user):
    return bearer(user)


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def branch(db):
    row = Branch(name="Cabang Bandung")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def outbound_category(db):
    row = OutboundCategory(name="Transfer", description="Kirim ke cabang")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def inbound_categories(db):
    rows = {
        "SUPPLIER": InboundCategory(code="SUPPLIER", name="SUPPLIER"),
        "RETUR_CABANG": InboundCategory(code="RETUR_CABANG", name="RETUR CABANG"),
        "RETUR_KONSUMEN": InboundCategory(code="RETUR_KONSUMEN", name="RETUR KONSUMEN"),
    }
    db.add_all(rows.values())
    db.commit()
    for row in rows.values():
        db.refresh(row)
    return rows


@pytest.fixture
def make_product(db):
    def _make(owner: Profile, name: str, variant=None) -> Product:
        product = Product(name=name, variant=variant, owner_id=owner.id)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make
