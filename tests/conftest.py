"""Shared pytest fixtures and configuration."""

import os
from datetime import date

# Set test environment variables before the app reads its configuration
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REDIS_URL"] = ""
os.environ["LOGIN_RATE_LIMIT"] = "5"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import rate_limiter
from app.auth import create_session_token
from app.database import Base, get_db
from app.main import app
from app.models import AgentProperty, Property, User
from app.models_visit import AgentAvailability, Visit
from app.security_utils import hash_password_bcrypt

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def client(session_factory):
    """Test client whose requests use the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role="client", name=None, email=None, password=DEFAULT_PASSWORD, **kwargs):
        counter["n"] += 1
        user = User(
            name=name or f"{role.title()} User {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            password=hash_password_bcrypt(password),
            role=role,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_property(db_session):
    def _make_property(**overrides):
        data = {
            "title": "Bright apartment in the centre",
            "price": 250000,
            "location": "Centro, Malaga",
            "image": "https://example.com/flat.jpg",
            "bedrooms": 2,
            "bathrooms": 1,
            "area": 80,
            "type": "sale",
            "description": "Renovated flat close to the beach",
            "property_type": "Apartment",
            "address": "Calle Larios 1, Malaga",
            "features": ["Lift", "Terrace"],
            "status": "published",
        }
        data.update(overrides)
        prop = Property(**data)
        db_session.add(prop)
        db_session.commit()
        db_session.refresh(prop)
        return prop

    return _make_property


@pytest.fixture
def make_visit(db_session):
    def _make_visit(property_id, client_id, visit_date=date(2024, 1, 10), time="10:00", **overrides):
        data = {
            "property_id": property_id,
            "client_id": client_id,
            "date": visit_date,
            "time": time,
            "type": "in-person",
            "status": "pending",
        }
        data.update(overrides)
        visit = Visit(**data)
        db_session.add(visit)
        db_session.commit()
        db_session.refresh(visit)
        return visit

    return _make_visit


@pytest.fixture
def assign_agent(db_session):
    def _assign(agent_id, property_id):
        db_session.add(AgentProperty(agent_id=agent_id, property_id=property_id))
        db_session.commit()

    return _assign


@pytest.fixture
def save_availability(db_session):
    def _save(agent_id, week_data):
        db_session.add(AgentAvailability(agent_id=agent_id, week_data=week_data))
        db_session.commit()

    return _save


def auth_headers(user):
    token, _ = create_session_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", name="Admin")


@pytest.fixture
def superadmin(make_user):
    return make_user(role="superadmin", name="Super Admin")


@pytest.fixture
def agent(make_user):
    return make_user(role="agent", name="Laura Agent")


@pytest.fixture
def client_user(make_user):
    return make_user(role="client", name="Carlos Client")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def superadmin_headers(superadmin):
    return auth_headers(superadmin)


@pytest.fixture
def agent_headers(agent):
    return auth_headers(agent)


@pytest.fixture
def client_headers(client_user):
    return auth_headers(client_user)
