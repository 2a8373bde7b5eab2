from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from alumni_connect.core.auth import create_access_token
from alumni_connect.db.database import create_store_engine, init_db
from alumni_connect.db.record_store import RecordStore, get_record_store
from alumni_connect.db.tables import messages, users
from alumni_connect.main import app
from alumni_connect.schemas.schemas import CurrentUser

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    engine = create_store_engine(f"sqlite:///{tmp_path / 'messages.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return RecordStore(engine, timeout=5)


@pytest.fixture
def add_user(engine):
    """Insert a user directly and return them as the services see callers."""
    seq = count(1)

    def _add(full_name: str, role: str, email: str = None, is_active: bool = True) -> CurrentUser:
        email = email or f"user{next(seq)}@campus.edu"
        with engine.begin() as conn:
            user_id = conn.execute(
                insert(users).values(
                    full_name=full_name, email=email, password_hash="not-a-hash",
                    role=role, is_active=is_active,
                ).returning(users.c.id)
            ).scalar_one()
        return CurrentUser(id=user_id, role=role, full_name=full_name, email=email)

    return _add


@pytest.fixture
def add_message(engine):
    """Insert a message ``minutes`` after BASE_TIME."""

    def _add(sender: CurrentUser, recipient: CurrentUser, body: str = "hi",
             minutes: int = 0, is_read: bool = False) -> int:
        at = BASE_TIME + timedelta(minutes=minutes)
        with engine.begin() as conn:
            return conn.execute(
                insert(messages).values(
                    sender_id=sender.id, recipient_id=recipient.id, body=body,
                    is_read=is_read, created_at=at, updated_at=at,
                ).returning(messages.c.id)
            ).scalar_one()

    return _add


@pytest.fixture
def client(store):
    app.dependency_overrides[get_record_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: CurrentUser) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}
