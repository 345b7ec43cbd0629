import itertools
import os
from datetime import datetime, timedelta, timezone

# Settings читаются при импорте пакета — окружение задаём до него
os.environ["JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_INITIAL_PASSWORD"] = "admin123"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT"] = "1000/minute"
os.environ["FORCE_PASSWORD_ROTATION"] = "true"
os.environ["SMTP_HOST"] = "smtp.test"
os.environ["SMTP_USER"] = ""
os.environ["FROM_EMAIL"] = "owner@example.com"
os.environ["CONTACT_RECIPIENT"] = ""

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from portfolio_api.core.database import MongoStore  # noqa: E402
from portfolio_api.main import create_app  # noqa: E402

NEW_PASSWORD = "n3w-passw0rd"


@pytest.fixture
def store() -> MongoStore:
    return MongoStore(db_name="portfolio_test", client=mongomock.MongoClient(tz_aware=True))


@pytest.fixture
def clock():
    """Часы, которые сдвигаются на секунду при каждом вызове."""
    ticks = itertools.count()
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return lambda: base + timedelta(seconds=next(ticks))


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c


@pytest.fixture
def initial_token(client) -> str:
    """Токен сразу после bootstrap: пароль ещё не сменён."""
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def admin_headers(client, initial_token) -> dict:
    """Заголовки администратора, уже прошедшего обязательную смену пароля."""
    resp = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "admin123", "newPassword": NEW_PASSWORD},
        headers={"Authorization": f"Bearer {initial_token}"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
