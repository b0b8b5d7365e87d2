import asyncio
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from config.database import Database
from services.notification_service import get_sms_service
from crud.user_crud import create_user
from schemas.user import UserCreate, ROLE_SUPER_ADMIN
from main import app

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mock_db(monkeypatch):
    for name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_WHATSAPP_NUMBER"):
        monkeypatch.delenv(name, raising=False)
    get_sms_service.cache_clear()
    Database.db = AsyncMongoMockClient()["test_db"]
    yield Database.db
    get_sms_service.cache_clear()
    Database.db = None


@pytest.fixture
def client():
    # no context manager, so the startup hook never dials a real MongoDB
    return TestClient(app)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    def _register(email, role="user", **profile):
        payload = {"email": email, "password": PASSWORD, "role": role, **profile}
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 200, response.text
        body = response.json()
        return body["access_token"], body["user"]["uid"]
    return _register


@pytest.fixture
def customer(register):
    return register("asha@example.com", full_name="Asha Rao", phone="+919811111111")


@pytest.fixture
def shop(register):
    return register(
        "ravi.salon@example.com",
        role="shopkeeper",
        shop_name="Ravi Hair Studio",
        owner_name="Ravi",
        category="Salon",
        location={"latitude": 12.9716, "longitude": 77.5946},
        timing={"open": "09:00 AM", "close": "09:00 PM"},
        off_days=["Sunday"],
    )


@pytest.fixture
def super_admin(client):
    asyncio.run(create_user(
        UserCreate(email="root@example.com", password=PASSWORD, full_name="Root", role=ROLE_SUPER_ADMIN),
        allow_any_role=True
    ))
    response = client.post("/api/auth/login", json={"email": "root@example.com", "password": PASSWORD})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["access_token"], body["user"]["uid"]
