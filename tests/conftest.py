# tests/conftest.py
import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure the environment before the app (and its Settings) is imported.
os.environ["TESTING"] = "1"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="bagtag-uploads-"))

from bagtag.api import deps  # noqa: E402
from bagtag.main import create_app  # noqa: E402
from bagtag.services.accounts import AccountService  # noqa: E402
from bagtag.services.delete_confirmation import DeleteConfirmationRegistry  # noqa: E402
from bagtag.services.equipment import EquipmentService  # noqa: E402
from bagtag.services.storage import LocalBlobStore  # noqa: E402
from tests.fakes import FakeClock, FakeExtractor, InMemoryStore  # noqa: E402


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def outbox():
    """Verification tokens "sent" during a test, as (email, token) pairs."""
    return []


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(store, outbox, extractor, clock, tmp_path):
    async def _send(email, token, display_name=None):
        outbox.append((email, token))

    application = create_app()
    application.state.delete_confirmations = DeleteConfirmationRegistry(3.0, clock)
    overrides = application.dependency_overrides
    overrides[deps.get_equipment_service] = lambda: EquipmentService(store.uow_factory)
    overrides[deps.get_account_service] = lambda: AccountService(
        store.uow_factory, send_verification=_send
    )
    overrides[deps.get_blob_store] = lambda: LocalBlobStore(tmp_path, "/uploads")
    overrides[deps.get_extraction_service] = lambda: extractor
    return application


@pytest_asyncio.fixture
async def app_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(app_client, outbox):
    """Sign up, verify and log in; the returned coroutine yields bearer headers."""

    async def _register(email="golfer@example.com", password="secret123"):
        res = await app_client.post(
            "/auth/signup",
            json={"email": email, "password": password, "display_name": "Golfer"},
        )
        assert res.status_code == 201, res.text
        token = next(t for e, t in outbox if e == email)
        res = await app_client.post("/auth/verify", json={"token": token})
        assert res.status_code == 200, res.text
        res = await app_client.post("/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}

    return _register


@pytest_asyncio.fixture
async def auth_headers(register):
    return await register()
