import pytest
from fastapi.testclient import TestClient

import main
from config import Settings, get_settings
from database import get_database
from fake_supabase import FakeSupabase

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        admin_token=ADMIN_TOKEN,
        contacts_file=str(tmp_path / "data" / "contacts.json"),
    )


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def make_client(settings):
    def _make(db):
        main.app.dependency_overrides[get_settings] = lambda: settings
        main.app.dependency_overrides[get_database] = lambda: db
        return TestClient(main.app)

    yield _make
    main.app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, fake_db):
    """API backed by the in-memory Supabase fake."""
    return make_client(fake_db)


@pytest.fixture
def file_client(make_client):
    """API with no hosted store configured."""
    return make_client(None)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
