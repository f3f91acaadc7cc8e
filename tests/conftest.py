import pytest
from fastapi.testclient import TestClient

from event_intake.db.session import Database
from event_intake.main import create_app
from event_intake.services.registrations import FallbackStore

FORM_SUBMIT_JS = """
document.getElementById("registration-form").addEventListener("submit", async (event) => {
  const response = await fetch("http://localhost:8000/register", { method: "POST" });
});
"""


@pytest.fixture
def valid_submission():
    return {
        "firstName": "A",
        "lastName": "B",
        "email": "a@b.com",
        "eventDate": "2025-06-01",
        "guestCount": "50",
    }


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Register your event</h1>", encoding="utf-8")
    (public / "form-submit.js").write_text(FORM_SUBMIT_JS, encoding="utf-8")
    return public


@pytest.fixture
def offline_db():
    db = Database("")
    db.connect()
    return db


@pytest.fixture
def sqlite_db(tmp_path):
    db = Database(f"sqlite:///{tmp_path}/registrations.db")
    status = db.connect()
    assert status.connected, status.error
    yield db
    db.dispose()


@pytest.fixture
def fallback():
    return FallbackStore()


@pytest.fixture
def offline_client(offline_db, fallback, static_dir):
    app = create_app(database=offline_db, fallback=fallback, static_dir=str(static_dir))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def online_client(sqlite_db, fallback, static_dir):
    app = create_app(database=sqlite_db, fallback=fallback, static_dir=str(static_dir))
    with TestClient(app) as client:
        yield client
