# tests/conftest.py
import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="support-desk-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/test.db"
os.environ["DATA_SOURCE"] = "sql"
os.environ.pop("NOTION_TOKEN", None)
os.environ.pop("NOTION_DATABASE_ID", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import SessionLocal  # noqa: E402
from app.feedback.models import Feedback  # noqa: E402
from app.main import app  # noqa: E402
from app.ticket.models import Ticket  # noqa: E402


@pytest.fixture(autouse=True)
def clean_state():
    yield
    db = SessionLocal()
    try:
        db.query(Ticket).delete()
        db.query(Feedback).delete()
        db.commit()
    finally:
        db.close()
    app.dependency_overrides.clear()
    app.state.data_source = "sql"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
