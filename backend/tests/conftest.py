from io import BytesIO
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.api.deps import get_cache, get_storage
from backend.app.db import Base, get_db
from backend.app.main import app
from backend.app.models import db_models  # noqa: F401
from backend.app.services.auth_service import create_user
from backend.app.services.cache_service import CacheService
from backend.app.services.llm_service import get_llm_service
from backend.app.services.storage_service import StorageService


class FakeCache(CacheService):
    """In-memory stand-in for Redis; TTLs are ignored."""

    def __init__(self):
        self.store = {}

    def get_json(self, key):
        return self.store.get(key)

    def set_json(self, key, value, ttl_seconds):
        self.store[key] = value


def make_pdf(lines):
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    y = 740
    for line in lines:
        c.drawString(72, y, line)
        y -= 16
    c.showPage()
    c.save()
    return buf.getvalue()


SAMPLE_CV_LINES = [
    "Jane Doe - Software Engineer",
    "SUMMARY",
    "Backend developer with five years of experience building web services.",
    "EXPERIENCE",
    "Software Engineer at Initech (2019-2024)",
    "Built REST APIs in Python and maintained CI pipelines.",
    "SKILLS",
    "Python, SQL, Docker",
]


@pytest.fixture
def sample_cv_pdf():
    return make_pdf(SAMPLE_CV_LINES)


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_llm():
    return MagicMock()


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def storage(tmp_path):
    return StorageService(tmp_path)


@pytest.fixture
def client(session_factory, fake_llm, cache, storage):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_llm_service] = lambda: fake_llm
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_and_token(db):
    return create_user(db, "alice@example.com", username="alice")


@pytest.fixture
def auth_headers(user_and_token):
    return {"Authorization": f"Bearer {user_and_token[1]}"}


@pytest.fixture
def other_auth_headers(db):
    _, token = create_user(db, "bob@example.com", username="bob")
    return {"Authorization": f"Bearer {token}"}
