import os
from datetime import date

import pytest

# Use in-memory sqlite for tests; must be set before the app (and engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from fastapi.testclient import TestClient  # noqa: E402

from fittrack.api.deps import get_today  # noqa: E402
from fittrack.db import Base, SessionLocal, engine  # noqa: E402
from fittrack.main import app  # noqa: E402

# A Friday
TODAY = date(2024, 3, 15)
USER = "user-1"


@pytest.fixture(autouse=True)
def _fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        c.headers.update({"X-User-Id": USER})
        yield c
    app.dependency_overrides.clear()
