import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MEDIA_BACKEND", "none")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.config import Settings
from catalog.core.security import create_access_token
from catalog.db.models import Base
from catalog.dependencies import get_db
from catalog.main import create_app
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import CatalogStore
from catalog.services.media_service import LocalDiskIngestor, MediaAttachment

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def store(db) -> CatalogStore:
    return CatalogStore(db)


@pytest.fixture(scope="function")
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture(scope="function")
def ingestor(upload_dir) -> LocalDiskIngestor:
    return LocalDiskIngestor(str(upload_dir), url_prefix="/uploads", max_bytes=1024)


@pytest.fixture(scope="function")
def service(store, ingestor) -> CatalogService:
    return CatalogService(store, ingestor)


@pytest.fixture(scope="function")
def png() -> MediaAttachment:
    return MediaAttachment(filename="cover.png", mime_type="image/png", data=PNG_BYTES)


@pytest.fixture(scope="function")
def app(session_factory, upload_dir):
    settings = Settings(
        database_url="sqlite://",
        media_backend="local",
        media_upload_dir=str(upload_dir),
        media_url_prefix="/uploads",
    )
    app = create_app(settings)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('admin')}"}
