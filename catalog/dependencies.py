"""FastAPI dependency injection: db session, admin identity, catalog service."""

from collections.abc import Generator
from typing import Annotated, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from catalog.config import Settings
from catalog.core.exceptions import AuthorizationError
from catalog.core.security import decode_token
from catalog.db.base import SessionLocal
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import CatalogStore
from catalog.services.media_service import MediaIngestor

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Provide a DB session; close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_media_ingestor(request: Request) -> MediaIngestor:
    """The ingestion backend built at app creation."""
    return request.app.state.media_ingestor


def get_current_admin(
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> str:
    """Require a valid bearer token; return its subject. Runs before the service is built."""
    if not credentials:
        raise AuthorizationError("Not authenticated")
    payload = decode_token(credentials.credentials, settings)
    subject = payload.get("sub") if payload else None
    if not subject:
        raise AuthorizationError("Invalid or expired token")
    allowed = settings.admin_subjects
    if allowed and subject not in allowed:
        raise AuthorizationError("Insufficient permissions", status_code=status.HTTP_403_FORBIDDEN)
    return subject


def get_catalog_service(
    db: Annotated[Session, Depends(get_db)],
    ingestor: Annotated[MediaIngestor, Depends(get_media_ingestor)],
) -> CatalogService:
    return CatalogService(CatalogStore(db), ingestor)


CurrentAdmin = Annotated[str, Depends(get_current_admin)]
Catalog = Annotated[CatalogService, Depends(get_catalog_service)]
