"""SQLAlchemy models - import all for Alembic."""

from catalog.db.base import Base
from catalog.db.models.serial import Serial
from catalog.db.models.episode import Episode

__all__ = [
    "Base",
    "Serial",
    "Episode",
]
