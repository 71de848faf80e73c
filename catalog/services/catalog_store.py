"""Raw CRUD over the serials and episodes tables. No business rules here."""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.core.exceptions import StorageUnavailableError
from catalog.db.models.episode import Episode
from catalog.db.models.serial import Serial

logger = logging.getLogger(__name__)


def _apply_fields(record: Any, fields: Mapping[str, Any], allowed: tuple) -> None:
    for k, v in fields.items():
        if k in allowed:
            setattr(record, k, v)


class CatalogStore:
    """Single-table operations; every mutation commits its own transaction."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, op: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store operation %s failed: %s", op, e, exc_info=True)
            raise StorageUnavailableError("Database unavailable")

    # Serials

    def list_serials(self) -> list[Serial]:
        with self._guard("list_serials"):
            return self.db.query(Serial).order_by(Serial.created_at.desc()).all()

    def get_serial(self, serial_id: uuid.UUID) -> Optional[Serial]:
        with self._guard("get_serial"):
            return self.db.get(Serial, serial_id)

    def create_serial(self, fields: Mapping[str, Any]) -> Serial:
        serial = Serial(id=uuid.uuid4())
        _apply_fields(serial, fields, Serial.UPDATABLE_FIELDS)
        with self._guard("create_serial"):
            self.db.add(serial)
            self.db.commit()
            self.db.refresh(serial)
        return serial

    def update_serial(self, serial_id: uuid.UUID, fields: Mapping[str, Any]) -> Optional[Serial]:
        with self._guard("update_serial"):
            serial = self.db.get(Serial, serial_id)
            if serial is None:
                return None
            _apply_fields(serial, fields, Serial.UPDATABLE_FIELDS)
            self.db.commit()
            self.db.refresh(serial)
        return serial

    def delete_serial(self, serial_id: uuid.UUID) -> bool:
        with self._guard("delete_serial"):
            deleted = self.db.query(Serial).filter(Serial.id == serial_id).delete()
            self.db.commit()
        return deleted > 0

    # Episodes

    def list_episodes_by_serial(self, serial_id: uuid.UUID) -> list[Episode]:
        with self._guard("list_episodes_by_serial"):
            return (
                self.db.query(Episode)
                .filter(Episode.serial_id == serial_id)
                .order_by(Episode.episode_no.asc().nulls_last(), Episode.created_at.asc())
                .all()
            )

    def get_episode(self, episode_id: uuid.UUID) -> Optional[Episode]:
        with self._guard("get_episode"):
            return self.db.get(Episode, episode_id)

    def create_episode(self, serial_id: uuid.UUID, fields: Mapping[str, Any]) -> Episode:
        episode = Episode(id=uuid.uuid4(), serial_id=serial_id)
        _apply_fields(episode, fields, Episode.UPDATABLE_FIELDS)
        with self._guard("create_episode"):
            self.db.add(episode)
            self.db.commit()
            self.db.refresh(episode)
        return episode

    def update_episode(self, episode_id: uuid.UUID, fields: Mapping[str, Any]) -> Optional[Episode]:
        with self._guard("update_episode"):
            episode = self.db.get(Episode, episode_id)
            if episode is None:
                return None
            _apply_fields(episode, fields, Episode.UPDATABLE_FIELDS)
            self.db.commit()
            self.db.refresh(episode)
        return episode

    def delete_episode(self, episode_id: uuid.UUID) -> bool:
        with self._guard("delete_episode"):
            deleted = self.db.query(Episode).filter(Episode.id == episode_id).delete()
            self.db.commit()
        return deleted > 0

    def delete_episodes_by_serial(self, serial_id: uuid.UUID) -> int:
        """Bulk delete used by the cascading serial delete."""
        with self._guard("delete_episodes_by_serial"):
            deleted = (
                self.db.query(Episode)
                .filter(Episode.serial_id == serial_id)
                .delete()
            )
            self.db.commit()
        return deleted

    def count_episodes(self) -> int:
        with self._guard("count_episodes"):
            return self.db.query(Episode).count()
