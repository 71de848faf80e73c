"""Catalog orchestration: existence checks, media ingestion and cascade ordering."""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from catalog.core.exceptions import NotFoundError, StorageUnavailableError
from catalog.core.validation import require_non_empty
from catalog.db.models.episode import Episode
from catalog.db.models.serial import Serial
from catalog.services.catalog_store import CatalogStore
from catalog.services.media_service import MediaAttachment, MediaIngestor

logger = logging.getLogger(__name__)

EPISODE_MEDIA_CATEGORY = "episodes"


@dataclass
class CascadeDeleteResult:
    episodes_deleted: int
    serial_deleted: bool


class CatalogService:
    """Entry point for API handlers. Store and ingestor are long-lived handles."""

    def __init__(self, store: CatalogStore, ingestor: MediaIngestor):
        self.store = store
        self.ingestor = ingestor

    def _require_serial(self, serial_id: uuid.UUID) -> Serial:
        serial = self.store.get_serial(serial_id)
        if serial is None:
            raise NotFoundError("Serial not found")
        return serial

    def _require_episode(self, episode_id: uuid.UUID) -> Episode:
        episode = self.store.get_episode(episode_id)
        if episode is None:
            raise NotFoundError("Episode not found")
        return episode

    # Serials

    def list_serials(self) -> list[Serial]:
        return self.store.list_serials()

    def get_serial(self, serial_id: uuid.UUID) -> Serial:
        return self._require_serial(serial_id)

    def create_serial(self, fields: Mapping[str, Any]) -> Serial:
        require_non_empty(fields, "name")
        return self.store.create_serial(fields)

    def update_serial(self, serial_id: uuid.UUID, fields: Mapping[str, Any]) -> Serial:
        if "name" in fields:
            require_non_empty(fields, "name")
        serial = self.store.update_serial(serial_id, fields)
        if serial is None:
            raise NotFoundError("Serial not found")
        return serial

    def delete_serial(self, serial_id: uuid.UUID) -> CascadeDeleteResult:
        """
        Delete a serial and its episodes, episodes first.

        The two deletes are separate transactions. If the serial delete fails
        after the episodes are gone, the serial is left without episodes; that
        is logged and reported in the result instead of raised. A serial that
        disappeared between the two phases counts as deleted.
        """
        self._require_serial(serial_id)
        removed = self.store.delete_episodes_by_serial(serial_id)
        logger.info("Deleted %d episodes of serial %s", removed, serial_id)
        try:
            deleted = self.store.delete_serial(serial_id)
        except StorageUnavailableError as e:
            logger.error(
                "Serial %s not deleted after its %d episodes were removed: %s",
                serial_id,
                removed,
                e,
            )
            return CascadeDeleteResult(episodes_deleted=removed, serial_deleted=False)
        if not deleted:
            logger.info("Serial %s was already removed by another request", serial_id)
        return CascadeDeleteResult(episodes_deleted=removed, serial_deleted=True)

    # Episodes

    def list_episodes(self, serial_id: uuid.UUID) -> list[Episode]:
        """Empty for a serial with no episodes, including one that no longer exists."""
        return self.store.list_episodes_by_serial(serial_id)

    def get_episode(self, episode_id: uuid.UUID) -> Episode:
        return self._require_episode(episode_id)

    def create_episode(
        self,
        serial_id: uuid.UUID,
        fields: Mapping[str, Any],
        attachment: Optional[MediaAttachment] = None,
    ) -> Episode:
        self._require_serial(serial_id)
        payload = dict(fields)
        payload.pop("serial_id", None)
        image = self.ingestor.ingest(attachment, EPISODE_MEDIA_CATEGORY)
        if image or "image" not in payload:
            payload["image"] = image
        return self.store.create_episode(serial_id, payload)

    def update_episode(
        self,
        episode_id: uuid.UUID,
        fields: Mapping[str, Any],
        attachment: Optional[MediaAttachment] = None,
    ) -> Episode:
        self._require_episode(episode_id)
        payload = dict(fields)
        payload.pop("serial_id", None)  # moving episodes between serials is not supported
        image = self.ingestor.ingest(attachment, EPISODE_MEDIA_CATEGORY)
        if image:
            payload["image"] = image
        episode = self.store.update_episode(episode_id, payload)
        if episode is None:
            raise NotFoundError("Episode not found")
        return episode

    def delete_episode(self, episode_id: uuid.UUID) -> None:
        if not self.store.delete_episode(episode_id):
            raise NotFoundError("Episode not found")
