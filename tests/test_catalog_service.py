import uuid

import pytest

from catalog.core.exceptions import NotFoundError, StorageUnavailableError, ValidationError
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import CatalogStore
from catalog.services.media_service import MediaAttachment, NoopIngestor


class SerialDeleteFailsStore(CatalogStore):
    def delete_serial(self, serial_id):
        raise StorageUnavailableError("Database unavailable")


class SerialRemovedConcurrentlyStore(CatalogStore):
    def delete_serial(self, serial_id):
        super().delete_serial(serial_id)
        return super().delete_serial(serial_id)


def test_create_serial_requires_name(service):
    for fields in ({}, {"name": ""}, {"name": "   "}, {"name": None}):
        with pytest.raises(ValidationError):
            service.create_serial(fields)
    assert service.list_serials() == []


def test_update_serial_rejects_blank_name(service):
    serial = service.create_serial({"name": "Show A"})
    with pytest.raises(ValidationError):
        service.update_serial(serial.id, {"name": " "})
    assert service.get_serial(serial.id).name == "Show A"


def test_update_missing_serial(service):
    with pytest.raises(NotFoundError):
        service.update_serial(uuid.uuid4(), {"description": "x"})


def test_create_episode_round_trip(service):
    serial = service.create_serial({"name": "Show A"})
    fields = {
        "episode_no": 4,
        "title": "Pilot",
        "description": "First one",
        "redirect_url": "https://watch.example/4",
    }
    created = service.create_episode(serial.id, fields)
    fetched = service.get_episode(created.id)
    assert fetched.serial_id == serial.id
    for key, value in fields.items():
        assert getattr(fetched, key) == value
    assert fetched.image == ""


def test_create_episode_for_missing_serial_writes_nothing(service, store, png, upload_dir):
    with pytest.raises(NotFoundError):
        service.create_episode(uuid.uuid4(), {"title": "orphan"}, png)
    assert store.count_episodes() == 0
    assert not upload_dir.exists()


def test_create_episode_ignores_serial_id_field(service):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"serial_id": uuid.uuid4(), "title": "t"})
    assert episode.serial_id == serial.id


def test_create_episode_stores_image_reference(service, png):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"}, png)
    assert episode.image.startswith("/uploads/episodes/episodes-")


def test_rejected_upload_creates_no_episode(service, store):
    serial = service.create_serial({"name": "Show A"})
    bad = MediaAttachment("payload.exe", "application/x-msdownload", b"MZ")
    with pytest.raises(ValidationError):
        service.create_episode(serial.id, {"title": "t"}, bad)
    assert store.count_episodes() == 0


def test_update_episode_keeps_image_without_attachment(service, png):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"}, png)
    image = episode.image
    updated = service.update_episode(episode.id, {"title": "renamed"})
    assert updated.title == "renamed"
    assert updated.image == image


def test_update_episode_replaces_image_with_attachment(service, png):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"}, png)
    first = episode.image
    updated = service.update_episode(episode.id, {}, png)
    assert updated.image and updated.image != first


def test_update_episode_rejected_upload_changes_nothing(service, png):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"}, png)
    bad = MediaAttachment("payload.exe", "application/x-msdownload", b"MZ")
    with pytest.raises(ValidationError):
        service.update_episode(episode.id, {"title": "changed"}, bad)
    fetched = service.get_episode(episode.id)
    assert fetched.title == "t"
    assert fetched.image == episode.image


def test_update_episode_cannot_move_serial(service):
    serial = service.create_serial({"name": "Show A"})
    other = service.create_serial({"name": "Show B"})
    episode = service.create_episode(serial.id, {"title": "t"})
    updated = service.update_episode(episode.id, {"serial_id": other.id})
    assert updated.serial_id == serial.id


def test_update_missing_episode_uploads_nothing(service, png, upload_dir):
    with pytest.raises(NotFoundError):
        service.update_episode(uuid.uuid4(), {"title": "x"}, png)
    assert not upload_dir.exists()


def test_noop_backend_leaves_image_empty(store, png):
    service = CatalogService(store, NoopIngestor())
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"}, png)
    assert episode.image == ""


def test_delete_serial_cascades(service, store):
    serial = service.create_serial({"name": "Show A"})
    other = service.create_serial({"name": "Show B"})
    for no in range(3):
        service.create_episode(serial.id, {"episode_no": no})
    service.create_episode(other.id, {"episode_no": 1})

    result = service.delete_serial(serial.id)

    assert result.episodes_deleted == 3
    assert result.serial_deleted is True
    assert store.list_episodes_by_serial(serial.id) == []
    with pytest.raises(NotFoundError):
        service.get_serial(serial.id)
    assert len(service.list_episodes(other.id)) == 1


def test_delete_missing_serial(service):
    with pytest.raises(NotFoundError):
        service.delete_serial(uuid.uuid4())


def test_cascade_partial_failure_is_reported(db, ingestor, caplog):
    store = SerialDeleteFailsStore(db)
    service = CatalogService(store, ingestor)
    serial = service.create_serial({"name": "Show A"})
    service.create_episode(serial.id, {"episode_no": 1})

    result = service.delete_serial(serial.id)

    assert result.serial_deleted is False
    assert result.episodes_deleted == 1
    assert service.get_serial(serial.id).name == "Show A"
    assert service.list_episodes(serial.id) == []
    assert "not deleted" in caplog.text


def test_list_episodes_of_missing_serial_is_empty(service):
    assert service.list_episodes(uuid.uuid4()) == []


def test_delete_episode(service):
    serial = service.create_serial({"name": "Show A"})
    episode = service.create_episode(serial.id, {"title": "t"})
    service.delete_episode(episode.id)
    with pytest.raises(NotFoundError):
        service.get_episode(episode.id)
    with pytest.raises(NotFoundError):
        service.delete_episode(episode.id)


def test_serial_removed_by_another_request_counts_as_deleted(db, ingestor):
    service = CatalogService(SerialRemovedConcurrentlyStore(db), ingestor)
    serial = service.create_serial({"name": "Show A"})
    service.create_episode(serial.id, {"episode_no": 1})

    result = service.delete_serial(serial.id)

    assert result.serial_deleted is True
    assert result.episodes_deleted == 1
    with pytest.raises(NotFoundError):
        service.get_serial(serial.id)
