"""One-off script to create a sample serial with two episodes and print an admin token."""
import sys
import os

# Ensure catalog is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catalog.core.security import create_access_token
from catalog.db.base import SessionLocal
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import CatalogStore
from catalog.services.media_service import NoopIngestor


def main():
    db = SessionLocal()
    try:
        service = CatalogService(CatalogStore(db), NoopIngestor())
        serial = service.create_serial({"name": "Sample Serial", "description": "Seeded from scripts/"})
        for no in (1, 2):
            service.create_episode(serial.id, {"episode_no": no, "title": f"Episode {no}"})
        print("Created serial:")
        print(f"  id: {serial.id}")
        print(f"  name: {serial.name}")
        print(f"  episodes: {len(service.list_episodes(serial.id))}")
        print(f"Admin token: {create_access_token('seed-admin')}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
