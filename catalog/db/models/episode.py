"""Episode model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base


class Episode(Base):
    __tablename__ = "episodes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    # No ForeignKey: the service checks the parent serial exists.
    serial_id: Mapped[uuid.UUID] = mapped_column(
        "serialId",
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )
    episode_no: Mapped[Optional[int]] = mapped_column("episodeNo", Integer, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    redirect_url: Mapped[Optional[str]] = mapped_column("redirectUrl", String(2048), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    UPDATABLE_FIELDS = ("episode_no", "title", "description", "image", "redirect_url")
