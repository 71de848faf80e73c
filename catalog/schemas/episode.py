"""Episode schemas (camelCase for FE contract)."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class EpisodeResponse(BaseModel):
    """Episode as returned by API."""

    id: UUID
    serialId: UUID
    episodeNo: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    redirectUrl: Optional[str] = None
    createdAt: datetime


def episode_to_response(ep) -> EpisodeResponse:
    return EpisodeResponse(
        id=ep.id,
        serialId=ep.serial_id,
        episodeNo=ep.episode_no,
        title=ep.title,
        description=ep.description,
        image=ep.image,
        redirectUrl=ep.redirect_url,
        createdAt=ep.created_at,
    )
