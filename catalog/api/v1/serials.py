"""Serial and episode endpoints. Reads are public; mutations need an admin token."""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from catalog.core.validation import parse_id
from catalog.dependencies import Catalog, CurrentAdmin
from catalog.schemas.episode import EpisodeResponse, episode_to_response
from catalog.schemas.serial import (
    Envelope,
    SerialCreateBody,
    SerialResponse,
    SerialUpdateBody,
    serial_fields,
    serial_to_response,
)
from catalog.services.media_service import MediaAttachment

router = APIRouter(prefix="/serials", tags=["serials"])


def _attachment(upload: Optional[UploadFile], max_bytes: Optional[int]) -> Optional[MediaAttachment]:
    """
    Buffer an uploaded file; an empty file part counts as no attachment.

    At most max_bytes + 1 bytes are read, enough for the ingestor to reject an
    oversized image without loading all of it.
    """
    if upload is None or not upload.filename:
        return None
    data = upload.file.read(max_bytes + 1) if max_bytes is not None else upload.file.read()
    return MediaAttachment(
        filename=upload.filename,
        mime_type=upload.content_type or "",
        data=data,
    )


def _episode_fields(
    episodeNo: Optional[int],
    title: Optional[str],
    description: Optional[str],
    redirectUrl: Optional[str],
    imageUrl: Optional[str],
) -> dict:
    fields = {
        "episode_no": episodeNo,
        "title": title,
        "description": description,
        "redirect_url": redirectUrl,
        "image": imageUrl,
    }
    return {k: v for k, v in fields.items() if v is not None}


# Episodes (declared first so /episodes/{id} is never read as a serial id)


@router.get("/episodes/{id}", response_model=Envelope[EpisodeResponse])
def episode_get(id: str, catalog: Catalog):
    episode = catalog.get_episode(parse_id(id))
    return Envelope(data=episode_to_response(episode))


@router.put("/episodes/{id}", response_model=Envelope[EpisodeResponse])
def episode_update(
    id: str,
    admin: CurrentAdmin,
    catalog: Catalog,
    episodeNo: Optional[int] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    redirectUrl: Optional[str] = Form(None),
    imageUrl: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    """Partial update; a new image file replaces the stored one, otherwise it is kept."""
    episode = catalog.update_episode(
        parse_id(id),
        _episode_fields(episodeNo, title, description, redirectUrl, imageUrl),
        _attachment(image, catalog.ingestor.max_bytes),
    )
    return Envelope(msg="Episode updated successfully", data=episode_to_response(episode))


@router.delete("/episodes/{id}", response_model=Envelope)
def episode_delete(id: str, admin: CurrentAdmin, catalog: Catalog):
    catalog.delete_episode(parse_id(id))
    return Envelope(msg="Episode deleted successfully")


@router.get("/{id}/episodes", response_model=Envelope[list[EpisodeResponse]])
def episode_list(id: str, catalog: Catalog):
    """Episodes of a serial ordered by episode number."""
    episodes = catalog.list_episodes(parse_id(id, "serial id"))
    return Envelope(data=[episode_to_response(e) for e in episodes])


@router.post("/{id}/episodes", response_model=Envelope[EpisodeResponse])
def episode_create(
    id: str,
    admin: CurrentAdmin,
    catalog: Catalog,
    episodeNo: Optional[int] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    redirectUrl: Optional[str] = Form(None),
    imageUrl: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    episode = catalog.create_episode(
        parse_id(id, "serial id"),
        _episode_fields(episodeNo, title, description, redirectUrl, imageUrl),
        _attachment(image, catalog.ingestor.max_bytes),
    )
    return Envelope(msg="Episode added successfully", data=episode_to_response(episode))


# Serials


@router.get("", response_model=Envelope[list[SerialResponse]])
def serial_list(catalog: Catalog):
    """All serials, newest first."""
    return Envelope(data=[serial_to_response(s) for s in catalog.list_serials()])


@router.get("/{id}", response_model=Envelope[SerialResponse])
def serial_get(id: str, catalog: Catalog):
    serial = catalog.get_serial(parse_id(id))
    return Envelope(data=serial_to_response(serial))


@router.post("", response_model=Envelope[SerialResponse])
def serial_create(body: SerialCreateBody, admin: CurrentAdmin, catalog: Catalog):
    serial = catalog.create_serial(serial_fields(body))
    return Envelope(msg="Serial added successfully", data=serial_to_response(serial))


@router.put("/{id}", response_model=Envelope[SerialResponse])
def serial_update(id: str, body: SerialUpdateBody, admin: CurrentAdmin, catalog: Catalog):
    serial = catalog.update_serial(parse_id(id), serial_fields(body))
    return Envelope(msg="Serial updated successfully", data=serial_to_response(serial))


@router.delete("/{id}", response_model=Envelope)
def serial_delete(id: str, admin: CurrentAdmin, catalog: Catalog):
    """Delete a serial and all of its episodes (episodes first, not atomic)."""
    result = catalog.delete_serial(parse_id(id))
    if not result.serial_deleted:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "msg": f"Deleted {result.episodes_deleted} episodes but the serial could not be removed",
            },
        )
    return Envelope(msg="Serial deleted successfully")
