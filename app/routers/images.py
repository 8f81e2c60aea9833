import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app import dependencies as deps
from app.errors import NotFound
from app.services.image_service import MediaService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/images/{media_id}/{filename}")
def get_image(
    media_id: str,
    filename: str,
    service: MediaService = Depends(deps.get_media_service),
):
    """
    Serve uploaded images directly from CouchDB
    """
    image_data, content_type = service.fetch(media_id, filename)

    if not image_data or not content_type:
        raise NotFound("Image not found")

    # Set proper content length header
    headers = {
        "Content-Length": str(len(image_data)),
        "Accept-Ranges": "bytes",
    }

    return Response(content=image_data, media_type=content_type, headers=headers)
