import json
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from app.db.couchdb import get_couch
from app.errors import InvalidArgument
from app.repos.media_repo import CouchMediaRepo
from app.repos.posts_repo import CouchPostsRepo
from app.repos.terms_repo import CATEGORY_TYPE, TAG_TYPE, CouchTermsRepo
from app.schemas.taxonomy import CategoryOut, TagOut
from app.security import get_settings
from app.services.image_service import MediaService, UploadedImage
from app.services.posts_service import PostsService
from app.services.terms_service import TermsService
from app.settings import Settings

IMAGE_FIELD = "image"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def get_posts_repo(couch=Depends(get_couch)):
    return CouchPostsRepo(couch)


def get_media_repo(couch=Depends(get_couch)):
    return CouchMediaRepo(couch)


def get_media_service(
    repo=Depends(get_media_repo),
    current_settings: Settings = Depends(get_settings),
):
    return MediaService(repo, current_settings)


def get_posts_service(
    repo=Depends(get_posts_repo),
    media_service=Depends(get_media_service),
):
    return PostsService(repo=repo, media_service=media_service)


def get_tags_service(couch=Depends(get_couch)):
    return TermsService(CouchTermsRepo(couch, TAG_TYPE), TagOut, "Tag")


def get_categories_service(couch=Depends(get_couch)):
    return TermsService(CouchTermsRepo(couch, CATEGORY_TYPE), CategoryOut, "Category")


@dataclass
class PostRequest:
    fields: dict = field(default_factory=dict)
    image: Optional[UploadedImage] = None


async def read_post_request(
    request: Request, current_settings: Settings = Depends(get_settings)
) -> PostRequest:
    """
    Read a post payload sent either as JSON or as a form, with an optional
    image file in the ``image`` field. Repeated form fields become lists.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        return await _read_form(request, current_settings.MEDIA_MAX_BYTES)

    body = await request.body()
    if not body:
        return PostRequest()
    try:
        fields = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidArgument("Invalid JSON body", details=str(e))
    if not isinstance(fields, dict):
        raise InvalidArgument("Request body must be a JSON object")
    return PostRequest(fields=fields)


async def _read_form(request: Request, max_image_bytes: int) -> PostRequest:
    form = await request.form()
    fields: dict = {}
    image = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == IMAGE_FIELD and value.filename:
                image = UploadedImage(
                    filename=value.filename,
                    # stops one byte past the limit; the media service rejects it
                    content=await value.read(max_image_bytes + 1),
                )
            continue
        if key in fields:
            existing = fields[key]
            fields[key] = (existing if isinstance(existing, list) else [existing]) + [
                value
            ]
        else:
            fields[key] = value
    return PostRequest(fields=fields, image=image)
