import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from app import dependencies as deps
from app.errors import BlogError, InternalError
from app.schemas.blog import PostOut
from app.security import Caller, get_caller
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostOut])
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all posts, newest first, with author, category and tags expanded."""
    try:
        return service.list_posts()
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise InternalError(details=str(e))


@router.get("/posts/{post_id}", response_model=PostOut)
def get_post(
    post_id: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by id."""
    try:
        return service.get_post(post_id)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {post_id}: {e}")
        raise InternalError(details=str(e))


@router.post("/posts", response_model=PostOut, status_code=201)
def create_post(
    body: deps.PostRequest = Depends(deps.read_post_request),
    caller: Optional[Caller] = Depends(get_caller),
    service: PostsService = Depends(deps.get_posts_service),
):
    """
    Create a post from a JSON or multipart body.
    An optional ``image`` file becomes the featured image.
    """
    try:
        return service.create_post(body.fields, caller, image=body.image)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error creating post: {e}", exc_info=True)
        raise InternalError(details=str(e))


@router.put("/posts/{post_id}", response_model=PostOut)
def update_post(
    post_id: str,
    body: deps.PostRequest = Depends(deps.read_post_request),
    caller: Optional[Caller] = Depends(get_caller),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Apply the fields present in the body; only the author or an admin may."""
    try:
        return service.update_post(post_id, body.fields, caller, image=body.image)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error updating post {post_id}: {e}", exc_info=True)
        raise InternalError(details=str(e))


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: str,
    caller: Optional[Caller] = Depends(get_caller),
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        service.delete_post(post_id, caller)
        return {"message": "Post deleted"}
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error deleting post {post_id}: {e}")
        raise InternalError(details=str(e))
