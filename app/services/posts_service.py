import logging
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.errors import Forbidden, InvalidArgument, NotFound, Unauthenticated
from app.repos.posts_repo import POST_TYPE
from app.repos.terms_repo import CATEGORY_TYPE, TAG_TYPE
from app.schemas.blog import (
    CALLER_FACING_ERRORS,
    AuthorRef,
    PostCreate,
    PostOut,
    PostUpdate,
    TermRef,
)
from app.security import Caller
from app.services.image_service import UploadedImage
from app.settings import Settings, settings
from app.utils import generate_slug, is_valid_doc_id, new_doc_id, utc_now

logger = logging.getLogger(__name__)

USER_TYPE = "user"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PostsService:
    def __init__(self, repo, media_service, settings_obj: Settings = settings):
        self.repo = repo
        self.media_service = media_service
        self.settings = settings_obj

    def list_posts(self) -> List[PostOut]:
        docs = self.repo.list_posts()
        docs.sort(key=lambda doc: doc.get("createdAt") or "", reverse=True)
        refs = self.repo.get_docs(_referenced_ids(docs))
        return [expand_post(doc, refs) for doc in docs]

    def get_post(self, post_id: str) -> PostOut:
        doc = self._load(post_id)
        refs = self.repo.get_docs(_referenced_ids([doc]))
        return expand_post(doc, refs)

    def create_post(
        self,
        payload: dict,
        caller: Optional[Caller],
        image: Optional[UploadedImage] = None,
    ) -> PostOut:
        fields = parse_payload(PostCreate, payload)
        if caller is None:
            raise Unauthenticated()
        self._require_author(caller.id)
        self._require_category(fields.category)

        now = utc_now()
        doc = {
            "_id": new_doc_id(),
            "type": POST_TYPE,
            "title": fields.title,
            "slug": fields.slug or self._slug_for(fields.title),
            "content": fields.content,
            "author": caller.id,
            "category": fields.category,
            "tags": fields.tags,
            "seo": fields.seo,
            "featuredImage": None,
            "published": fields.published,
            "createdAt": now,
            "updatedAt": now,
        }
        if image is not None:
            doc["featuredImage"] = self.media_service.upload(image)

        saved = self.repo.create_post(doc)
        logger.info(f"Post {saved['_id']} ({saved['slug']}) created by {caller.id}")
        return self.get_post(saved["_id"])

    def update_post(
        self,
        post_id: str,
        payload: dict,
        caller: Optional[Caller],
        image: Optional[UploadedImage] = None,
    ) -> PostOut:
        doc = self._load_for_change(post_id, caller)
        changes = parse_payload(PostUpdate, payload).model_dump(exclude_unset=True)

        if "category" in changes and changes["category"] != doc.get("category"):
            self._require_category(changes["category"])
        if "slug" in changes and not changes["slug"]:
            changes["slug"] = self._slug_for(changes.get("title", doc["title"]))

        doc.update(changes)
        if image is not None:
            doc["featuredImage"] = self.media_service.upload(image)
        doc["updatedAt"] = utc_now()

        self.repo.save_post(doc)
        logger.info(f"Post {post_id} updated by {caller.id}: {sorted(changes)}")
        return self.get_post(post_id)

    def delete_post(self, post_id: str, caller: Optional[Caller]) -> None:
        doc = self._load_for_change(post_id, caller)
        self.repo.delete_post(doc)
        logger.info(f"Post {post_id} deleted by {caller.id}")

    def _load(self, post_id: str) -> dict:
        if not is_valid_doc_id(post_id):
            raise InvalidArgument("Invalid ID")
        doc = self.repo.get_post(post_id)
        if not doc:
            raise NotFound("Post not found")
        return doc

    def _load_for_change(self, post_id: str, caller: Optional[Caller]) -> dict:
        """Load a post the caller intends to modify, enforcing ownership."""
        if not is_valid_doc_id(post_id):
            raise InvalidArgument("Invalid ID")
        if caller is None:
            raise Unauthenticated()
        doc = self._load(post_id)
        if not caller.can_modify(doc.get("author")):
            logger.warning(f"Caller {caller.id} may not modify post {post_id}")
            raise Forbidden()
        return doc

    def _require_author(self, user_id: str) -> None:
        found = self.repo.get_docs([user_id]).get(user_id)
        if not found or found.get("type") != USER_TYPE:
            logger.warning(f"Rejected post from unknown user {user_id}")
            raise Unauthenticated(details=f"Unknown user {user_id}")

    def _require_category(self, category_id: str) -> None:
        found = self.repo.get_docs([category_id]).get(category_id)
        if not found or found.get("type") != CATEGORY_TYPE:
            raise InvalidArgument(
                "Invalid category", details=f"Category {category_id} does not exist"
            )

    def _slug_for(self, title: str) -> str:
        slug = generate_slug(title, self.settings.SLUG_MAX_LENGTH)
        if not slug:
            raise InvalidArgument(
                "Invalid slug", details=f"Cannot derive a slug from title {title!r}"
            )
        return slug


def parse_payload(model: Type[ModelT], payload: dict) -> ModelT:
    """Validate a raw request payload, turning failures into InvalidArgument."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"])
        if first["type"] in CALLER_FACING_ERRORS:
            summary = first["msg"]
        else:
            summary = f"Invalid {field}" if field else "Invalid data"
        details = "; ".join(_describe_error(error) for error in errors)
        raise InvalidArgument(summary, details=details)


def _describe_error(error: dict) -> str:
    field = ".".join(str(part) for part in error["loc"])
    missing = (error.get("ctx") or {}).get("missing")
    if missing:
        return f"missing: {missing}"
    return f"{field}: {error['msg']}" if field else error["msg"]


def _referenced_ids(docs: List[dict]) -> List[str]:
    ids = []
    for doc in docs:
        ids.append(doc.get("author"))
        ids.append(doc.get("category"))
        ids.extend(doc.get("tags") or [])
    return ids


def expand_post(doc: dict, refs: Dict[str, dict]) -> PostOut:
    """Replace reference ids with projections of the referenced documents."""
    tags = [_term_ref(refs.get(tag_id), TAG_TYPE) for tag_id in doc.get("tags") or []]
    return PostOut(
        id=doc["_id"],
        title=doc["title"],
        slug=doc["slug"],
        content=doc["content"],
        author=_author_ref(refs.get(doc.get("author"))),
        category=_term_ref(refs.get(doc.get("category")), CATEGORY_TYPE),
        tags=[tag for tag in tags if tag],
        seo=doc.get("seo") or {},
        featuredImage=doc.get("featuredImage"),
        published=bool(doc.get("published", False)),
        createdAt=doc.get("createdAt"),
        updatedAt=doc.get("updatedAt"),
    )


def _author_ref(user: Optional[dict]) -> Optional[AuthorRef]:
    if not user or user.get("type") != USER_TYPE:
        return None
    return AuthorRef(id=user["_id"], name=user.get("name"), email=user.get("email"))


def _term_ref(term: Optional[dict], doc_type: str) -> Optional[TermRef]:
    if not term or term.get("type") != doc_type:
        return None
    return TermRef(id=term["_id"], name=term.get("name"), slug=term.get("slug"))
