import json
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic_core import PydanticCustomError

from app.utils import is_valid_doc_id

REQUIRED_POST_FIELDS = ("title", "content", "category", "seo")

# Error types whose message is meant to be shown to the caller as-is
MISSING_REQUIRED = "missing_required"
INVALID_JSON = "invalid_json"
CALLER_FACING_ERRORS = {MISSING_REQUIRED, INVALID_JSON}


def coerce_tags(value: Any) -> Any:
    """Accept tags as a list or as a JSON-encoded list."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise PydanticCustomError(INVALID_JSON, "Invalid tags JSON")
        if not isinstance(value, list):
            raise PydanticCustomError(INVALID_JSON, "Invalid tags JSON")
    return value


def coerce_seo(value: Any) -> Any:
    """Accept SEO metadata as an object or as a JSON-encoded object."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise PydanticCustomError(INVALID_JSON, "Invalid SEO JSON")
        if not isinstance(value, dict):
            raise PydanticCustomError(INVALID_JSON, "Invalid SEO JSON")
    return value


def coerce_published(value: Any) -> Any:
    # null falls through to bool validation and is rejected
    if value is None:
        return value
    return value is True or value == "true"


def check_doc_id(value: str) -> str:
    if not is_valid_doc_id(value):
        raise ValueError(f"{value!r} is not a valid document id")
    return value


DocId = Annotated[str, AfterValidator(check_doc_id)]
TagIds = Annotated[List[DocId], BeforeValidator(coerce_tags)]
SeoObject = Annotated[Dict[str, Any], BeforeValidator(coerce_seo)]
PublishedFlag = Annotated[bool, BeforeValidator(coerce_published)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class PostCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: NonEmptyStr
    slug: Optional[str] = None
    content: NonEmptyStr
    category: DocId
    tags: TagIds = Field(default_factory=list)
    seo: SeoObject
    published: PublishedFlag = False

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, data: Any) -> Any:
        if isinstance(data, dict):
            missing = [f for f in REQUIRED_POST_FIELDS if data.get(f) in (None, "")]
            if missing:
                raise PydanticCustomError(
                    MISSING_REQUIRED,
                    "title, content, category and seo are required",
                    {"missing": ", ".join(missing)},
                )
        return data


class PostUpdate(BaseModel):
    """
    Partial update. Only fields present in the request are applied;
    use ``model_dump(exclude_unset=True)`` to read them.
    """

    model_config = ConfigDict(extra="ignore")

    title: NonEmptyStr = None
    slug: str = None
    content: NonEmptyStr = None
    category: DocId = None
    tags: TagIds = None
    seo: SeoObject = None
    published: PublishedFlag = None


class AuthorRef(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class TermRef(BaseModel):
    id: str
    name: Optional[str] = None
    slug: Optional[str] = None


class PostOut(BaseModel):
    id: str
    title: str
    slug: str
    content: str
    author: Optional[AuthorRef] = None
    category: Optional[TermRef] = None
    tags: List[TermRef] = Field(default_factory=list)
    seo: Dict[str, Any] = Field(default_factory=dict)
    featuredImage: Optional[str] = None
    published: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
