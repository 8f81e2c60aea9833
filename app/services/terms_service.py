import logging
from typing import List, Type

from pydantic import BaseModel

from app.errors import InvalidArgument, Unauthenticated
from app.schemas.taxonomy import TagCreate
from app.settings import Settings, settings
from app.utils import generate_slug, new_doc_id, utc_now

logger = logging.getLogger(__name__)


class TermsService:
    """Create and list one kind of taxonomy term (tags or categories)."""

    def __init__(
        self,
        repo,
        out_model: Type[BaseModel],
        label: str,
        settings_obj: Settings = settings,
    ):
        self.repo = repo
        self.out_model = out_model
        self.label = label
        self.settings = settings_obj

    def list_terms(self) -> List[BaseModel]:
        docs = sorted(
            self.repo.list_terms(), key=lambda doc: (doc.get("name") or "").lower()
        )
        return [self._to_out(doc) for doc in docs]

    def create_term(self, payload: TagCreate, caller) -> BaseModel:
        if caller is None:
            raise Unauthenticated()

        fields = payload.model_dump(exclude={"slug"})
        slug = payload.slug or generate_slug(payload.name, self.settings.SLUG_MAX_LENGTH)
        if not slug:
            raise InvalidArgument(
                f"Invalid {self.label.lower()}",
                details=f"Cannot derive a slug from name {payload.name!r}",
            )

        now = utc_now()
        doc = self.repo.create_term(
            {
                **fields,
                "_id": new_doc_id(),
                "slug": slug,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        logger.info(f"Created {self.label.lower()} {doc['_id']} ({slug})")
        return self._to_out(doc)

    def _to_out(self, doc: dict) -> BaseModel:
        return self.out_model(id=doc["_id"], **_public_fields(doc))


def _public_fields(doc: dict) -> dict:
    return {
        key: value
        for key, value in doc.items()
        if not key.startswith("_") and key != "type"
    }
