import logging
from typing import Dict, Iterable, List, Optional

import pycouchdb

from app.errors import Conflict

logger = logging.getLogger(__name__)

POST_TYPE = "post"


class CouchPostsRepo:
    """Post documents plus lookups of the documents they reference."""

    def __init__(self, couch_db):
        self.db = couch_db

    def list_posts(self) -> List[dict]:
        all_docs = [row.get("doc", row) for row in self.db.all(include_docs=True)]
        return [doc for doc in all_docs if doc and doc.get("type") == POST_TYPE]

    def get_post(self, post_id: str) -> Optional[dict]:
        try:
            doc = self.db.get(post_id)
        except pycouchdb.exceptions.NotFound:
            return None
        return doc if doc.get("type") == POST_TYPE else None

    def get_docs(self, doc_ids: Iterable[str]) -> Dict[str, dict]:
        """Fetch several documents in one round trip, skipping missing ones."""
        keys = list(dict.fromkeys(doc_id for doc_id in doc_ids if doc_id))
        if not keys:
            return {}
        rows = self.db.all(keys=keys, include_docs=True)
        docs = (row.get("doc") for row in rows)
        return {doc["_id"]: doc for doc in docs if doc}

    def create_post(self, doc: dict) -> dict:
        return self.db.save(doc)

    def save_post(self, doc: dict) -> dict:
        """Write back a loaded post; fails if it changed since it was read."""
        try:
            return self.db.save(doc)
        except pycouchdb.exceptions.Conflict as e:
            logger.warning(f"Revision conflict saving post {doc.get('_id')}: {e}")
            raise Conflict("Post was modified concurrently, reload and retry")

    def delete_post(self, doc: dict) -> None:
        """Delete a loaded post; fails if it changed since it was read."""
        tombstone = {"_id": doc["_id"], "_rev": doc["_rev"], "_deleted": True}
        try:
            self.db.save(tombstone)
        except pycouchdb.exceptions.Conflict as e:
            logger.warning(f"Revision conflict deleting post {doc['_id']}: {e}")
            raise Conflict("Post was modified concurrently, reload and retry")
