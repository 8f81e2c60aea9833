from typing import List

TAG_TYPE = "tag"
CATEGORY_TYPE = "category"


class CouchTermsRepo:
    """Tags and categories share one document shape, told apart by ``type``."""

    def __init__(self, couch_db, doc_type: str):
        self.db = couch_db
        self.doc_type = doc_type

    def list_terms(self) -> List[dict]:
        all_docs = [row.get("doc", row) for row in self.db.all(include_docs=True)]
        return [doc for doc in all_docs if doc and doc.get("type") == self.doc_type]

    def create_term(self, doc: dict) -> dict:
        return self.db.save({**doc, "type": self.doc_type})
