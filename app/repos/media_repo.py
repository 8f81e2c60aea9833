from typing import Optional

import pycouchdb

from app.utils import new_doc_id, utc_now

MEDIA_TYPE = "media"


class CouchMediaRepo:
    """Uploaded files, stored as attachments on ``media`` documents."""

    def __init__(self, couch_db):
        self.db = couch_db

    def store(
        self, filename: str, content: bytes, content_type: str, folder: str
    ) -> dict:
        doc = self.db.save(
            {
                "_id": new_doc_id(),
                "type": MEDIA_TYPE,
                "folder": folder,
                "filename": filename,
                "contentType": content_type,
                "size": len(content),
                "createdAt": utc_now(),
            }
        )
        return self.db.put_attachment(
            doc, content, filename=filename, content_type=content_type
        )

    def get_media(self, media_id: str) -> Optional[dict]:
        try:
            doc = self.db.get(media_id)
        except pycouchdb.exceptions.NotFound:
            return None
        return doc if doc.get("type") == MEDIA_TYPE else None

    def read(self, doc: dict, filename: str) -> Optional[bytes]:
        try:
            return self.db.get_attachment(doc, filename)
        except pycouchdb.exceptions.NotFound:
            return None
