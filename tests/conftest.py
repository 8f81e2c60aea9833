import copy
import uuid

import pycouchdb


class FakeCouchDB:
    """
    Minimal in-memory CouchDB stand-in with revision checks on save.
    Set track_calls=True to record the order of get() calls.
    """

    def __init__(self, docs: dict | None = None, track_calls: bool = False):
        self.docs = docs if docs is not None else {}
        self.track_calls = track_calls
        self.calls = []
        self.saves = 0

    def get(self, doc_id: str) -> dict:
        if self.track_calls:
            self.calls.append(doc_id)
        if doc_id not in self.docs:
            raise pycouchdb.exceptions.NotFound(doc_id)
        return copy.deepcopy(self.docs[doc_id])

    def all(self, include_docs: bool = True, keys=None):
        if self.track_calls:
            self.calls.append(f"all(include_docs={include_docs})")
        if keys is not None:
            return [
                {"key": key, "doc": copy.deepcopy(self.docs[key])}
                if key in self.docs
                else {"key": key, "error": "not_found"}
                for key in keys
            ]
        if include_docs:
            return [{"doc": copy.deepcopy(doc)} for doc in self.docs.values()]
        return list(self.docs.values())

    def save(self, doc: dict) -> dict:
        doc = copy.deepcopy(doc)
        doc_id = doc.setdefault("_id", uuid.uuid4().hex)
        current = self.docs.get(doc_id)
        current_rev = current.get("_rev") if current else None
        if doc.get("_rev") != current_rev:
            raise pycouchdb.exceptions.Conflict("Document update conflict.")

        self.saves += 1
        doc["_rev"] = f"{self.saves}-{uuid.uuid4().hex[:8]}"
        if doc.get("_deleted"):
            del self.docs[doc_id]
            return doc
        self.docs[doc_id] = copy.deepcopy(doc)
        return doc

    def put_attachment(self, doc, content, filename=None, content_type=None):
        stored = self.docs[doc["_id"]]
        stored.setdefault("_attachments", {})[filename] = {
            "content_type": content_type,
            "data": content,
        }
        return copy.deepcopy(stored)

    def get_attachment(self, doc, filename, stream=False):
        try:
            return self.docs[doc["_id"]]["_attachments"][filename]["data"]
        except KeyError:
            raise pycouchdb.exceptions.NotFound(filename)


# --- Document factories ---

USER_ID = "a" * 32
OTHER_USER_ID = "b" * 32
ADMIN_ID = "c" * 32
CATEGORY_ID = "d" * 32
OTHER_CATEGORY_ID = "e" * 32
TAG_ID = "f" * 32
OTHER_TAG_ID = "1" * 32


def seeded_docs() -> dict:
    """Users, categories and tags that posts can reference."""
    docs = [
        {"_id": USER_ID, "type": "user", "name": "Ada", "email": "ada@example.com", "role": "author"},
        {"_id": OTHER_USER_ID, "type": "user", "name": "Bob", "email": "bob@example.com", "role": "author"},
        {"_id": ADMIN_ID, "type": "user", "name": "Root", "email": "root@example.com", "role": "admin"},
        {"_id": CATEGORY_ID, "type": "category", "name": "News", "slug": "news"},
        {"_id": OTHER_CATEGORY_ID, "type": "category", "name": "Guides", "slug": "guides"},
        {"_id": TAG_ID, "type": "tag", "name": "Python", "slug": "python"},
        {"_id": OTHER_TAG_ID, "type": "tag", "name": "FastAPI", "slug": "fastapi"},
    ]
    return {doc["_id"]: {**doc, "_rev": "1-seed"} for doc in docs}


def post_payload(**overrides) -> dict:
    payload = {
        "title": "Hello World",
        "content": "First post body",
        "category": CATEGORY_ID,
        "seo": {"title": "x"},
    }
    payload.update(overrides)
    return payload


class FakeMediaService:
    """
    Media service stand-in that records uploads.
    """

    def __init__(self, url: str = "http://media.test/images/m/blog_1.png"):
        self.url = url
        self.uploads = []

    def upload(self, image):
        self.uploads.append(image)
        return self.url


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, list_posts_return=None, get_post_return=None):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return

    def list_posts(self):
        return self._list_posts_return

    def get_post(self, post_id: str):
        return self._get_post_return
