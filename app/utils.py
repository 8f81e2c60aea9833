import re
import unicodedata
import uuid
from datetime import datetime, timezone

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_DOC_ID = re.compile(r"^[0-9a-f]{32}$")


def generate_slug(text: str, max_length: int = 80) -> str:
    """Turn a title into a lowercase, hyphen-separated, ASCII-only slug."""
    normalized = unicodedata.normalize("NFKD", text or "")
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def new_doc_id() -> str:
    return uuid.uuid4().hex


def is_valid_doc_id(value) -> bool:
    return isinstance(value, str) and bool(_DOC_ID.match(value))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
