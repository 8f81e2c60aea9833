from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Security
from fastapi.security.api_key import APIKeyHeader

from app.settings import Settings, settings

API_KEY_NAME = "X-Blog-Key"
USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
ADMIN_ROLE = "admin"
DEFAULT_ROLE = "author"

api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


@dataclass(frozen=True)
class Caller:
    id: str
    role: str = DEFAULT_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def can_modify(self, owner_id: Optional[str]) -> bool:
        return self.is_admin or (owner_id is not None and owner_id == self.id)


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_caller(
    api_key_header: Optional[str] = Security(api_key_header),
    user_id: Optional[str] = Header(None, alias=USER_ID_HEADER),
    user_role: Optional[str] = Header(None, alias=USER_ROLE_HEADER),
    current_settings: Settings = Depends(get_settings),
) -> Optional[Caller]:
    """
    Identity attached by the upstream auth gateway.
    The user headers are only trusted when the gateway key matches;
    otherwise the caller is anonymous (None).
    """
    expected_key = current_settings.BLOG_API_KEY
    if not expected_key or api_key_header != expected_key:
        return None
    if not user_id:
        return None
    return Caller(id=user_id, role=(user_role or DEFAULT_ROLE).strip().lower())
