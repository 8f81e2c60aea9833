import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from app import dependencies as deps
from app.errors import BlogError, InternalError
from app.schemas.taxonomy import TagCreate, TagOut
from app.security import Caller, get_caller
from app.services.terms_service import TermsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/tags", response_model=TagOut, status_code=201)
def create_tag(
    payload: TagCreate,
    caller: Optional[Caller] = Depends(get_caller),
    service: TermsService = Depends(deps.get_tags_service),
):
    try:
        return service.create_term(payload, caller)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error creating tag: {e}")
        raise InternalError(details=str(e))


@router.get("/tags", response_model=List[TagOut])
def list_tags(service: TermsService = Depends(deps.get_tags_service)):
    try:
        return service.list_terms()
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}")
        raise InternalError(details=str(e))
