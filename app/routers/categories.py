import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from app import dependencies as deps
from app.errors import BlogError, InternalError
from app.schemas.taxonomy import CategoryCreate, CategoryOut
from app.security import Caller, get_caller
from app.services.terms_service import TermsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    caller: Optional[Caller] = Depends(get_caller),
    service: TermsService = Depends(deps.get_categories_service),
):
    try:
        return service.create_term(payload, caller)
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error creating category: {e}")
        raise InternalError(details=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(service: TermsService = Depends(deps.get_categories_service)):
    try:
        return service.list_terms()
    except BlogError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing categories: {e}")
        raise InternalError(details=str(e))
