# localfix/api/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends

from localfix.api.deps import get_storage
from localfix.repositories.base import Storage
from localfix.schemas.category import CategoryResponse
from localfix.services.category_service import list_categories

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
def get_categories(storage: Storage = Depends(get_storage)):
    return list_categories(storage)
