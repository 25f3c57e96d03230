# localfix/api/routes/providers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from localfix.api.deps import get_current_actor, get_storage, require_provider
from localfix.core.security import Actor
from localfix.repositories.base import Storage
from localfix.schemas.provider import (
    ProviderCreate,
    ProviderDetail,
    ProviderResponse,
    ProviderUpdate,
    ProviderWithUser,
)
from localfix.services.provider_service import ProviderService

router = APIRouter(prefix="/api/providers", tags=["providers"])


def get_provider_service(storage: Storage = Depends(get_storage)) -> ProviderService:
    return ProviderService(storage)


# Public directory listing; every filter is optional and they combine with AND
@router.get("", response_model=List[ProviderWithUser])
def list_providers(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    location: Optional[str] = Query(None),
    is_approved: Optional[bool] = Query(None, alias="isApproved"),
    service: ProviderService = Depends(get_provider_service),
):
    providers = service.list(category_id=category_id, location=location, is_approved=is_approved)
    return service.with_owner(providers)


# Must stay above /{provider_id}
@router.get("/me", response_model=ProviderResponse)
def my_provider_profile(
    actor: Actor = Depends(get_current_actor),
    service: ProviderService = Depends(get_provider_service),
):
    return service.get_by_owner(actor.id)


@router.get("/{provider_id}", response_model=ProviderDetail)
def get_provider(provider_id: str, service: ProviderService = Depends(get_provider_service)):
    return service.detail(provider_id)


# Any signed-in user may open one provider profile; doing so makes them a provider
@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
def create_provider(
    data: ProviderCreate,
    actor: Actor = Depends(get_current_actor),
    service: ProviderService = Depends(get_provider_service),
):
    return service.create(actor, data)


@router.put("/{provider_id}", response_model=ProviderResponse)
def update_provider(
    provider_id: str,
    patch: ProviderUpdate,
    actor: Actor = Depends(require_provider),
    service: ProviderService = Depends(get_provider_service),
):
    return service.update(actor, provider_id, patch)
