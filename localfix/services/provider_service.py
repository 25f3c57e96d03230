# localfix/services/provider_service.py
import logging
from decimal import Decimal
from typing import List, Optional

from localfix.core.errors import Conflict, Forbidden, NotFound
from localfix.core.security import Actor, ensure_admin, ensure_provider
from localfix.db.models.provider import Provider
from localfix.db.models.user import UserRole
from localfix.repositories.base import Storage
from localfix.schemas.provider import (
    ProviderCreate,
    ProviderDetail,
    ProviderUpdate,
    ProviderWithUser,
    provider_with_user,
)
from localfix.services.category_service import resolve_categories

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# an explicit null in a patch leaves these untouched
REQUIRED_FIELDS = ("specialty", "location", "service_radius", "is_available")


def _money(value: Optional[Decimal]) -> Optional[Decimal]:
    return value.quantize(CENTS) if value is not None else None


class ProviderService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def get(self, provider_id: str) -> Provider:
        provider = self.storage.get_provider(provider_id)
        if provider is None:
            raise NotFound("Provider not found")
        return provider

    def get_by_owner(self, user_id: str) -> Provider:
        provider = self.storage.get_provider_by_user(user_id)
        if provider is None:
            raise NotFound("Provider profile not found")
        return provider

    def list(
        self,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> List[Provider]:
        return self.storage.list_providers(category_id=category_id, location=location, is_approved=is_approved)

    def create(self, actor: Actor, data: ProviderCreate) -> Provider:
        # an admin keeps the admin role and could never edit the profile
        if actor.is_admin:
            raise Forbidden("Admins cannot create provider profiles")

        # one profile per user, whatever the payload says
        if self.storage.get_provider_by_user(actor.id):
            logger.warning("User %s tried to create a second provider profile", actor.id)
            raise Conflict("User already has a provider profile")

        categories = resolve_categories(self.storage, data.categories)
        fields = data.model_dump(exclude={"categories"})
        fields["hourly_rate"] = _money(fields.get("hourly_rate"))

        with self.storage.atomic():
            provider = self.storage.create_provider(
                categories=categories,
                user_id=actor.id,
                is_approved=False,
                rating=Decimal("0.00"),
                review_count=0,
                **fields,
            )
            user = self.storage.get_user(actor.id)
            if user.role == UserRole.customer.value:
                self.storage.update_user(user, role=UserRole.provider.value)

        logger.info("Provider %s created for user %s", provider.id, actor.id)
        return provider

    def update(self, actor: Actor, provider_id: str, patch: ProviderUpdate) -> Provider:
        ensure_provider(actor)
        provider = self.get(provider_id)
        if provider.user_id != actor.id:
            raise Forbidden("Not authorized")

        updates = patch.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in updates and updates[field] is None:
                del updates[field]
        if "categories" in updates:
            updates["categories"] = resolve_categories(self.storage, updates["categories"] or [])
        if "hourly_rate" in updates:
            updates["hourly_rate"] = _money(updates["hourly_rate"])
        if "certifications" in updates and updates["certifications"] is None:
            updates["certifications"] = []

        with self.storage.atomic():
            provider = self.storage.update_provider(provider, **updates)
        return provider

    def approve(self, actor: Actor, provider_id: str, is_approved: bool) -> Provider:
        ensure_admin(actor)
        provider = self.get(provider_id)
        with self.storage.atomic():
            provider = self.storage.update_provider(provider, is_approved=bool(is_approved))
        logger.info("Provider %s approval set to %s by %s", provider.id, provider.is_approved, actor.id)
        return provider

    # ------------------------------------------------------------------
    # response shaping
    # ------------------------------------------------------------------
    def with_owner(self, providers: List[Provider]) -> List[ProviderWithUser]:
        return [provider_with_user(p, self.storage.get_user(p.user_id)) for p in providers]

    def detail(self, provider_id: str) -> ProviderDetail:
        """Public profile: owner summary plus visible reviews, most recent first."""
        provider = self.get(provider_id)
        return provider_with_user(
            provider,
            self.storage.get_user(provider.user_id),
            reviews=self.storage.list_reviews(provider.id, visible_only=True),
        )
