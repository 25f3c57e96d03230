# tests/test_provider_service.py
from decimal import Decimal

import pytest

from localfix.core.errors import Conflict, Forbidden, NotFound, ValidationError
from localfix.core.security import Actor
from localfix.schemas.provider import ProviderCreate, ProviderUpdate
from localfix.services.provider_service import ProviderService


@pytest.fixture
def service(storage):
    return ProviderService(storage)


def profile_data(**overrides):
    data = dict(specialty="Plumber", location="Springfield, IL", hourly_rate=Decimal("45.5"))
    data.update(overrides)
    return ProviderCreate(**data)


def test_create_promotes_customer(service, storage, customer, categories):
    provider = service.create(customer, profile_data(categories=["Plumbing", categories["HVAC"].id, "Plumbing"]))

    assert provider.user_id == customer.id
    assert provider.is_approved is False
    assert provider.rating == Decimal("0.00")
    assert provider.review_count == 0
    assert provider.hourly_rate == Decimal("45.50")
    assert sorted(provider.category_ids) == sorted([categories["Plumbing"].id, categories["HVAC"].id])
    assert storage.get_user(customer.id).role == "provider"


def test_second_profile_conflicts(service, customer):
    service.create(customer, profile_data())
    with pytest.raises(Conflict):
        service.create(customer, profile_data(specialty="Something else"))


def test_unknown_category_creates_nothing(service, storage, customer, categories):
    with pytest.raises(ValidationError):
        service.create(customer, profile_data(categories=["Blacksmithing"]))
    assert storage.get_provider_by_user(customer.id) is None
    assert storage.get_user(customer.id).role == "customer"


def test_owner_update_ignores_protected_fields(service, storage, customer, categories):
    provider = service.create(customer, profile_data(categories=["Plumbing"]))
    owner = Actor.from_user(storage.get_user(customer.id))

    patch = ProviderUpdate.model_validate(
        {"rating": 5, "reviewCount": 99, "isApproved": True, "isAvailable": False, "description": "Fast"}
    )
    updated = service.update(owner, provider.id, patch)

    assert updated.is_approved is False
    assert updated.rating == Decimal("0.00")
    assert updated.review_count == 0
    assert updated.is_available is False
    assert updated.description == "Fast"
    # categories untouched when absent from the patch
    assert updated.category_ids == [categories["Plumbing"].id]


def test_update_replaces_categories_when_supplied(service, storage, customer, categories):
    provider = service.create(customer, profile_data(categories=["Plumbing"]))
    owner = Actor.from_user(storage.get_user(customer.id))

    updated = service.update(owner, provider.id, ProviderUpdate(categories=["Painting"]))
    assert updated.category_ids == [categories["Painting"].id]


def test_update_requires_owner(service, make_provider):
    provider, _ = make_provider("bob@x.com")
    _, other = make_provider("carol@x.com")
    with pytest.raises(Forbidden):
        service.update(other, provider.id, ProviderUpdate(description="mine now"))


def test_update_requires_provider_role(service, customer, make_provider):
    provider, _ = make_provider("bob@x.com")
    with pytest.raises(Forbidden):
        service.update(customer, provider.id, ProviderUpdate(description="x"))


def test_update_missing_provider(service, make_provider):
    _, owner = make_provider("bob@x.com")
    with pytest.raises(NotFound):
        service.update(owner, "missing", ProviderUpdate(description="x"))


def test_approve_is_admin_only(service, admin, customer, make_provider):
    provider, owner = make_provider("bob@x.com", approved=False)
    with pytest.raises(Forbidden):
        service.approve(owner, provider.id, True)
    assert service.approve(admin, provider.id, True).is_approved is True
    assert service.approve(admin, provider.id, False).is_approved is False


def test_list_filters_combine(service, make_provider, categories):
    electric, _ = make_provider(
        "a@x.com", location="North Springfield", categories=[categories["Electrical"]]
    )
    make_provider("b@x.com", location="Shelbyville", categories=[categories["Electrical"]])
    make_provider("c@x.com", approved=False, location="springfield", categories=[categories["Electrical"]])
    make_provider("d@x.com", location="Springfield", categories=[categories["Plumbing"]])

    found = service.list(category_id=categories["Electrical"].id, location="SPRINGFIELD", is_approved=True)
    assert [p.id for p in found] == [electric.id]

    assert len(service.list(location="springfield")) == 3
    assert len(service.list(is_approved=False)) == 1
    assert len(service.list()) == 4


def test_detail_includes_owner_and_reviews(service, make_provider):
    provider, _ = make_provider("bob@x.com")
    detail = service.detail(provider.id)
    assert detail.user.email == "bob@x.com"
    assert detail.reviews == []
    with pytest.raises(NotFound):
        service.detail("missing")


def test_get_by_owner(service, customer, make_provider):
    provider, owner = make_provider("bob@x.com")
    assert service.get_by_owner(owner.id).id == provider.id
    with pytest.raises(NotFound):
        service.get_by_owner(customer.id)


def test_admin_cannot_open_provider_profile(service, storage, admin):
    with pytest.raises(Forbidden):
        service.create(admin, profile_data())
    assert storage.get_provider_by_user(admin.id) is None
    assert storage.get_user(admin.id).role == "admin"
