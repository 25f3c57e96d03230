# tests/test_review_service.py
from decimal import Decimal

import pytest

from localfix.core.errors import Conflict, Forbidden, NotFound, ValidationError
from localfix.core.security import Actor
from localfix.db.models.booking import BookingStatus
from localfix.schemas.booking import BookingCreate, BookingUpdate
from localfix.schemas.review import ReviewCreate
from localfix.services.booking_service import BookingService
from localfix.services.review_service import ReviewService, round_rating


@pytest.fixture
def service(storage):
    return ReviewService(storage)


@pytest.fixture
def provider(make_provider):
    return make_provider("bob@x.com")


@pytest.fixture
def book(storage, provider):
    """Create a booking for ``actor`` and drive it to ``status`` as the provider."""
    profile, owner = provider
    bookings = BookingService(storage)

    def _book(actor, status=BookingStatus.completed):
        booking = bookings.create(
            actor,
            BookingCreate(
                provider_id=profile.id,
                service_description="Fix outlet",
                scheduled_date="2024-06-01",
                customer_address="1 Main St",
                customer_phone="555-0100",
            ),
        )
        if status in (BookingStatus.confirmed, BookingStatus.completed):
            booking = bookings.update(owner, booking.id, BookingUpdate(status=BookingStatus.confirmed))
        if status is BookingStatus.completed:
            booking = bookings.update(owner, booking.id, BookingUpdate(status=BookingStatus.completed))
        return booking

    return _book


def assert_aggregate(storage, provider_id):
    """The stored aggregate always matches the visible reviews."""
    provider = storage.get_provider(provider_id)
    ratings = [r.rating for r in storage.list_reviews(provider_id, visible_only=True)]
    assert provider.review_count == len(ratings)
    expected = round_rating(sum(ratings) / len(ratings)) if ratings else Decimal("0.00")
    assert provider.rating == expected


def test_round_rating():
    assert round_rating(4.5) == Decimal("4.50")
    assert round_rating(14 / 3) == Decimal("4.67")
    assert round_rating(13 / 3) == Decimal("4.33")


def test_review_updates_provider_aggregate(service, storage, customer, provider, book, make_user):
    profile, _ = provider
    first = book(customer)
    review = service.create(customer, ReviewCreate(booking_id=first.id, provider_id=profile.id, rating=5))

    assert review.is_visible is True
    assert review.provider_id == profile.id
    assert storage.get_provider(profile.id).rating == Decimal("5.00")
    assert storage.get_provider(profile.id).review_count == 1

    other = Actor.from_user(make_user("dave@x.com"))
    service.create(other, ReviewCreate(booking_id=book(other).id, rating=4, comment="Good"))
    assert storage.get_provider(profile.id).rating == Decimal("4.50")
    assert_aggregate(storage, profile.id)


def test_one_review_per_booking(service, customer, book):
    booking = book(customer)
    service.create(customer, ReviewCreate(booking_id=booking.id, rating=5))
    with pytest.raises(Conflict):
        service.create(customer, ReviewCreate(booking_id=booking.id, rating=1))


@pytest.mark.parametrize("status", [BookingStatus.pending, BookingStatus.confirmed])
def test_only_completed_bookings_can_be_reviewed(service, customer, book, status):
    booking = book(customer, status=status)
    with pytest.raises(ValidationError):
        service.create(customer, ReviewCreate(booking_id=booking.id, rating=5))


def test_only_the_booking_customer_can_review(service, customer, book, make_user):
    booking = book(customer)
    stranger = Actor.from_user(make_user("eve@x.com"))
    with pytest.raises(Forbidden):
        service.create(stranger, ReviewCreate(booking_id=booking.id, rating=1))
    with pytest.raises(Forbidden):
        service.create(customer, ReviewCreate(booking_id="missing", rating=1))


def test_provider_must_match_booking(service, customer, book, make_provider):
    other_profile, _ = make_provider("carol@x.com")
    booking = book(customer)
    with pytest.raises(ValidationError):
        service.create(customer, ReviewCreate(booking_id=booking.id, provider_id=other_profile.id, rating=5))


def test_failed_recompute_rolls_back_review(service, storage, customer, provider, book, monkeypatch):
    profile, _ = provider
    booking = book(customer)

    def broken_stats(provider_id):
        raise RuntimeError("aggregate failed")

    monkeypatch.setattr(storage, "review_stats", broken_stats)
    with pytest.raises(RuntimeError):
        service.create(customer, ReviewCreate(booking_id=booking.id, rating=5))
    monkeypatch.undo()

    assert storage.get_review_for_booking(booking.id) is None
    assert storage.get_provider(profile.id).review_count == 0


def test_list_for_provider_hides_invisible(service, storage, customer, provider, book, admin, make_user):
    profile, _ = provider
    kept = service.create(customer, ReviewCreate(booking_id=book(customer).id, rating=2))
    other = Actor.from_user(make_user("dave@x.com"))
    hidden = service.create(other, ReviewCreate(booking_id=book(other).id, rating=5))

    service.set_visibility(admin, hidden.id, False)

    assert [r.id for r in service.list_for_provider(profile.id)] == [kept.id]
    assert storage.get_provider(profile.id).rating == Decimal("2.00")
    assert_aggregate(storage, profile.id)

    service.set_visibility(admin, hidden.id, True)
    assert storage.get_provider(profile.id).rating == Decimal("3.50")


def test_delete_recomputes(service, storage, customer, provider, book, admin):
    profile, _ = provider
    review_id = service.create(customer, ReviewCreate(booking_id=book(customer).id, rating=4)).id

    service.delete(admin, review_id)

    assert storage.get_review(review_id) is None
    provider_row = storage.get_provider(profile.id)
    assert provider_row.review_count == 0
    assert provider_row.rating == Decimal("0.00")


def test_moderation_is_admin_only(service, customer, book):
    review = service.create(customer, ReviewCreate(booking_id=book(customer).id, rating=4))
    with pytest.raises(Forbidden):
        service.delete(customer, review.id)
    with pytest.raises(Forbidden):
        service.set_visibility(customer, review.id, False)


def test_delete_missing_review(service, admin):
    with pytest.raises(NotFound):
        service.delete(admin, "missing")
