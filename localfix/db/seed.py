# localfix/db/seed.py
"""Idempotent seed data: the service categories and the single admin account."""
import logging

from localfix.core.config import ADMIN_EMAIL, ADMIN_SEED_PASSWORD
from localfix.core.security import hash_password
from localfix.db.models.user import UserRole
from localfix.repositories.base import Storage

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Electrical", "description": "Wiring, repairs, installations", "icon": "zap", "color": "blue"},
    {"name": "Plumbing", "description": "Pipes, fixtures, emergency repairs", "icon": "wrench", "color": "green"},
    {"name": "Carpentry", "description": "Custom work, repairs, installations", "icon": "hammer", "color": "amber"},
    {"name": "HVAC", "description": "Heating, cooling, ventilation", "icon": "thermometer", "color": "purple"},
    {
        "name": "General Contracting",
        "description": "Home improvements, renovations",
        "icon": "building",
        "color": "red",
    },
    {"name": "Landscaping", "description": "Garden design, lawn care", "icon": "leaf", "color": "teal"},
    {"name": "Painting", "description": "Interior, exterior, touch-ups", "icon": "paintbrush", "color": "orange"},
    {
        "name": "Cleaning Services",
        "description": "House cleaning, deep cleaning",
        "icon": "spray",
        "color": "gray",
    },
]


def seed_categories(storage: Storage) -> int:
    created = 0
    with storage.atomic():
        for data in DEFAULT_CATEGORIES:
            if storage.get_category_by_name(data["name"]) is None:
                storage.create_category(**data)
                created += 1
    if created:
        logger.info("Seeded %d service categories", created)
    return created


def seed_admin(storage: Storage, email: str = ADMIN_EMAIL, password: str = ADMIN_SEED_PASSWORD):
    admin = storage.get_user_by_email(email)
    if admin is not None:
        if admin.role != UserRole.admin.value:
            logger.warning("Account %s exists but is not an admin; leaving it untouched", email)
        return admin
    with storage.atomic():
        admin = storage.create_user(
            email=email,
            password_hash=hash_password(password),
            first_name="Admin",
            last_name="User",
            role=UserRole.admin.value,
        )
    logger.info("Seeded admin account %s", email)
    return admin


def seed(storage: Storage) -> None:
    seed_categories(storage)
    seed_admin(storage)
