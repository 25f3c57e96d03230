# localfix/services/category_service.py
from typing import Iterable, List

from localfix.core.errors import ValidationError
from localfix.db.models.category import Category
from localfix.repositories.base import Storage


def list_categories(storage: Storage) -> List[Category]:
    return storage.list_categories()


def resolve_categories(storage: Storage, refs: Iterable[str]) -> List[Category]:
    """Normalize category references (ids or names) to category rows.

    Unknown references are rejected instead of being stored verbatim, so
    providers only ever carry canonical category ids.
    """
    resolved: List[Category] = []
    seen = set()
    for ref in refs:
        category = storage.get_category(ref) or storage.get_category_by_name(ref)
        if category is None:
            raise ValidationError(f"Unknown category: {ref}")
        if category.id not in seen:
            seen.add(category.id)
            resolved.append(category)
    return resolved
