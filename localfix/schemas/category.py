# localfix/schemas/category.py
from typing import Optional

from localfix.schemas.base import CamelModel


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: str
    color: str
