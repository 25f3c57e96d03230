# localfix/db/models/category.py
from sqlalchemy import Column, String

from localfix.db.base import Base
from localfix.db.models.user import new_id


class Category(Base):
    __tablename__ = "service_categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    description = Column(String, nullable=True)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=False)
