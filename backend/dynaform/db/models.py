import json
import logging

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.types import TypeDecorator
from sqlalchemy.sql import func
from dynaform.db.database import Base
from dynaform.db.enums import FieldType

logger = logging.getLogger(__name__)


class JSONEncodedList(TypeDecorator):
    """
    Stores a list of strings as a JSON array in a text column.
    Unreadable stored values load as an empty list.
    """
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if not value or not isinstance(value, (list, tuple)):
            return json.dumps([])
        return json.dumps(list(value))

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            logger.error("Could not decode stored option list: %r", value)
            return []
        return parsed if isinstance(parsed, list) else []


class FormField(Base):
    __tablename__ = "form_fields"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    field_type = Column(SAEnum(FieldType, name="fieldtype", values_callable=lambda e: [m.value for m in e]), nullable=False)
    min_length = Column(Integer, nullable=True)
    max_length = Column(Integer, nullable=True)
    default_value = Column(String(255), nullable=True)
    required = Column(Boolean, default=False, nullable=False)
    list_of_values = Column(JSONEncodedList, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(50), unique=True, index=True, nullable=False)
    gender = Column(String(20), nullable=False)
    love_react_flag = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
