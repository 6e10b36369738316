from sqlalchemy import Column, DateTime, func, String
from sqlalchemy.ext.declarative import declared_attr
from datetime import datetime, date
from decimal import Decimal

class BaseModel:
    """Base model that includes common fields for all models."""

    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower()

    id = Column(String(40), primary_key=True)  # Prefixed id, see utils.id_generator
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    def to_dict(self):
        """Convert model instance to dictionary."""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (datetime, date)):
                result[column.name] = value.isoformat()
            elif isinstance(value, Decimal):
                result[column.name] = str(value)
            else:
                result[column.name] = value
        return result
