from sqlalchemy import Column, String, Boolean, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from enum import Enum
from models.base import BaseModel
from core.database import Base

class UserRole(str, Enum):
    DIRECTOR = "director"
    OPERATOR = "operator"
    INVESTOR = "investor"
    PENDING = "pending"

class User(Base, BaseModel):
    __tablename__ = "users"

    name = Column(String(255))
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.PENDING, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    # Investor logins are linked to the partner whose entitlement they may read
    partner_id = Column(String(40), ForeignKey("partners.id"))

    partner = relationship("Partner", foreign_keys=[partner_id])

    def to_dict(self):
        """Convert user instance to dictionary excluding sensitive fields."""
        data = super().to_dict()
        # Remove sensitive fields
        if 'password_hash' in data:
            del data['password_hash']
        data["role"] = getattr(self.role, "value", self.role)
        return data
