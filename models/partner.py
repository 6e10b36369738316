from sqlalchemy import Column, String, Text, Integer, Date, DECIMAL, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel
from core.database import Base
from enum import Enum

class MovementType(str, Enum):
    CONTRIBUTION = "Contribution"
    DISTRIBUTION = "Distribution"
    WITHDRAWAL = "Withdrawal"
    ADJUSTMENT = "Adjustment"

class Partner(Base, BaseModel):
    __tablename__ = "partners"

    name = Column(String(255), nullable=False)
    participation = Column(DECIMAL(5, 2), nullable=False, default=0)  # Global split, e.g. 40.00
    color = Column(String(20))
    active = Column(Boolean, default=True, nullable=False)
    is_house = Column(Boolean, default=False, nullable=False)  # House capital entity

    movements = relationship(
        "PartnerMovement",
        back_populates="partner",
        order_by="PartnerMovement.sequence",
        lazy="selectin",
    )

class PartnerMovement(Base, BaseModel):
    __tablename__ = "partner_movements"

    partner_id = Column(String(40), ForeignKey("partners.id"), nullable=False)
    sequence = Column(Integer, nullable=False)
    movement_date = Column(Date, nullable=False)
    movement_type = Column(String(20), nullable=False)
    amount = Column(DECIMAL(15, 2), nullable=False)  # Distributions and withdrawals are negative
    concept = Column(Text)

    partner = relationship("Partner", back_populates="movements")
