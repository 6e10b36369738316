from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date
from decimal import Decimal

from models.partner import MovementType

class PartnerConfig(BaseModel):
    id: Optional[str] = None  # Omit to add a new partner
    name: str = Field(..., min_length=1, max_length=255)
    participation: Decimal = Field(..., decimal_places=2)
    color: Optional[str] = Field(None, max_length=20)
    active: bool = True
    is_house: bool = False

class PartnerTable(BaseModel):
    partners: List[PartnerConfig]

class MovementCreate(BaseModel):
    movement_type: MovementType
    amount: Decimal = Field(..., decimal_places=2)
    movement_date: Optional[date] = None
    concept: Optional[str] = None
