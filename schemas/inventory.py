from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import date
from decimal import Decimal

from models.inventory import ItemStatus, AcquisitionMode, TriState

class ItemCreate(BaseModel):
    reference_id: Optional[str] = None
    supplier_id: Optional[str] = None
    serial: Optional[str] = Field(None, max_length=100)
    condition: Optional[str] = Field(None, max_length=50)
    full_set: TriState = TriState.UNKNOWN
    papers: TriState = TriState.UNKNOWN
    box: TriState = TriState.UNKNOWN
    # Sign is checked by the business rules, not here
    cost: Decimal = Field(Decimal("0"), decimal_places=2)
    price_asked: Optional[Decimal] = Field(None, decimal_places=2)
    status: ItemStatus = ItemStatus.OPPORTUNITY
    acquisition_mode: AcquisitionMode = AcquisitionMode.PARTNERSHIP
    contributing_partner_id: Optional[str] = None
    custom_split: Optional[Dict[str, Decimal]] = None
    entry_date: Optional[date] = None
    notes: Optional[str] = None

class AdditionalCostCreate(BaseModel):
    cost_type: str = Field(..., min_length=1, max_length=100)
    cost_date: Optional[date] = None
    amount: Decimal = Field(..., decimal_places=2)
    description: Optional[str] = None

class ItemStatusUpdate(BaseModel):
    status: ItemStatus
