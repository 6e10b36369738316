from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal

from models.sale import PaymentMethod

class SaleCreate(BaseModel):
    watch_id: str
    client_id: Optional[str] = None
    agreed_price: Decimal = Field(..., decimal_places=2)
    sale_date: Optional[date] = None
    notes: Optional[str] = None

class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., decimal_places=2)
    payment_date: Optional[date] = None
    method: PaymentMethod = PaymentMethod.TRANSFER
    notes: Optional[str] = None
