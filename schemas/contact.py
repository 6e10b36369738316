from pydantic import BaseModel, Field
from typing import Optional

from models.contact import ClientTier

class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = None
    city: Optional[str] = None
    tier: ClientTier = ClientTier.PROSPECT
    notes: Optional[str] = None

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = None
    city: Optional[str] = None
    tier: Optional[ClientTier] = None
    notes: Optional[str] = None

class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    supplier_type: str = "Private"
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = None
    city: Optional[str] = None
    rating: int = Field(3, ge=1, le=5)
    notes: Optional[str] = None

class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    supplier_type: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = None
    city: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
