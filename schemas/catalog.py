from pydantic import BaseModel, Field
from typing import Optional

class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    country: Optional[str] = None
    founded: Optional[int] = None
    notes: Optional[str] = None

class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = None
    founded: Optional[int] = None
    notes: Optional[str] = None

class WatchModelCreate(BaseModel):
    brand_id: str
    name: str = Field(..., min_length=1, max_length=100)
    family: Optional[str] = None
    notes: Optional[str] = None

class WatchModelUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    family: Optional[str] = None
    notes: Optional[str] = None

class ReferenceCreate(BaseModel):
    model_id: str
    ref: str = Field(..., min_length=1, max_length=100)
    caliber: Optional[str] = None
    material: Optional[str] = None
    bezel: Optional[str] = None
    dial: Optional[str] = None
    size: Optional[str] = Field(None, max_length=20)
    bracelet: Optional[str] = None
    year: Optional[int] = None
    notes: Optional[str] = None

class ReferenceUpdate(BaseModel):
    ref: Optional[str] = Field(None, min_length=1, max_length=100)
    caliber: Optional[str] = None
    material: Optional[str] = None
    bezel: Optional[str] = None
    dial: Optional[str] = None
    size: Optional[str] = Field(None, max_length=20)
    bracelet: Optional[str] = None
    year: Optional[int] = None
    notes: Optional[str] = None

class CostTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=10)
