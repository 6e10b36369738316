from sqlalchemy import Column, String, Text, Integer, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel
from core.database import Base

class Brand(Base, BaseModel):
    __tablename__ = "brands"

    name = Column(String(100), nullable=False, unique=True)
    country = Column(String(100))
    founded = Column(Integer)
    notes = Column(Text)

    models = relationship("WatchModel", back_populates="brand", lazy="dynamic")

class WatchModel(Base, BaseModel):
    __tablename__ = "watch_models"

    brand_id = Column(String(40), ForeignKey("brands.id"), nullable=False)
    name = Column(String(100), nullable=False)
    family = Column(String(100))
    notes = Column(Text)

    brand = relationship("Brand", back_populates="models")
    references = relationship("Reference", back_populates="model", lazy="dynamic")

class Reference(Base, BaseModel):
    __tablename__ = "watch_references"

    model_id = Column(String(40), ForeignKey("watch_models.id"), nullable=False)
    ref = Column(String(100), nullable=False)
    caliber = Column(String(100))
    material = Column(String(100))
    bezel = Column(String(100))
    dial = Column(String(100))
    size = Column(String(20))
    bracelet = Column(String(100))
    year = Column(Integer)
    notes = Column(Text)

    model = relationship("WatchModel", back_populates="references")
    inventory_items = relationship("InventoryItem", back_populates="reference", lazy="dynamic")

class CostType(Base, BaseModel):
    __tablename__ = "cost_types"

    name = Column(String(100), nullable=False, unique=True)
    icon = Column(String(10))
