from sqlalchemy import Column, String, Text, Integer, Date, DECIMAL, JSON, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel
from core.database import Base

from enum import Enum

class ItemStage(str, Enum):
    OPPORTUNITY = "opportunity"
    INVENTORY = "inventory"
    LIQUIDATED = "liquidated"

class ItemStatus(str, Enum):
    OPPORTUNITY = "Opportunity"
    AVAILABLE = "Available"
    SOLD = "Sold"
    CONSIGNED = "Consigned"
    RESERVED = "Reserved"
    LIQUIDATED = "Liquidated"

class AcquisitionMode(str, Enum):
    PARTNERSHIP = "partnership"
    HOUSE = "house"
    CONTRIBUTION = "contribution"
    CUSTOM = "custom"

class TriState(str, Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"

class InventoryItem(Base, BaseModel):
    __tablename__ = "inventory_items"

    reference_id = Column(String(40), ForeignKey("watch_references.id"))
    supplier_id = Column(String(40), ForeignKey("suppliers.id"))
    serial = Column(String(100))
    condition = Column(String(50))
    full_set = Column(String(10), default=TriState.UNKNOWN.value, nullable=False)
    papers = Column(String(10), default=TriState.UNKNOWN.value, nullable=False)
    box = Column(String(10), default=TriState.UNKNOWN.value, nullable=False)
    cost = Column(DECIMAL(15, 2), nullable=False, default=0)
    price_asked = Column(DECIMAL(15, 2))
    stage = Column(String(20), default=ItemStage.OPPORTUNITY.value, nullable=False)
    status = Column(String(20), default=ItemStatus.OPPORTUNITY.value, nullable=False)
    acquisition_mode = Column(String(20), default=AcquisitionMode.PARTNERSHIP.value, nullable=False)
    contributing_partner_id = Column(String(40), ForeignKey("partners.id"))
    custom_split = Column(JSON)  # {"partner_id": "25.00", ...}
    entry_date = Column(Date)
    validated_by = Column(String(255))
    validation_date = Column(Date)
    notes = Column(Text)

    # Relationships
    reference = relationship("Reference", back_populates="inventory_items")
    supplier = relationship("Supplier", back_populates="inventory_items")
    additional_costs = relationship(
        "AdditionalCost",
        back_populates="item",
        order_by="AdditionalCost.sequence",
        lazy="selectin",
    )

class AdditionalCost(Base, BaseModel):
    __tablename__ = "additional_costs"

    item_id = Column(String(40), ForeignKey("inventory_items.id"), nullable=False)
    sequence = Column(Integer, nullable=False)  # Append order within the item
    cost_type = Column(String(100), nullable=False)
    cost_date = Column(Date)
    amount = Column(DECIMAL(15, 2), nullable=False)
    description = Column(Text)

    item = relationship("InventoryItem", back_populates="additional_costs")
