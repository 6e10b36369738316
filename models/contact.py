from sqlalchemy import Column, String, Text, Integer
from sqlalchemy.orm import relationship
from models.base import BaseModel
from core.database import Base
from enum import Enum

class ClientTier(str, Enum):
    PROSPECT = "Prospect"
    CLIENT = "Client"
    VIP = "VIP"

class Client(Base, BaseModel):
    __tablename__ = "clients"

    name = Column(String(255), nullable=False)
    phone = Column(String(30))
    email = Column(String(255))
    city = Column(String(100))
    tier = Column(String(20), default=ClientTier.PROSPECT.value, nullable=False)
    notes = Column(Text)

    purchases = relationship("Sale", back_populates="client", lazy="dynamic")

class Supplier(Base, BaseModel):
    __tablename__ = "suppliers"

    name = Column(String(255), nullable=False)
    supplier_type = Column(String(50), default="Private")  # 'Private', 'Dealer', 'Auction'
    phone = Column(String(30))
    email = Column(String(255))
    city = Column(String(100))
    rating = Column(Integer, default=3, nullable=False)  # 1-5
    notes = Column(Text)

    inventory_items = relationship("InventoryItem", back_populates="supplier", lazy="dynamic")
