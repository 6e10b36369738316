from sqlalchemy import Column, String, Text, Integer, Date, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel
from core.database import Base
from enum import Enum

class SaleStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    LIQUIDATED = "Liquidated"

class PaymentMethod(str, Enum):
    TRANSFER = "Transfer"
    CASH = "Cash"
    CARD = "Card"
    CHEQUE = "Cheque"
    OTHER = "Other"

class Sale(Base, BaseModel):
    __tablename__ = "sales"

    watch_id = Column(String(40), ForeignKey("inventory_items.id"), nullable=False, unique=True)
    client_id = Column(String(40), ForeignKey("clients.id"))
    sale_date = Column(Date, nullable=False)
    agreed_price = Column(DECIMAL(15, 2), nullable=False)
    status = Column(String(20), default=SaleStatus.PENDING.value, nullable=False)
    notes = Column(Text)

    # Relationships
    item = relationship("InventoryItem")
    client = relationship("Client", back_populates="purchases")
    payments = relationship(
        "SalePayment",
        back_populates="sale",
        order_by="SalePayment.sequence",
        lazy="selectin",
    )

class SalePayment(Base, BaseModel):
    __tablename__ = "sale_payments"

    sale_id = Column(String(40), ForeignKey("sales.id"), nullable=False)
    sequence = Column(Integer, nullable=False)
    payment_date = Column(Date, nullable=False)
    amount = Column(DECIMAL(15, 2), nullable=False)
    method = Column(String(50), nullable=False)
    notes = Column(Text)

    sale = relationship("Sale", back_populates="payments")
