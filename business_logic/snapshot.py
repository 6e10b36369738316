"""
Immutable views of the ledger.

Every business rule takes a ``LedgerSnapshot`` and returns a new one; records
are frozen pydantic models, so a rule can only produce changes by building
replacements. ``services.ledger_store`` is the only place that turns
snapshots into rows and back.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict

from exceptions import ResourceNotFoundException
from models.inventory import ItemStage, ItemStatus, AcquisitionMode, TriState
from models.partner import MovementType
from models.sale import SaleStatus


class FrozenRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


class CostRecord(FrozenRecord):
    id: str
    cost_type: str
    cost_date: Optional[date] = None
    amount: Decimal
    description: Optional[str] = None


class ItemRecord(FrozenRecord):
    id: str
    reference_id: Optional[str] = None
    supplier_id: Optional[str] = None
    serial: Optional[str] = None
    condition: Optional[str] = None
    full_set: TriState = TriState.UNKNOWN
    papers: TriState = TriState.UNKNOWN
    box: TriState = TriState.UNKNOWN
    cost: Decimal = Decimal("0")
    additional_costs: Tuple[CostRecord, ...] = ()
    price_asked: Optional[Decimal] = None
    stage: ItemStage = ItemStage.OPPORTUNITY
    status: ItemStatus = ItemStatus.OPPORTUNITY
    acquisition_mode: AcquisitionMode = AcquisitionMode.PARTNERSHIP
    contributing_partner_id: Optional[str] = None
    custom_split: Optional[Dict[str, Decimal]] = None
    entry_date: Optional[date] = None
    validated_by: Optional[str] = None
    validation_date: Optional[date] = None
    notes: Optional[str] = None


class PaymentRecord(FrozenRecord):
    id: str
    payment_date: date
    amount: Decimal
    method: str
    notes: Optional[str] = None


class SaleRecord(FrozenRecord):
    id: str
    watch_id: str
    client_id: Optional[str] = None
    sale_date: date
    agreed_price: Decimal
    notes: Optional[str] = None
    payments: Tuple[PaymentRecord, ...] = ()
    status: SaleStatus = SaleStatus.PENDING


class MovementRecord(FrozenRecord):
    id: str
    movement_date: date
    movement_type: MovementType
    amount: Decimal
    concept: Optional[str] = None


class PartnerRecord(FrozenRecord):
    id: str
    name: str
    participation: Decimal = Decimal("0")
    color: Optional[str] = None
    active: bool = True
    is_house: bool = False
    movements: Tuple[MovementRecord, ...] = ()


RecordT = TypeVar("RecordT", ItemRecord, SaleRecord, PartnerRecord)


def _replace(records: Tuple[RecordT, ...], record: RecordT) -> Tuple[RecordT, ...]:
    """Swap the record with the same id, or append it when new."""
    replaced = False
    result = []
    for existing in records:
        if existing.id == record.id:
            result.append(record)
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(record)
    return tuple(result)


class LedgerSnapshot(FrozenRecord):
    items: Tuple[ItemRecord, ...] = ()
    sales: Tuple[SaleRecord, ...] = ()
    partners: Tuple[PartnerRecord, ...] = ()

    def get_item(self, item_id: str) -> ItemRecord:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ResourceNotFoundException("Inventory item")

    def get_sale(self, sale_id: str) -> SaleRecord:
        for sale in self.sales:
            if sale.id == sale_id:
                return sale
        raise ResourceNotFoundException("Sale")

    def get_partner(self, partner_id: str) -> PartnerRecord:
        for partner in self.partners:
            if partner.id == partner_id:
                return partner
        raise ResourceNotFoundException("Partner")

    def sale_for_item(self, item_id: str) -> Optional[SaleRecord]:
        return next((s for s in self.sales if s.watch_id == item_id), None)

    def partner_ids(self) -> set:
        return {p.id for p in self.partners}

    def house_partners(self) -> Tuple[PartnerRecord, ...]:
        return tuple(p for p in self.partners if p.is_house)

    def with_item(self, item: ItemRecord) -> "LedgerSnapshot":
        return self.model_copy(update={"items": _replace(self.items, item)})

    def with_sale(self, sale: SaleRecord) -> "LedgerSnapshot":
        return self.model_copy(update={"sales": _replace(self.sales, sale)})

    def with_partner(self, partner: PartnerRecord) -> "LedgerSnapshot":
        return self.model_copy(update={"partners": _replace(self.partners, partner)})
