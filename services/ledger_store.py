"""
Atomic snapshot store for the ledger.

Reads load every item, sale and partner in one transaction. Writes run a pure
command over that snapshot and persist only what the command changed, all
under a single lock, so no reader or writer ever observes a half-applied
transition.
"""
import asyncio
from typing import Callable, Dict, Iterable, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from business_logic.snapshot import (
    LedgerSnapshot,
    ItemRecord,
    CostRecord,
    SaleRecord,
    PaymentRecord,
    PartnerRecord,
    MovementRecord,
)
from models.inventory import InventoryItem, AdditionalCost
from models.sale import Sale, SalePayment
from models.partner import Partner, PartnerMovement
from utils.formatting import to_decimal
from utils.logger import logger

Command = Callable[[LedgerSnapshot], LedgerSnapshot]

ITEM_COLUMNS = (
    "reference_id", "supplier_id", "serial", "condition", "cost", "price_asked",
    "contributing_partner_id", "entry_date", "validated_by", "validation_date", "notes",
)
ITEM_ENUM_COLUMNS = ("full_set", "papers", "box", "stage", "status", "acquisition_mode")
SALE_COLUMNS = ("watch_id", "client_id", "sale_date", "agreed_price", "notes")
PARTNER_COLUMNS = ("name", "participation", "color", "active", "is_house")


def _item_record(row: InventoryItem) -> ItemRecord:
    split = None
    if row.custom_split is not None:
        split = {pid: to_decimal(pct) for pid, pct in row.custom_split.items()}
    return ItemRecord(
        id=row.id,
        additional_costs=tuple(
            CostRecord(
                id=c.id,
                cost_type=c.cost_type,
                cost_date=c.cost_date,
                amount=c.amount,
                description=c.description,
            )
            for c in row.additional_costs
        ),
        custom_split=split,
        **{col: getattr(row, col) for col in ITEM_COLUMNS + ITEM_ENUM_COLUMNS},
    )


def _sale_record(row: Sale) -> SaleRecord:
    return SaleRecord(
        id=row.id,
        status=row.status,
        payments=tuple(
            PaymentRecord(
                id=p.id,
                payment_date=p.payment_date,
                amount=p.amount,
                method=p.method,
                notes=p.notes,
            )
            for p in row.payments
        ),
        **{col: getattr(row, col) for col in SALE_COLUMNS},
    )


def _partner_record(row: Partner) -> PartnerRecord:
    return PartnerRecord(
        id=row.id,
        movements=tuple(
            MovementRecord(
                id=m.id,
                movement_date=m.movement_date,
                movement_type=m.movement_type,
                amount=m.amount,
                concept=m.concept,
            )
            for m in row.movements
        ),
        **{col: getattr(row, col) for col in PARTNER_COLUMNS},
    )


def _item_values(item: ItemRecord) -> Dict:
    values = {col: getattr(item, col) for col in ITEM_COLUMNS}
    values.update({col: getattr(item, col).value for col in ITEM_ENUM_COLUMNS})
    values["custom_split"] = (
        {pid: str(pct) for pid, pct in item.custom_split.items()}
        if item.custom_split is not None else None
    )
    return values


def _sale_values(sale: SaleRecord) -> Dict:
    values = {col: getattr(sale, col) for col in SALE_COLUMNS}
    values["status"] = sale.status.value
    return values


def _partner_values(partner: PartnerRecord) -> Dict:
    return {col: getattr(partner, col) for col in PARTNER_COLUMNS}


def _new_children(before: Tuple, after: Tuple) -> Iterable[Tuple[int, object]]:
    """Children are append-only: yield (position, record) for ids not seen before."""
    seen = {child.id for child in before}
    for position, child in enumerate(after):
        if child.id not in seen:
            yield position, child


class LedgerStore:

    def __init__(self):
        self._lock = asyncio.Lock()

    @staticmethod
    async def _load_rows(db: AsyncSession):
        async def fetch(model):
            query = (
                select(model)
                .order_by(model.created_at, model.id)
                .execution_options(populate_existing=True)
            )
            return (await db.execute(query)).scalars().all()

        items = await fetch(InventoryItem)
        sales = await fetch(Sale)
        partners = await fetch(Partner)
        return (
            {row.id: row for row in items},
            {row.id: row for row in sales},
            {row.id: row for row in partners},
        )

    @staticmethod
    def _to_snapshot(rows) -> LedgerSnapshot:
        items, sales, partners = rows
        return LedgerSnapshot(
            items=tuple(_item_record(r) for r in items.values()),
            sales=tuple(_sale_record(r) for r in sales.values()),
            partners=tuple(_partner_record(r) for r in partners.values()),
        )

    async def load(self, db: AsyncSession) -> LedgerSnapshot:
        """Read one consistent snapshot."""
        async with self._lock:
            return self._to_snapshot(await self._load_rows(db))

    async def apply(self, db: AsyncSession, command: Command, action: str) -> LedgerSnapshot:
        """
        Run ``command`` against the current snapshot and persist its result.
        When the command raises, nothing is written and the error propagates.
        """
        async with self._lock:
            try:
                rows = await self._load_rows(db)
                before = self._to_snapshot(rows)
                after = command(before)
                changed = self._write_changes(db, rows, before, after)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            logger.info(f"LEDGER: {action} ({changed} record(s) written)")
            return after

    @staticmethod
    def _write_changes(db: AsyncSession, rows, before: LedgerSnapshot, after: LedgerSnapshot) -> int:
        item_rows, sale_rows, partner_rows = rows
        changed = 0

        old_items = {i.id: i for i in before.items}
        for item in after.items:
            old = old_items.get(item.id)
            if old == item:
                continue
            changed += 1
            row = item_rows.get(item.id)
            if row is None:
                row = InventoryItem(id=item.id)
                db.add(row)
            for field, value in _item_values(item).items():
                setattr(row, field, value)
            for position, cost in _new_children(old.additional_costs if old else (), item.additional_costs):
                db.add(AdditionalCost(
                    id=cost.id,
                    item_id=item.id,
                    sequence=position,
                    cost_type=cost.cost_type,
                    cost_date=cost.cost_date,
                    amount=cost.amount,
                    description=cost.description,
                ))

        old_sales = {s.id: s for s in before.sales}
        for sale in after.sales:
            old = old_sales.get(sale.id)
            if old == sale:
                continue
            changed += 1
            row = sale_rows.get(sale.id)
            if row is None:
                row = Sale(id=sale.id)
                db.add(row)
            for field, value in _sale_values(sale).items():
                setattr(row, field, value)
            for position, payment in _new_children(old.payments if old else (), sale.payments):
                db.add(SalePayment(
                    id=payment.id,
                    sale_id=sale.id,
                    sequence=position,
                    payment_date=payment.payment_date,
                    amount=payment.amount,
                    method=payment.method,
                    notes=payment.notes,
                ))

        old_partners = {p.id: p for p in before.partners}
        for partner in after.partners:
            old = old_partners.get(partner.id)
            if old == partner:
                continue
            changed += 1
            row = partner_rows.get(partner.id)
            if row is None:
                row = Partner(id=partner.id)
                db.add(row)
            for field, value in _partner_values(partner).items():
                setattr(row, field, value)
            for position, movement in _new_children(old.movements if old else (), partner.movements):
                db.add(PartnerMovement(
                    id=movement.id,
                    partner_id=partner.id,
                    sequence=position,
                    movement_date=movement.movement_date,
                    movement_type=movement.movement_type.value,
                    amount=movement.amount,
                    concept=movement.concept,
                ))

        return changed


def get_ledger_store(request: Request) -> LedgerStore:
    """Dependency returning the store created for this application."""
    return request.app.state.ledger_store
