"""
Profit-split engine.

Maps each item's acquisition mode to a per-partner percentage split, spreads
the realized profit of every liquidated sale across partners, and reconciles
the result against the cash the partners actually received.

Nothing here is cached or stored: every figure is a reduction over one
``LedgerSnapshot``. Losses are spread exactly like gains, so shares may be
negative.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from business_logic.inventory_rules import HOUSE_REQUIRED, InventoryBusinessLogic
from business_logic.partner_rules import OUTFLOW_TYPES
from business_logic.snapshot import LedgerSnapshot, ItemRecord, SaleRecord, PartnerRecord
from models.inventory import AcquisitionMode
from models.sale import SaleStatus
from exceptions import InvalidSplitException

ZERO = Decimal("0")
FULL = Decimal("100")


@dataclass(frozen=True)
class SaleAllocation:
    sale_id: str
    item_id: str
    acquisition_mode: AcquisitionMode
    cost_basis: Decimal
    agreed_price: Decimal
    profit: Decimal
    split: Dict[str, Decimal]
    shares: Dict[str, Decimal]


@dataclass(frozen=True)
class PartnerSettlement:
    partner_id: str
    name: str
    participation: Decimal
    contributed: Decimal
    corresponds: Decimal
    distributed: Decimal
    pending: Decimal
    color: Optional[str] = None
    is_house: bool = False

    @property
    def pending_display(self) -> Decimal:
        """Pending floored at zero, the figure shown on partner cards."""
        return max(ZERO, self.pending)


def _house_partner(partners: Sequence[PartnerRecord]) -> PartnerRecord:
    houses = [p for p in partners if p.is_house]
    if len(houses) != 1:
        raise InvalidSplitException(HOUSE_REQUIRED)
    return houses[0]


def split_for(item: ItemRecord, partners: Sequence[PartnerRecord]) -> Dict[str, Decimal]:
    """
    Percentage of profit owed to each partner for ``item``.

    Every partner in the table gets a key; partners outside the table only
    appear when the item names them explicitly (contributor or custom split).
    """
    mode = item.acquisition_mode
    zeros = {p.id: ZERO for p in partners}

    if mode == AcquisitionMode.HOUSE:
        house = _house_partner(partners)
        return {**zeros, house.id: FULL}

    if mode == AcquisitionMode.CONTRIBUTION:
        if not item.contributing_partner_id:
            raise InvalidSplitException(f"Item {item.id} has no contributing partner")
        return {**zeros, item.contributing_partner_id: FULL}

    if mode == AcquisitionMode.CUSTOM:
        if item.custom_split is None:
            raise InvalidSplitException(f"Item {item.id} has no custom split")
        return {**zeros, **item.custom_split}

    if mode == AcquisitionMode.PARTNERSHIP:
        return {p.id: p.participation for p in partners}

    raise InvalidSplitException(f"Unknown acquisition mode: {mode}")


def realized_profit(sale: SaleRecord, item: ItemRecord) -> Decimal:
    return sale.agreed_price - InventoryBusinessLogic.total_cost_basis(item)


def allocate_sale(
    sale: SaleRecord,
    item: ItemRecord,
    partners: Sequence[PartnerRecord],
) -> SaleAllocation:
    profit = realized_profit(sale, item)
    split = split_for(item, partners)
    return SaleAllocation(
        sale_id=sale.id,
        item_id=item.id,
        acquisition_mode=item.acquisition_mode,
        cost_basis=InventoryBusinessLogic.total_cost_basis(item),
        agreed_price=sale.agreed_price,
        profit=profit,
        split=split,
        shares={pid: profit * pct / FULL for pid, pct in split.items()},
    )


def allocate(snapshot: LedgerSnapshot) -> List[SaleAllocation]:
    """One allocation per liquidated sale, in sale order."""
    return [
        allocate_sale(sale, snapshot.get_item(sale.watch_id), snapshot.partners)
        for sale in snapshot.sales
        if sale.status == SaleStatus.LIQUIDATED
    ]


def entitlements(snapshot: LedgerSnapshot) -> Dict[str, Decimal]:
    """Cumulative lifetime share of realized profit per partner id."""
    totals: Dict[str, Decimal] = {p.id: ZERO for p in snapshot.partners}
    for allocation in allocate(snapshot):
        for partner_id, share in allocation.shares.items():
            totals[partner_id] = totals.get(partner_id, ZERO) + share
    return totals


def settle_partner(partner: PartnerRecord, corresponds: Decimal) -> PartnerSettlement:
    contributed = sum((m.amount for m in partner.movements if m.amount > 0), ZERO)
    distributed = sum(
        (abs(m.amount) for m in partner.movements if m.movement_type in OUTFLOW_TYPES),
        ZERO,
    )
    return PartnerSettlement(
        partner_id=partner.id,
        name=partner.name,
        participation=partner.participation,
        contributed=contributed,
        corresponds=corresponds,
        distributed=distributed,
        pending=corresponds - distributed,
        color=partner.color,
        is_house=partner.is_house,
    )


def settle(snapshot: LedgerSnapshot) -> List[PartnerSettlement]:
    """Entitlement vs. cash received for every partner in the table."""
    totals = entitlements(snapshot)
    return [settle_partner(p, totals.get(p.id, ZERO)) for p in snapshot.partners]
