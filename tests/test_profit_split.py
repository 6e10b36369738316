from datetime import date
from decimal import Decimal

import pytest

from business_logic.profit_split import allocate, entitlements, realized_profit, settle, split_for
from business_logic.snapshot import (
    LedgerSnapshot,
    ItemRecord,
    CostRecord,
    SaleRecord,
    PaymentRecord,
    PartnerRecord,
    MovementRecord,
)
from exceptions import InvalidSplitException
from models.inventory import AcquisitionMode, ItemStage, ItemStatus
from models.partner import MovementType
from models.sale import SaleStatus

DAY = date(2026, 9, 15)


def partner(partner_id, participation, movements=(), is_house=False):
    return PartnerRecord(
        id=partner_id,
        name=partner_id,
        participation=Decimal(participation),
        is_house=is_house,
        movements=tuple(movements),
    )


def movement(movement_id, movement_type, amount):
    return MovementRecord(
        id=movement_id, movement_date=DAY, movement_type=movement_type, amount=Decimal(amount)
    )


def sold_item(item_id, cost, extra=(), **fields):
    return ItemRecord(
        id=item_id,
        cost=Decimal(cost),
        additional_costs=tuple(
            CostRecord(id=f"CT-{item_id}-{i}", cost_type="Repair", amount=Decimal(a))
            for i, a in enumerate(extra)
        ),
        stage=ItemStage.LIQUIDATED,
        status=ItemStatus.SOLD,
        **fields,
    )


def paid_sale(sale_id, item_id, price, paid=None):
    paid = price if paid is None else paid
    payments = (PaymentRecord(id=f"PAY-{sale_id}", payment_date=DAY, amount=Decimal(paid), method="Cash"),)
    status = SaleStatus.LIQUIDATED if Decimal(paid) >= Decimal(price) else SaleStatus.PARTIAL
    return SaleRecord(
        id=sale_id, watch_id=item_id, sale_date=DAY, agreed_price=Decimal(price),
        payments=payments, status=status,
    )


def row(settlement, partner_id):
    return next(s for s in settlement if s.partner_id == partner_id)


def test_partnership_sale_splits_by_participation():
    snapshot = LedgerSnapshot(
        items=(sold_item("W-1", "1000", extra=["200"]),),
        sales=(paid_sale("S-1", "W-1", "1500"),),
        partners=(partner("A", "40"), partner("B", "60")),
    )

    [allocation] = allocate(snapshot)

    assert allocation.cost_basis == Decimal("1200")
    assert allocation.profit == Decimal("300")
    assert allocation.shares == {"A": Decimal("120"), "B": Decimal("180")}


def test_contribution_sale_goes_entirely_to_contributor():
    snapshot = LedgerSnapshot(
        items=(sold_item(
            "W-1", "1000", extra=["200"],
            acquisition_mode=AcquisitionMode.CONTRIBUTION, contributing_partner_id="A",
        ),),
        sales=(paid_sale("S-1", "W-1", "1500"),),
        partners=(partner("A", "40"), partner("B", "60")),
    )

    totals = entitlements(snapshot)

    assert totals == {"A": Decimal("300"), "B": Decimal("0")}


def test_losses_offset_gains():
    snapshot = LedgerSnapshot(
        items=(sold_item("W-1", "1000"), sold_item("W-2", "600")),
        sales=(paid_sale("S-1", "W-1", "1300"), paid_sale("S-2", "W-2", "500")),
        partners=(partner("A", "50"), partner("B", "50")),
    )

    assert [a.profit for a in allocate(snapshot)] == [Decimal("300"), Decimal("-100")]
    assert entitlements(snapshot) == {"A": Decimal("100"), "B": Decimal("100")}


def test_pending_is_corresponds_minus_distributed():
    snapshot = LedgerSnapshot(
        items=(sold_item("W-1", "1000"),),
        sales=(paid_sale("S-1", "W-1", "1600"),),
        partners=(
            partner("A", "50", movements=[
                movement("M-1", MovementType.CONTRIBUTION, "1000"),
                movement("M-2", MovementType.DISTRIBUTION, "-150"),
            ]),
            partner("B", "50"),
        ),
    )

    a = row(settle(snapshot), "A")

    assert a.contributed == Decimal("1000")
    assert a.corresponds == Decimal("300")
    assert a.distributed == Decimal("150")
    assert a.pending == Decimal("150")
    assert a.pending_display == Decimal("150")


def test_over_distribution_shows_zero_but_keeps_signed_pending():
    snapshot = LedgerSnapshot(
        items=(sold_item("W-1", "1000"),),
        sales=(paid_sale("S-1", "W-1", "1200"),),
        partners=(
            partner("A", "100", movements=[
                movement("M-1", MovementType.DISTRIBUTION, "-150"),
                movement("M-2", MovementType.WITHDRAWAL, "-100"),
            ]),
        ),
    )

    a = row(settle(snapshot), "A")

    assert a.distributed == Decimal("250")
    assert a.pending == Decimal("-50")
    assert a.pending_display == Decimal("0")


def test_adjustments_count_as_capital_only_when_positive():
    snapshot = LedgerSnapshot(partners=(
        partner("A", "100", movements=[
            movement("M-1", MovementType.CONTRIBUTION, "500"),
            movement("M-2", MovementType.ADJUSTMENT, "50"),
            movement("M-3", MovementType.ADJUSTMENT, "-20"),
        ]),
    ))

    a = row(settle(snapshot), "A")

    assert a.contributed == Decimal("550")
    assert a.distributed == Decimal("0")


def test_custom_split_pays_listed_partners_only():
    item = sold_item(
        "W-1", "100",
        acquisition_mode=AcquisitionMode.CUSTOM,
        custom_split={"A": Decimal("70"), "C": Decimal("30")},
    )
    partners = (partner("A", "40"), partner("B", "60"), partner("C", "0"))

    assert split_for(item, partners) == {"A": Decimal("70"), "B": Decimal("0"), "C": Decimal("30")}


def test_contribution_split_ignores_global_participation():
    item = sold_item(
        "W-1", "100",
        acquisition_mode=AcquisitionMode.CONTRIBUTION,
        contributing_partner_id="B",
    )
    partners = (partner("A", "90"), partner("B", "10"))

    assert split_for(item, partners) == {"A": Decimal("0"), "B": Decimal("100")}


def test_house_split_uses_the_flagged_partner():
    item = sold_item("W-1", "100", acquisition_mode=AcquisitionMode.HOUSE)
    partners = (partner("A", "50"), partner("House", "50", is_house=True))

    assert split_for(item, partners) == {"A": Decimal("0"), "House": Decimal("100")}


def test_house_split_without_house_partner_fails():
    item = sold_item("W-1", "100", acquisition_mode=AcquisitionMode.HOUSE)

    with pytest.raises(InvalidSplitException):
        split_for(item, (partner("A", "100"),))


def test_only_liquidated_sales_are_allocated():
    snapshot = LedgerSnapshot(
        items=(sold_item("W-1", "1000"), sold_item("W-2", "1000")),
        sales=(
            paid_sale("S-1", "W-1", "1500"),
            paid_sale("S-2", "W-2", "1500", paid="700"),
        ),
        partners=(partner("A", "100"),),
    )

    assert [a.sale_id for a in allocate(snapshot)] == ["S-1"]
    assert entitlements(snapshot) == {"A": Decimal("500")}


def test_realized_profit_may_be_negative():
    item = sold_item("W-1", "1000", extra=["100"])
    sale = paid_sale("S-1", "W-1", "900")

    assert realized_profit(sale, item) == Decimal("-200")
