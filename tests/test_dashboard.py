from datetime import date
from decimal import Decimal

import pytest

from business_logic.dashboard import dashboard_summary, sales_report
from business_logic.snapshot import (
    LedgerSnapshot,
    ItemRecord,
    CostRecord,
    SaleRecord,
    PaymentRecord,
    PartnerRecord,
    MovementRecord,
)
from models.inventory import ItemStage, ItemStatus
from models.partner import MovementType
from models.sale import SaleStatus

TODAY = date(2026, 10, 19)


def contribution(movement_id, amount):
    return MovementRecord(
        id=movement_id, movement_date=date(2026, 1, 5),
        movement_type=MovementType.CONTRIBUTION, amount=Decimal(amount),
    )


def payment(payment_id, day, amount):
    return PaymentRecord(id=payment_id, payment_date=day, amount=Decimal(amount), method="Cash")


@pytest.fixture
def snapshot():
    sold = dict(stage=ItemStage.LIQUIDATED, status=ItemStatus.SOLD)
    return LedgerSnapshot(
        items=(
            ItemRecord(
                id="W-1", cost=Decimal("1000"),
                additional_costs=(CostRecord(id="CT-1", cost_type="Repair", amount=Decimal("200")),),
                **sold,
            ),
            ItemRecord(
                id="W-2", cost=Decimal("800"), stage=ItemStage.INVENTORY,
                status=ItemStatus.AVAILABLE, entry_date=date(2026, 7, 1),
            ),
            ItemRecord(id="W-3", cost=Decimal("500")),
            ItemRecord(id="W-4", cost=Decimal("600"), **sold),
        ),
        sales=(
            SaleRecord(
                id="S-1", watch_id="W-1", sale_date=date(2026, 9, 15), agreed_price=Decimal("1500"),
                payments=(payment("PAY-1", date(2026, 9, 15), "1500"),), status=SaleStatus.LIQUIDATED,
            ),
            SaleRecord(
                id="S-4", watch_id="W-4", sale_date=date(2026, 10, 1), agreed_price=Decimal("1000"),
                payments=(payment("PAY-2", date(2026, 10, 1), "400"),), status=SaleStatus.PARTIAL,
            ),
        ),
        partners=(
            PartnerRecord(id="P-A", name="Ana", participation=Decimal("50"), movements=(contribution("M-1", "2000"),)),
            PartnerRecord(id="P-B", name="Beto", participation=Decimal("50"), movements=(contribution("M-2", "2000"),)),
        ),
    )


def test_dashboard_figures(snapshot):
    summary = dashboard_summary(snapshot, TODAY)

    assert summary["capital"] == Decimal("4000")
    assert summary["inventory_value"] == Decimal("800")
    assert summary["receivables"] == Decimal("600")
    assert summary["accumulated_profit"] == Decimal("300")
    assert summary["counts"] == {"opportunity": 1, "inventory": 1, "liquidated": 2}
    assert summary["open_sales"] == 1


def test_dashboard_monthly_profit(snapshot):
    months = dashboard_summary(snapshot, TODAY)["monthly_profit"]

    assert [m["month"] for m in months] == ["2026-05", "2026-06", "2026-07", "2026-08", "2026-09", "2026-10"]
    assert [m["profit"] for m in months] == [0, 0, 0, 0, Decimal("300"), 0]


def test_dashboard_alerts(snapshot):
    alerts = dashboard_summary(snapshot, TODAY, labels={"W-2": "Rolex Submariner 124060"})["alerts"]

    assert [(a["type"], a.get("item_id") or a.get("sale_id")) for a in alerts] == [
        ("warning", "W-2"),
        ("danger", "S-4"),
        ("info", "W-3"),
    ]
    assert alerts[0]["message"].startswith("Rolex Submariner 124060")
    assert alerts[1]["message"] == "Pending sale: balance of $600"


def test_losing_month_is_floored_at_zero(snapshot):
    losing = snapshot.with_sale(snapshot.get_sale("S-4").model_copy(update={
        "agreed_price": Decimal("100"),
        "status": SaleStatus.LIQUIDATED,
    }))

    months = dashboard_summary(losing, TODAY)["monthly_profit"]

    assert months[-1] == {"month": "2026-10", "profit": Decimal("0")}


def test_profit_counts_once_the_sale_is_liquidated(snapshot):
    settled = snapshot.with_sale(snapshot.get_sale("S-4").model_copy(update={
        "payments": (payment("PAY-2", date(2026, 10, 1), "400"), payment("PAY-3", date(2026, 10, 9), "600")),
        "status": SaleStatus.LIQUIDATED,
    }))

    summary = dashboard_summary(settled, TODAY)

    assert summary["accumulated_profit"] == Decimal("700")
    assert summary["monthly_profit"][-1]["profit"] == Decimal("400")
    assert sales_report(settled)["total_profit"] == Decimal("700")


def test_sales_report(snapshot):
    report = sales_report(snapshot)

    assert [r["sale_id"] for r in report["sales"]] == ["S-1", "S-4"]
    assert report["sales"][0]["margin"] == Decimal("20.0")
    assert report["sales"][1]["paid"] == Decimal("400")
    assert report["total_profit"] == Decimal("300")
    assert report["roi"] == Decimal("7.5")
    assert report["average_margin"] == Decimal("30.0")


def test_sales_report_without_capital():
    report = sales_report(LedgerSnapshot())

    assert report["sales"] == []
    assert report["roi"] is None
    assert report["average_margin"] is None
