"""Read-only summaries for the dashboard and the reports screen."""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from business_logic.inventory_rules import InventoryBusinessLogic
from business_logic.sale_rules import SaleBusinessLogic
from business_logic.profit_split import realized_profit, settle
from business_logic.snapshot import LedgerSnapshot
from models.inventory import ItemStage
from models.sale import SaleStatus
from core.config import settings
from utils.formatting import days_since, format_currency, month_start

ZERO = Decimal("0")
ONE_DECIMAL = Decimal("0.1")


def _liquidated(snapshot: LedgerSnapshot) -> List:
    """Profit is realized only once a sale is fully paid."""
    return [s for s in snapshot.sales if s.status == SaleStatus.LIQUIDATED]


def _percent(part: Decimal, whole: Decimal) -> Optional[Decimal]:
    if whole == 0:
        return None
    return (part / whole * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def monthly_profit(snapshot: LedgerSnapshot, today: date, months: int) -> List[Dict[str, Any]]:
    """Realized profit of the sales dated in each of the last ``months`` months."""
    buckets = []
    for back in range(months - 1, -1, -1):
        start = month_start(today, back)
        end = month_start(today, back - 1)
        total = ZERO
        for sale in _liquidated(snapshot):
            if start <= sale.sale_date < end:
                total += realized_profit(sale, snapshot.get_item(sale.watch_id))
        buckets.append({"month": start.strftime("%Y-%m"), "profit": max(total, ZERO)})
    return buckets


def alerts(snapshot: LedgerSnapshot, today: date, labels: Dict[str, str] = None) -> List[Dict[str, str]]:
    labels = labels or {}
    result = []

    for item in snapshot.items:
        if item.stage == ItemStage.INVENTORY and days_since(item.entry_date, today) > settings.STALE_INVENTORY_DAYS:
            result.append({
                "type": "warning",
                "item_id": item.id,
                "message": f"{labels.get(item.id, item.id)}: +{settings.STALE_INVENTORY_DAYS} days in inventory",
            })

    for sale in snapshot.sales:
        if sale.status != SaleStatus.LIQUIDATED:
            result.append({
                "type": "danger",
                "sale_id": sale.id,
                "message": f"Pending sale: balance of {format_currency(SaleBusinessLogic.balance_due(sale))}",
            })

    for item in snapshot.items:
        if item.stage == ItemStage.OPPORTUNITY:
            result.append({
                "type": "info",
                "item_id": item.id,
                "message": f"Opportunity awaiting approval: {labels.get(item.id, item.id)}",
            })

    return result


def dashboard_summary(snapshot: LedgerSnapshot, today: date, labels: Dict[str, str] = None) -> Dict[str, Any]:
    """
    Headline numbers for the back office.

    ``labels`` maps item ids to display names (brand, model, reference) and is
    only used to word the alerts.
    """
    in_stock = [i for i in snapshot.items if i.stage == ItemStage.INVENTORY]
    open_sales = [s for s in snapshot.sales if s.status != SaleStatus.LIQUIDATED]

    profit = ZERO
    for sale in _liquidated(snapshot):
        profit += realized_profit(sale, snapshot.get_item(sale.watch_id))

    return {
        "capital": sum((s.contributed for s in settle(snapshot)), ZERO),
        "inventory_value": sum((InventoryBusinessLogic.total_cost_basis(i) for i in in_stock), ZERO),
        "receivables": sum((SaleBusinessLogic.balance_due(s) for s in open_sales), ZERO),
        "accumulated_profit": profit,
        "counts": {
            stage.value: sum(1 for i in snapshot.items if i.stage == stage)
            for stage in ItemStage
        },
        "open_sales": len(open_sales),
        "monthly_profit": monthly_profit(snapshot, today, settings.DASHBOARD_MONTHS),
        "alerts": alerts(snapshot, today, labels),
    }


def sales_report(snapshot: LedgerSnapshot) -> Dict[str, Any]:
    """Per-sale margins plus ROI of realized profit over partner capital."""
    rows = []
    margins = []
    total_profit = ZERO
    for sale in snapshot.sales:
        item = snapshot.get_item(sale.watch_id)
        profit = realized_profit(sale, item)
        margin = _percent(profit, sale.agreed_price)
        if sale.status == SaleStatus.LIQUIDATED:
            total_profit += profit
        margins.append(margin)
        rows.append({
            "sale_id": sale.id,
            "item_id": item.id,
            "cost_basis": InventoryBusinessLogic.total_cost_basis(item),
            "agreed_price": sale.agreed_price,
            "profit": profit,
            "margin": margin,
            "paid": SaleBusinessLogic.amount_paid(sale),
            "status": sale.status.value,
        })

    capital = sum((s.contributed for s in settle(snapshot)), ZERO)
    return {
        "sales": rows,
        "total_profit": total_profit,
        "capital": capital,
        "roi": _percent(total_profit, capital),
        "average_margin": (
            (sum(margins, ZERO) / len(margins)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
            if margins else None
        ),
    }
