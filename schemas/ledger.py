"""JSON views of snapshot records, enriched with their derived figures."""
from dataclasses import asdict
from typing import Any, Dict

from business_logic.inventory_rules import InventoryBusinessLogic
from business_logic.sale_rules import SaleBusinessLogic
from business_logic.profit_split import PartnerSettlement, SaleAllocation
from business_logic.snapshot import ItemRecord, SaleRecord, PartnerRecord


def item_to_dict(item: ItemRecord) -> Dict[str, Any]:
    data = item.model_dump(mode="json")
    data["total_cost_basis"] = str(InventoryBusinessLogic.total_cost_basis(item))
    return data


def sale_to_dict(sale: SaleRecord) -> Dict[str, Any]:
    data = sale.model_dump(mode="json")
    data["amount_paid"] = str(SaleBusinessLogic.amount_paid(sale))
    data["balance_due"] = str(SaleBusinessLogic.balance_due(sale))
    return data


def partner_to_dict(partner: PartnerRecord) -> Dict[str, Any]:
    return partner.model_dump(mode="json")


def settlement_to_dict(settlement: PartnerSettlement) -> Dict[str, Any]:
    data = asdict(settlement)
    data["pending_display"] = settlement.pending_display
    return data


def allocation_to_dict(allocation: SaleAllocation) -> Dict[str, Any]:
    data = asdict(allocation)
    data["acquisition_mode"] = allocation.acquisition_mode.value
    return data
