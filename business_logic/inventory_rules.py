from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from business_logic.snapshot import LedgerSnapshot, ItemRecord, CostRecord
from models.inventory import ItemStage, ItemStatus, AcquisitionMode
from exceptions import (
    InvalidStatusTransitionException,
    InvalidAmountException,
    InvalidSplitException,
)
from utils.formatting import has_cents_precision, to_decimal

HOUSE_REQUIRED = "House items need exactly one partner flagged as the house entity"

class InventoryBusinessLogic:
    """Inventory cost model: intake, additional costs, approval."""

    @staticmethod
    def total_cost_basis(item: ItemRecord) -> Decimal:
        """Base acquisition cost plus every additional cost."""
        return item.cost + sum((c.amount for c in item.additional_costs), Decimal("0"))

    @staticmethod
    def validate_acquisition(
        snapshot: LedgerSnapshot,
        mode: AcquisitionMode,
        contributing_partner_id: Optional[str],
        custom_split: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """
        Check the split parameters of an acquisition mode against the current
        partner table and return the normalized fields for the item.

        Fields that do not belong to ``mode`` come back as None.
        """
        known = snapshot.partner_ids()

        if mode == AcquisitionMode.CONTRIBUTION:
            if not contributing_partner_id:
                raise InvalidSplitException("Contribution items need the contributing partner")
            if contributing_partner_id not in known:
                raise InvalidSplitException(f"Unknown partner id: {contributing_partner_id}")
            return {"contributing_partner_id": contributing_partner_id, "custom_split": None}

        if mode == AcquisitionMode.CUSTOM:
            if not custom_split:
                raise InvalidSplitException("Custom items need a split")
            unknown = sorted(set(custom_split) - known)
            if unknown:
                raise InvalidSplitException(f"Unknown partner id: {', '.join(unknown)}")
            split = {pid: to_decimal(pct) for pid, pct in custom_split.items()}
            if any(pct < 0 for pct in split.values()):
                raise InvalidSplitException("Split percentages cannot be negative")
            if not all(has_cents_precision(pct) for pct in split.values()):
                raise InvalidSplitException("Split percentages allow at most two decimals")
            return {"contributing_partner_id": None, "custom_split": split}

        # A liquidated house sale must always find its partner
        if mode == AcquisitionMode.HOUSE and len(snapshot.house_partners()) != 1:
            raise InvalidSplitException(HOUSE_REQUIRED)

        return {"contributing_partner_id": None, "custom_split": None}

    @staticmethod
    def register_item(
        snapshot: LedgerSnapshot,
        item_id: str,
        data: Mapping[str, Any],
        today: date,
    ) -> LedgerSnapshot:
        """
        Intake a new piece. It lands in the opportunity stage when its status is
        Opportunity; any other status puts it straight into inventory.
        """
        fields = dict(data)
        cost = to_decimal(fields.pop("cost", 0))
        if cost < 0:
            raise InvalidAmountException("Cost cannot be negative")
        if not has_cents_precision(cost):
            raise InvalidAmountException("Amounts allow at most two decimals")

        mode = AcquisitionMode(fields.pop("acquisition_mode", AcquisitionMode.PARTNERSHIP))
        split_fields = InventoryBusinessLogic.validate_acquisition(
            snapshot,
            mode,
            fields.pop("contributing_partner_id", None),
            fields.pop("custom_split", None),
        )

        status = ItemStatus(fields.pop("status", ItemStatus.OPPORTUNITY))
        if status in (ItemStatus.SOLD, ItemStatus.LIQUIDATED):
            raise InvalidStatusTransitionException(f"New items cannot start as {status.value}")

        if status == ItemStatus.OPPORTUNITY:
            stage = ItemStage.OPPORTUNITY
            entry_date = None
        else:
            stage = ItemStage.INVENTORY
            entry_date = fields.pop("entry_date", None) or today
        fields.pop("entry_date", None)

        item = ItemRecord(
            id=item_id,
            cost=cost,
            stage=stage,
            status=status,
            acquisition_mode=mode,
            entry_date=entry_date,
            **split_fields,
            **fields,
        )
        return snapshot.with_item(item)

    @staticmethod
    def add_additional_cost(
        snapshot: LedgerSnapshot,
        item_id: str,
        cost: CostRecord,
    ) -> LedgerSnapshot:
        """Append an additional cost; the base cost is left untouched."""
        if cost.amount <= 0:
            raise InvalidAmountException("Additional cost amount must be greater than zero")
        if not has_cents_precision(cost.amount):
            raise InvalidAmountException("Amounts allow at most two decimals")

        item = snapshot.get_item(item_id)
        updated = item.model_copy(update={"additional_costs": item.additional_costs + (cost,)})
        return snapshot.with_item(updated)

    @staticmethod
    def approve(
        snapshot: LedgerSnapshot,
        item_id: str,
        approved_by: str,
        today: date,
    ) -> LedgerSnapshot:
        """Move a validated opportunity into available inventory."""
        item = snapshot.get_item(item_id)

        if item.stage != ItemStage.OPPORTUNITY:
            raise InvalidStatusTransitionException(
                f"Only opportunities can be approved (current stage: {item.stage.value})"
            )

        updated = item.model_copy(update={
            "stage": ItemStage.INVENTORY,
            "status": ItemStatus.AVAILABLE,
            "entry_date": today,
            "validated_by": approved_by,
            "validation_date": today,
        })
        return snapshot.with_item(updated)

    @staticmethod
    def update_display_status(
        snapshot: LedgerSnapshot,
        item_id: str,
        status: ItemStatus,
    ) -> LedgerSnapshot:
        """
        Switch an inventory piece between Available, Consigned and Reserved.
        Stage-changing statuses go through approve/create_sale instead.
        """
        item = snapshot.get_item(item_id)
        allowed = (ItemStatus.AVAILABLE, ItemStatus.CONSIGNED, ItemStatus.RESERVED)

        if item.stage != ItemStage.INVENTORY or status not in allowed:
            raise InvalidStatusTransitionException(
                f"Invalid transition from {item.status.value} to {status.value}"
            )

        return snapshot.with_item(item.model_copy(update={"status": status}))
