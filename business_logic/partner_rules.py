from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping

from business_logic.snapshot import LedgerSnapshot, PartnerRecord, MovementRecord
from models.inventory import AcquisitionMode
from models.partner import MovementType
from exceptions import InvalidAmountException, InvalidSplitException
from utils.formatting import has_cents_precision, to_decimal

FULL_SPLIT = Decimal("100")

# Cash leaving the business towards the partner
OUTFLOW_TYPES = (MovementType.DISTRIBUTION, MovementType.WITHDRAWAL)

class PartnerBusinessLogic:

    @staticmethod
    def signed_amount(movement_type: MovementType, amount) -> Decimal:
        """Outflows are stored negative, contributions positive, adjustments as given."""
        value = to_decimal(amount)
        if value == 0:
            raise InvalidAmountException("Movement amount cannot be zero")
        if not has_cents_precision(value):
            raise InvalidAmountException("Amounts allow at most two decimals")
        if movement_type in OUTFLOW_TYPES:
            return -abs(value)
        if movement_type == MovementType.CONTRIBUTION:
            return abs(value)
        return value

    @staticmethod
    def record_movement(
        snapshot: LedgerSnapshot,
        partner_id: str,
        movement: MovementRecord,
    ) -> LedgerSnapshot:
        partner = snapshot.get_partner(partner_id)
        normalized = movement.model_copy(update={
            "amount": PartnerBusinessLogic.signed_amount(movement.movement_type, movement.amount),
        })
        updated = partner.model_copy(update={"movements": partner.movements + (normalized,)})
        return snapshot.with_partner(updated)

    @staticmethod
    def configure_partners(
        snapshot: LedgerSnapshot,
        partners: Iterable[Mapping[str, Any]],
    ) -> LedgerSnapshot:
        """
        Create or update partners by id. Movements are never touched here.
        The whole table must split exactly 100% and hold at most one house
        entity, and exactly one while any house item is on the books.
        """
        result = snapshot
        for data in partners:
            fields: Dict[str, Any] = dict(data)
            fields.pop("movements", None)
            if "participation" in fields:
                fields["participation"] = to_decimal(fields["participation"])
                if fields["participation"] < 0:
                    raise InvalidSplitException("Participation cannot be negative")
                if not has_cents_precision(fields["participation"]):
                    raise InvalidSplitException("Participation allows at most two decimals")

            existing = next((p for p in result.partners if p.id == fields["id"]), None)
            if existing is None:
                partner = PartnerRecord(**fields)
            else:
                partner = existing.model_copy(update=fields)
            result = result.with_partner(partner)

        total = sum((p.participation for p in result.partners), Decimal("0"))
        if total != FULL_SPLIT:
            raise InvalidSplitException(f"Partner participations must sum to 100% (got {total}%)")

        houses = len(result.house_partners())
        if houses > 1:
            raise InvalidSplitException("Only one partner can be the house entity")
        if houses == 0 and any(i.acquisition_mode == AcquisitionMode.HOUSE for i in result.items):
            raise InvalidSplitException("House items exist, so one partner must stay the house entity")

        return result
