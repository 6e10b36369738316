from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from business_logic.snapshot import LedgerSnapshot, SaleRecord, PaymentRecord
from models.inventory import ItemStage, ItemStatus
from models.sale import SaleStatus
from exceptions import (
    InvalidStatusTransitionException,
    InvalidAmountException,
    DoubleSaleException,
)
from utils.formatting import has_cents_precision, to_decimal

class SaleBusinessLogic:
    """Sale and partial-payment ledger."""

    @staticmethod
    def derive_status(payments: Iterable[PaymentRecord], agreed_price: Decimal) -> SaleStatus:
        paid = sum((p.amount for p in payments), Decimal("0"))
        if paid >= agreed_price:
            return SaleStatus.LIQUIDATED
        if paid > 0:
            return SaleStatus.PARTIAL
        return SaleStatus.PENDING

    @staticmethod
    def amount_paid(sale: SaleRecord) -> Decimal:
        return sum((p.amount for p in sale.payments), Decimal("0"))

    @staticmethod
    def balance_due(sale: SaleRecord) -> Decimal:
        """Outstanding amount; negative when the client overpaid."""
        return sale.agreed_price - SaleBusinessLogic.amount_paid(sale)

    @staticmethod
    def create_sale(
        snapshot: LedgerSnapshot,
        sale_id: str,
        item_id: str,
        client_id: Optional[str],
        agreed_price,
        sale_date: date,
        notes: Optional[str] = None,
    ) -> LedgerSnapshot:
        """
        Sell an available piece. The item flips to liquidated/Sold in the same
        snapshot the sale is added to.
        """
        price = to_decimal(agreed_price)
        if price <= 0:
            raise InvalidAmountException("Agreed price must be greater than zero")
        if not has_cents_precision(price):
            raise InvalidAmountException("Amounts allow at most two decimals")

        item = snapshot.get_item(item_id)

        if snapshot.sale_for_item(item_id) is not None:
            raise DoubleSaleException(f"Item {item_id} already has a sale")

        if item.stage != ItemStage.INVENTORY:
            raise InvalidStatusTransitionException(
                f"Item is not available for sale (current stage: {item.stage.value})"
            )

        sale = SaleRecord(
            id=sale_id,
            watch_id=item_id,
            client_id=client_id,
            sale_date=sale_date,
            agreed_price=price,
            notes=notes,
            payments=(),
            status=SaleStatus.PENDING,
        )
        sold = item.model_copy(update={"stage": ItemStage.LIQUIDATED, "status": ItemStatus.SOLD})
        return snapshot.with_item(sold).with_sale(sale)

    @staticmethod
    def record_payment(
        snapshot: LedgerSnapshot,
        sale_id: str,
        payment: PaymentRecord,
    ) -> LedgerSnapshot:
        """Append a payment and recompute the sale status from the new total."""
        sale = snapshot.get_sale(sale_id)

        if sale.status == SaleStatus.LIQUIDATED:
            raise InvalidStatusTransitionException("Sale is already liquidated")

        if payment.amount <= 0:
            raise InvalidAmountException("Payment amount must be greater than zero")
        if not has_cents_precision(payment.amount):
            raise InvalidAmountException("Amounts allow at most two decimals")

        payments = sale.payments + (payment,)
        updated = sale.model_copy(update={
            "payments": payments,
            "status": SaleBusinessLogic.derive_status(payments, sale.agreed_price),
        })
        return snapshot.with_sale(updated)
