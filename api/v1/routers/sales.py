from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from business_logic.sale_rules import SaleBusinessLogic
from business_logic.snapshot import PaymentRecord
from models.contact import Client
from models.sale import SaleStatus
from schemas.sale import SaleCreate, PaymentCreate
from schemas.ledger import sale_to_dict
from schemas.responses import SaleResponse
from services.ledger_store import LedgerStore, get_ledger_store
from exceptions import ResourceNotFoundException
from utils.id_generator import generate_id, SALE_PREFIX, PAYMENT_PREFIX

router = APIRouter()

@router.get("/", response_model=SaleResponse)
async def get_sales(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER)),
    status: Optional[SaleStatus] = Query(None)
):
    """
    List sales with amount paid and balance due
    """
    snapshot = await store.load(db)
    sales = [s for s in snapshot.sales if status is None or s.status == status]

    return SaleResponse(
        success=True,
        message="Sales retrieved successfully",
        data={"sales": [sale_to_dict(s) for s in sales], "total": len(sales)}
    )

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: str,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    snapshot = await store.load(db)
    return SaleResponse(
        success=True,
        message="Sale retrieved successfully",
        data=sale_to_dict(snapshot.get_sale(sale_id))
    )

@router.post("/", response_model=SaleResponse)
async def create_sale(
    sale_data: SaleCreate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.RECORD_SALES))
):
    """
    Sell an inventory piece; the item is marked Sold in the same transaction
    """
    if sale_data.client_id and not await db.get(Client, sale_data.client_id):
        raise ResourceNotFoundException("Client")

    sale_id = generate_id(SALE_PREFIX)
    snapshot = await store.apply(
        db,
        lambda s: SaleBusinessLogic.create_sale(
            s,
            sale_id,
            sale_data.watch_id,
            sale_data.client_id,
            sale_data.agreed_price,
            sale_data.sale_date or date.today(),
            sale_data.notes,
        ),
        f"sell {sale_data.watch_id} as {sale_id}",
    )

    return SaleResponse(
        success=True,
        message="Sale created successfully",
        data=sale_to_dict(snapshot.get_sale(sale_id))
    )

@router.post("/{sale_id}/payments", response_model=SaleResponse)
async def record_payment(
    sale_id: str,
    payment_data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.RECORD_SALES))
):
    """
    Record a (partial) payment and recompute the sale status
    """
    payment = PaymentRecord(
        id=generate_id(PAYMENT_PREFIX),
        payment_date=payment_data.payment_date or date.today(),
        amount=payment_data.amount,
        method=payment_data.method.value,
        notes=payment_data.notes,
    )
    snapshot = await store.apply(
        db,
        lambda s: SaleBusinessLogic.record_payment(s, sale_id, payment),
        f"payment {payment.id} of {payment.amount} on {sale_id}",
    )

    return SaleResponse(
        success=True,
        message="Payment recorded successfully",
        data=sale_to_dict(snapshot.get_sale(sale_id))
    )
