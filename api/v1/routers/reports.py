from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Dict
from datetime import date

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from business_logic.dashboard import dashboard_summary, sales_report
from business_logic.snapshot import LedgerSnapshot
from models.catalog import Brand, WatchModel, Reference
from schemas.responses import ReportResponse
from services.ledger_store import LedgerStore, get_ledger_store

router = APIRouter()

async def _item_labels(db: AsyncSession, snapshot: LedgerSnapshot) -> Dict[str, str]:
    """Brand, model and reference of each catalogued item, for alert wording."""
    result = await db.execute(
        select(Reference.id, Brand.name, WatchModel.name, Reference.ref)
        .select_from(Reference)
        .join(WatchModel, Reference.model_id == WatchModel.id)
        .join(Brand, WatchModel.brand_id == Brand.id)
    )
    names = {ref_id: f"{brand} {model} {ref}" for ref_id, brand, model, ref in result.all()}
    return {
        item.id: names[item.reference_id]
        for item in snapshot.items
        if item.reference_id in names
    }

@router.get("/dashboard", response_model=ReportResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    """
    Capital, inventory value, receivables, monthly profit and alerts
    """
    snapshot = await store.load(db)
    labels = await _item_labels(db, snapshot)

    return ReportResponse(
        success=True,
        message="Dashboard computed successfully",
        data=dashboard_summary(snapshot, date.today(), labels)
    )

@router.get("/sales", response_model=ReportResponse)
async def get_sales_report(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_REPORTS))
):
    """
    Margin per sale, ROI over partner capital and average margin
    """
    snapshot = await store.load(db)
    return ReportResponse(
        success=True,
        message="Sales report computed successfully",
        data=sales_report(snapshot)
    )
