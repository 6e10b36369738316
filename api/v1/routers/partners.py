from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from core.database import get_db
from core.security import get_current_actor, get_current_actor_by_capability
from business_logic.permissions import Actor, Capability, require_partner_access
from business_logic.partner_rules import PartnerBusinessLogic
from business_logic.profit_split import allocate, settle
from business_logic.snapshot import MovementRecord
from schemas.partner import PartnerTable, MovementCreate
from schemas.ledger import partner_to_dict, settlement_to_dict, allocation_to_dict
from schemas.responses import PartnerResponse
from services.ledger_store import LedgerStore, get_ledger_store
from exceptions import ResourceNotFoundException
from utils.id_generator import generate_id, PARTNER_PREFIX, MOVEMENT_PREFIX

router = APIRouter()

@router.get("/", response_model=PartnerResponse)
async def get_partners(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    """
    Partner table with every capital movement
    """
    snapshot = await store.load(db)
    return PartnerResponse(
        success=True,
        message="Partners retrieved successfully",
        data={"partners": [partner_to_dict(p) for p in snapshot.partners]}
    )

@router.put("/", response_model=PartnerResponse)
async def configure_partners(
    table: PartnerTable,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.CONFIGURE_PARTNERS))
):
    """
    Create or update partners. The resulting table must split exactly 100%.
    """
    rows = []
    for config in table.partners:
        data = config.model_dump()
        data["id"] = config.id or generate_id(PARTNER_PREFIX)
        rows.append(data)

    snapshot = await store.apply(
        db,
        lambda s: PartnerBusinessLogic.configure_partners(s, rows),
        f"configure partners ({len(rows)} row(s)) by {actor.name}",
    )

    return PartnerResponse(
        success=True,
        message="Partner table updated successfully",
        data={"partners": [partner_to_dict(p) for p in snapshot.partners]}
    )

@router.post("/{partner_id}/movements", response_model=PartnerResponse)
async def record_movement(
    partner_id: str,
    movement_data: MovementCreate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.RECORD_MOVEMENTS))
):
    """
    Record a contribution, distribution, withdrawal or adjustment
    """
    movement = MovementRecord(
        id=generate_id(MOVEMENT_PREFIX),
        movement_date=movement_data.movement_date or date.today(),
        movement_type=movement_data.movement_type,
        amount=movement_data.amount,
        concept=movement_data.concept,
    )
    snapshot = await store.apply(
        db,
        lambda s: PartnerBusinessLogic.record_movement(s, partner_id, movement),
        f"{movement.movement_type.value} of {movement.amount} for {partner_id}",
    )

    return PartnerResponse(
        success=True,
        message="Movement recorded successfully",
        data=partner_to_dict(snapshot.get_partner(partner_id))
    )

@router.get("/settlement", response_model=PartnerResponse)
async def get_settlement(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    """
    Contributed, corresponds, distributed and pending for every partner
    """
    snapshot = await store.load(db)
    return PartnerResponse(
        success=True,
        message="Settlement computed successfully",
        data={"settlement": [settlement_to_dict(s) for s in settle(snapshot)]}
    )

@router.get("/allocations", response_model=PartnerResponse)
async def get_allocations(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    """
    Per-sale profit allocation for every liquidated sale
    """
    snapshot = await store.load(db)
    return PartnerResponse(
        success=True,
        message="Allocations computed successfully",
        data={"allocations": [allocation_to_dict(a) for a in allocate(snapshot)]}
    )

@router.get("/{partner_id}/settlement", response_model=PartnerResponse)
async def get_partner_settlement(
    partner_id: str,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor)
):
    """
    Settlement row of one partner. Investors may only read their own.
    """
    require_partner_access(actor, partner_id)

    snapshot = await store.load(db)
    row = next((s for s in settle(snapshot) if s.partner_id == partner_id), None)
    if row is None:
        raise ResourceNotFoundException("Partner")

    return PartnerResponse(
        success=True,
        message="Settlement computed successfully",
        data=settlement_to_dict(row)
    )
