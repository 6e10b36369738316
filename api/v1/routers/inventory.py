from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from business_logic.inventory_rules import InventoryBusinessLogic
from business_logic.snapshot import CostRecord
from models.catalog import Reference
from models.contact import Supplier
from models.inventory import ItemStage, ItemStatus
from schemas.inventory import ItemCreate, AdditionalCostCreate, ItemStatusUpdate
from schemas.ledger import item_to_dict
from schemas.responses import InventoryResponse
from services.ledger_store import LedgerStore, get_ledger_store
from exceptions import ResourceNotFoundException
from utils.id_generator import generate_id, ITEM_PREFIX, COST_PREFIX

router = APIRouter()

@router.get("/", response_model=InventoryResponse)
async def get_inventory(
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER)),
    stage: Optional[ItemStage] = Query(None),
    status: Optional[ItemStatus] = Query(None)
):
    """
    List inventory items with their total cost basis
    """
    snapshot = await store.load(db)
    items = [
        item for item in snapshot.items
        if (stage is None or item.stage == stage) and (status is None or item.status == status)
    ]

    return InventoryResponse(
        success=True,
        message="Inventory retrieved successfully",
        data={"items": [item_to_dict(item) for item in items], "total": len(items)}
    )

@router.get("/{item_id}", response_model=InventoryResponse)
async def get_inventory_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.VIEW_LEDGER))
):
    """
    Get a specific inventory item by ID
    """
    snapshot = await store.load(db)
    return InventoryResponse(
        success=True,
        message="Inventory item retrieved successfully",
        data=item_to_dict(snapshot.get_item(item_id))
    )

@router.post("/", response_model=InventoryResponse)
async def create_inventory_item(
    item_data: ItemCreate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_INVENTORY))
):
    """
    Register a new piece, either as an opportunity or straight into inventory
    """
    if item_data.reference_id and not await db.get(Reference, item_data.reference_id):
        raise ResourceNotFoundException("Reference")
    if item_data.supplier_id and not await db.get(Supplier, item_data.supplier_id):
        raise ResourceNotFoundException("Supplier")

    item_id = generate_id(ITEM_PREFIX)
    snapshot = await store.apply(
        db,
        lambda s: InventoryBusinessLogic.register_item(
            s, item_id, item_data.model_dump(), date.today()
        ),
        f"register item {item_id}",
    )

    return InventoryResponse(
        success=True,
        message="Inventory item created successfully",
        data=item_to_dict(snapshot.get_item(item_id))
    )

@router.post("/{item_id}/costs", response_model=InventoryResponse)
async def add_additional_cost(
    item_id: str,
    cost_data: AdditionalCostCreate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_INVENTORY))
):
    """
    Append an additional cost (shipping, repair...) to an item
    """
    cost = CostRecord(
        id=generate_id(COST_PREFIX),
        cost_type=cost_data.cost_type,
        cost_date=cost_data.cost_date or date.today(),
        amount=cost_data.amount,
        description=cost_data.description,
    )
    snapshot = await store.apply(
        db,
        lambda s: InventoryBusinessLogic.add_additional_cost(s, item_id, cost),
        f"add {cost.cost_type} cost to {item_id}",
    )

    return InventoryResponse(
        success=True,
        message="Additional cost recorded successfully",
        data=item_to_dict(snapshot.get_item(item_id))
    )

@router.post("/{item_id}/approve", response_model=InventoryResponse)
async def approve_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_INVENTORY))
):
    """
    Approve an opportunity into available inventory
    """
    snapshot = await store.apply(
        db,
        lambda s: InventoryBusinessLogic.approve(s, item_id, actor.name, date.today()),
        f"approve {item_id} by {actor.name}",
    )

    return InventoryResponse(
        success=True,
        message="Item approved into inventory",
        data=item_to_dict(snapshot.get_item(item_id))
    )

@router.patch("/{item_id}/status", response_model=InventoryResponse)
async def update_item_status(
    item_id: str,
    status_data: ItemStatusUpdate,
    db: AsyncSession = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_INVENTORY))
):
    """
    Mark an inventory piece as Available, Consigned or Reserved
    """
    snapshot = await store.apply(
        db,
        lambda s: InventoryBusinessLogic.update_display_status(s, item_id, status_data.status),
        f"set {item_id} to {status_data.status.value}",
    )

    return InventoryResponse(
        success=True,
        message="Item status updated successfully",
        data=item_to_dict(snapshot.get_item(item_id))
    )
