from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_
from typing import Optional

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from models.contact import Client, Supplier, ClientTier
from schemas.contact import ClientCreate, ClientUpdate, SupplierCreate, SupplierUpdate
from schemas.responses import ContactResponse
from exceptions import ResourceNotFoundException
from utils.id_generator import generate_id, CLIENT_PREFIX, SUPPLIER_PREFIX

router = APIRouter()

viewer = get_current_actor_by_capability(Capability.VIEW_LEDGER)
editor = get_current_actor_by_capability(Capability.MANAGE_CATALOG)

@router.get("/clients", response_model=ContactResponse)
async def get_clients(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(viewer),
    tier: Optional[ClientTier] = Query(None),
    search: Optional[str] = Query(None)
):
    """
    List clients, optionally by tier or by a name/city/email search
    """
    query = select(Client).order_by(Client.name)
    if tier:
        query = query.filter(Client.tier == tier.value)
    if search:
        query = query.filter(
            or_(
                Client.name.contains(search),
                Client.city.contains(search),
                Client.email.contains(search)
            )
        )

    result = await db.execute(query)
    return ContactResponse(
        success=True,
        message="Clients retrieved successfully",
        data={"clients": [c.to_dict() for c in result.scalars().all()]}
    )

@router.post("/clients", response_model=ContactResponse)
async def create_client(
    client_data: ClientCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    data = client_data.model_dump()
    data["tier"] = client_data.tier.value

    client = Client(id=generate_id(CLIENT_PREFIX), **data)
    db.add(client)
    await db.commit()
    await db.refresh(client)

    return ContactResponse(success=True, message="Client created successfully", data=client.to_dict())

@router.put("/clients/{client_id}", response_model=ContactResponse)
async def update_client(
    client_id: str,
    client_update: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    client = await db.get(Client, client_id)
    if not client:
        raise ResourceNotFoundException("Client")

    update_data = client_update.model_dump(exclude_unset=True)
    if update_data.get("tier"):
        update_data["tier"] = update_data["tier"].value
    for field, value in update_data.items():
        setattr(client, field, value)

    await db.commit()
    await db.refresh(client)

    return ContactResponse(success=True, message="Client updated successfully", data=client.to_dict())

@router.get("/suppliers", response_model=ContactResponse)
async def get_suppliers(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(viewer)
):
    result = await db.execute(select(Supplier).order_by(Supplier.name))
    return ContactResponse(
        success=True,
        message="Suppliers retrieved successfully",
        data={"suppliers": [s.to_dict() for s in result.scalars().all()]}
    )

@router.post("/suppliers", response_model=ContactResponse)
async def create_supplier(
    supplier_data: SupplierCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    supplier = Supplier(id=generate_id(SUPPLIER_PREFIX), **supplier_data.model_dump())
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)

    return ContactResponse(success=True, message="Supplier created successfully", data=supplier.to_dict())

@router.put("/suppliers/{supplier_id}", response_model=ContactResponse)
async def update_supplier(
    supplier_id: str,
    supplier_update: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    supplier = await db.get(Supplier, supplier_id)
    if not supplier:
        raise ResourceNotFoundException("Supplier")

    for field, value in supplier_update.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)

    await db.commit()
    await db.refresh(supplier)

    return ContactResponse(success=True, message="Supplier updated successfully", data=supplier.to_dict())
