from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from models.catalog import Brand, WatchModel, Reference, CostType
from schemas.catalog import (
    BrandCreate, BrandUpdate,
    WatchModelCreate, WatchModelUpdate,
    ReferenceCreate, ReferenceUpdate,
    CostTypeCreate,
)
from schemas.responses import CatalogResponse, APIResponse
from exceptions import ResourceNotFoundException, DuplicateResourceException
from utils.id_generator import generate_id, BRAND_PREFIX, MODEL_PREFIX, REFERENCE_PREFIX, COST_TYPE_PREFIX

router = APIRouter()

viewer = get_current_actor_by_capability(Capability.VIEW_LEDGER)
editor = get_current_actor_by_capability(Capability.MANAGE_CATALOG)

async def _get_or_404(db: AsyncSession, model, object_id: str, label: str):
    instance = await db.get(model, object_id)
    if instance is None:
        raise ResourceNotFoundException(label)
    return instance

async def _ensure_unique_name(db: AsyncSession, model, name: str, label: str):
    result = await db.execute(select(model).filter(model.name == name))
    if result.scalar_one_or_none():
        raise DuplicateResourceException(f"{label} '{name}' already exists")

# Brands

@router.get("/brands", response_model=CatalogResponse)
async def get_brands(db: AsyncSession = Depends(get_db), actor: Actor = Depends(viewer)):
    result = await db.execute(select(Brand).order_by(Brand.name))
    return CatalogResponse(
        success=True,
        message="Brands retrieved successfully",
        data={"brands": [b.to_dict() for b in result.scalars().all()]}
    )

@router.post("/brands", response_model=CatalogResponse)
async def create_brand(
    brand_data: BrandCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    await _ensure_unique_name(db, Brand, brand_data.name, "Brand")

    brand = Brand(id=generate_id(BRAND_PREFIX), **brand_data.model_dump())
    db.add(brand)
    await db.commit()
    await db.refresh(brand)

    return CatalogResponse(success=True, message="Brand created successfully", data=brand.to_dict())

@router.put("/brands/{brand_id}", response_model=CatalogResponse)
async def update_brand(
    brand_id: str,
    brand_update: BrandUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    brand = await _get_or_404(db, Brand, brand_id, "Brand")
    update_data = brand_update.model_dump(exclude_unset=True)
    if update_data.get("name") and update_data["name"] != brand.name:
        await _ensure_unique_name(db, Brand, update_data["name"], "Brand")

    for field, value in update_data.items():
        setattr(brand, field, value)

    await db.commit()
    await db.refresh(brand)

    return CatalogResponse(success=True, message="Brand updated successfully", data=brand.to_dict())

# Models

@router.get("/models", response_model=CatalogResponse)
async def get_models(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(viewer),
    brand_id: Optional[str] = Query(None)
):
    query = select(WatchModel).order_by(WatchModel.name)
    if brand_id:
        query = query.filter(WatchModel.brand_id == brand_id)

    result = await db.execute(query)
    return CatalogResponse(
        success=True,
        message="Models retrieved successfully",
        data={"models": [m.to_dict() for m in result.scalars().all()]}
    )

@router.post("/models", response_model=CatalogResponse)
async def create_model(
    model_data: WatchModelCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    await _get_or_404(db, Brand, model_data.brand_id, "Brand")

    watch_model = WatchModel(id=generate_id(MODEL_PREFIX), **model_data.model_dump())
    db.add(watch_model)
    await db.commit()
    await db.refresh(watch_model)

    return CatalogResponse(success=True, message="Model created successfully", data=watch_model.to_dict())

@router.put("/models/{model_id}", response_model=CatalogResponse)
async def update_model(
    model_id: str,
    model_update: WatchModelUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    watch_model = await _get_or_404(db, WatchModel, model_id, "Model")
    for field, value in model_update.model_dump(exclude_unset=True).items():
        setattr(watch_model, field, value)

    await db.commit()
    await db.refresh(watch_model)

    return CatalogResponse(success=True, message="Model updated successfully", data=watch_model.to_dict())

# References

@router.get("/references", response_model=CatalogResponse)
async def get_references(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(viewer),
    model_id: Optional[str] = Query(None)
):
    query = select(Reference).order_by(Reference.ref)
    if model_id:
        query = query.filter(Reference.model_id == model_id)

    result = await db.execute(query)
    return CatalogResponse(
        success=True,
        message="References retrieved successfully",
        data={"references": [r.to_dict() for r in result.scalars().all()]}
    )

@router.post("/references", response_model=CatalogResponse)
async def create_reference(
    reference_data: ReferenceCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    await _get_or_404(db, WatchModel, reference_data.model_id, "Model")

    reference = Reference(id=generate_id(REFERENCE_PREFIX), **reference_data.model_dump())
    db.add(reference)
    await db.commit()
    await db.refresh(reference)

    return CatalogResponse(success=True, message="Reference created successfully", data=reference.to_dict())

@router.put("/references/{reference_id}", response_model=CatalogResponse)
async def update_reference(
    reference_id: str,
    reference_update: ReferenceUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    reference = await _get_or_404(db, Reference, reference_id, "Reference")
    for field, value in reference_update.model_dump(exclude_unset=True).items():
        setattr(reference, field, value)

    await db.commit()
    await db.refresh(reference)

    return CatalogResponse(success=True, message="Reference updated successfully", data=reference.to_dict())

# Cost types

@router.get("/cost-types", response_model=CatalogResponse)
async def get_cost_types(db: AsyncSession = Depends(get_db), actor: Actor = Depends(viewer)):
    result = await db.execute(select(CostType).order_by(CostType.name))
    return CatalogResponse(
        success=True,
        message="Cost types retrieved successfully",
        data={"cost_types": [c.to_dict() for c in result.scalars().all()]}
    )

@router.post("/cost-types", response_model=CatalogResponse)
async def create_cost_type(
    cost_type_data: CostTypeCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    await _ensure_unique_name(db, CostType, cost_type_data.name, "Cost type")

    cost_type = CostType(id=generate_id(COST_TYPE_PREFIX), **cost_type_data.model_dump())
    db.add(cost_type)
    await db.commit()
    await db.refresh(cost_type)

    return CatalogResponse(success=True, message="Cost type created successfully", data=cost_type.to_dict())

@router.delete("/cost-types/{cost_type_id}", response_model=APIResponse)
async def delete_cost_type(
    cost_type_id: str,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(editor)
):
    """
    Remove a cost type. Costs already recorded keep their type name.
    """
    cost_type = await _get_or_404(db, CostType, cost_type_id, "Cost type")
    await db.delete(cost_type)
    await db.commit()

    return APIResponse(success=True, message="Cost type deleted successfully")
