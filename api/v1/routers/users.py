from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional

from core.database import get_db
from core.security import get_current_actor_by_capability
from business_logic.permissions import Actor, Capability
from models.user import User, UserRole
from models.partner import Partner
from schemas.user import UserUpdate
from schemas.responses import UserResponse
from exceptions import InvalidStatusTransitionException, ResourceNotFoundException
from utils.logger import logger

router = APIRouter()

@router.get("/", response_model=UserResponse)
async def get_users(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_USERS)),
    role: Optional[UserRole] = Query(None)
):
    """
    List user profiles, optionally filtered by role
    """
    query = select(User).order_by(User.created_at)
    if role:
        query = query.filter(User.role == role)

    result = await db.execute(query)
    users = result.scalars().all()

    return UserResponse(
        success=True,
        message="Users retrieved successfully",
        data={"users": [user.to_dict() for user in users]}
    )

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor_by_capability(Capability.MANAGE_USERS))
):
    """
    Assign a role, rename, (de)activate or link a profile to a partner
    """
    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundException("User")

    update_data = {
        field: value
        for field, value in user_update.model_dump(exclude_unset=True).items()
        if value is not None or field == "partner_id"
    }

    if user.id == actor.user_id:
        if update_data.get("active") is False:
            raise InvalidStatusTransitionException("You cannot deactivate your own account")
        if "role" in update_data and update_data["role"] != UserRole.DIRECTOR:
            raise InvalidStatusTransitionException("You cannot change your own role")

    if "partner_id" in update_data and not update_data["partner_id"]:
        update_data["partner_id"] = None
    if update_data.get("partner_id"):
        partner = await db.get(Partner, update_data["partner_id"])
        if not partner:
            raise ResourceNotFoundException("Partner")

    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    logger.info(f"USERS: {actor.name} updated {user.email} ({', '.join(update_data) or 'no changes'})")
    return UserResponse(
        success=True,
        message="User updated successfully",
        data=user.to_dict()
    )
