from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from core.database import get_db
from core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from models.user import User, UserRole
from schemas.user import UserRegister, TokenData
from schemas.responses import TokenResponse, UserResponse
from exceptions import AuthenticationFailedException, DuplicateResourceException
from utils.id_generator import generate_id, USER_PREFIX
from utils.logger import logger

router = APIRouter()

def _token_claims(user: User) -> dict:
    return {"sub": user.id, "role": getattr(user.role, "value", user.role)}

@router.post("/register", response_model=UserResponse)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account. New accounts wait as ``pending`` until a director
    assigns a role; the very first account becomes the director.
    """
    email = user_data.email.strip().lower()
    result = await db.execute(select(User).filter(User.email == email))
    if result.scalar_one_or_none():
        raise DuplicateResourceException("Email already registered")

    user_count = (await db.execute(select(func.count(User.id)))).scalar_one()

    user = User(
        id=generate_id(USER_PREFIX),
        name=user_data.name,
        email=email,
        password_hash=get_password_hash(user_data.password),
        role=UserRole.DIRECTOR if user_count == 0 else UserRole.PENDING,
        active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"AUTH: registered {user.email} as {user.role.value}")
    return UserResponse(
        success=True,
        message="Account created",
        data=user.to_dict()
    )

@router.post("/login", response_model=TokenResponse)
async def login(
    email: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate user and return JWT tokens
    """
    result = await db.execute(
        select(User).filter(User.email == email.strip().lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"AUTH: failed login for {email}")
        raise AuthenticationFailedException("Incorrect email or password")

    if not user.active:
        raise AuthenticationFailedException("Inactive user account")

    return TokenResponse(
        success=True,
        message="Login successful",
        data={
            "access_token": create_access_token(_token_claims(user)),
            "refresh_token": create_refresh_token(_token_claims(user)),
            "token_type": "bearer",
            "user": user.to_dict(),
        }
    )

@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    token_data: TokenData,
    db: AsyncSession = Depends(get_db)
):
    """
    Refresh access token using refresh token
    """
    user_id = decode_token(token_data.refresh_token, token_type="refresh")

    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or not user.active:
        raise AuthenticationFailedException("Invalid token")

    return TokenResponse(
        success=True,
        message="Token refreshed successfully",
        data={
            "access_token": create_access_token(_token_claims(user)),
            "token_type": "bearer"
        }
    )

@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    """Profile of the caller, including pending and inactive accounts."""
    return UserResponse(
        success=True,
        message="Profile retrieved successfully",
        data=current_user.to_dict()
    )
