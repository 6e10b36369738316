from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from core.config import settings
from core.database import get_db
from models.user import User
from business_logic.permissions import Actor, Capability, require_capability
from exceptions import AuthenticationFailedException, InsufficientPermissionsException

ALGORITHM = "HS256"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.HASH_ROUNDS)

# JWT scheme for dependency injection
security = HTTPBearer()

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate a hash for a plain password."""
    return pwd_context.hash(password)

def _encode(data: dict, expires_delta: timedelta, token_type: str) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    return _encode(
        data,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
    )

def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT refresh token."""
    return _encode(
        data,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        "refresh",
    )

def decode_token(token: str, token_type: str = "access") -> str:
    """Return the user id carried by ``token``; raise 401 when it is unusable."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        raise AuthenticationFailedException()

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != token_type:
        raise AuthenticationFailedException()
    return user_id

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get the current authenticated user from JWT token."""
    user_id = decode_token(credentials.credentials)

    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationFailedException()
    return user

def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Get the current active user."""
    if not current_user.active:
        raise InsufficientPermissionsException("Inactive user")
    return current_user

def get_current_actor(current_user: User = Depends(get_current_active_user)) -> Actor:
    """The caller as the capability layer sees it."""
    return Actor.from_user(current_user)

def get_current_actor_by_capability(capability: Capability):
    """Dependency to get the current actor with a specific capability check."""
    def capability_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        return require_capability(actor, capability)
    return capability_checker
