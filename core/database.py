from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from utils.logger import logger

# Create async engine
def create_engine():
    # Import settings dynamically to ensure latest values
    from core.config import settings

    connect_args = {}
    if "sqlite" in settings.DATABASE_URL:
        # Allow the connection to be used from the event loop thread
        connect_args["check_same_thread"] = False
    elif "neon.tech" in settings.DATABASE_URL:
        # Hosted Postgres requires SSL
        connect_args["ssl"] = "require"

    kwargs = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }
    if settings.DEBUG or "sqlite" in settings.DATABASE_URL:
        kwargs["poolclass"] = NullPool
    else:
        kwargs["pool_recycle"] = 300

    return create_async_engine(settings.DATABASE_URL, **kwargs)

# Create async session maker
def get_session_local(bind=None):
    return async_sessionmaker(
        bind or create_engine(),
        class_=AsyncSession,
        expire_on_commit=False
    )

# Base class for declarative models
class Base(DeclarativeBase):
    pass

# Global variables to hold engine and session maker
engine = None
AsyncSessionLocal = None

def init_database():
    global engine, AsyncSessionLocal
    engine = create_engine()
    AsyncSessionLocal = get_session_local(engine)
    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")

async def create_tables():
    """Create all tables registered on Base (development and tests)."""
    # Register every model on the metadata
    import models  # noqa: F401

    if engine is None:
        init_database()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def dispose_database():
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None

# Dependency to get DB session
async def get_db():
    if AsyncSessionLocal is None:
        init_database()
    async with AsyncSessionLocal() as session:
        yield session
