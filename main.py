from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from core.config import settings
from core import database
from middleware.cors_middleware import CORSMiddleware
from middleware.logging_middleware import LoggingMiddleware
from services.ledger_store import LedgerStore
from services.seed import seed_cost_types
from api.v1.routers import (
    auth,
    users,
    inventory,
    sales,
    partners,
    reports,
    catalogs,
    contacts,
    proxy,
)
from utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    database.init_database()
    if settings.AUTO_CREATE_TABLES:
        await database.create_tables()
        async with database.AsyncSessionLocal() as db:
            await seed_cost_types(db, settings.DEFAULT_COST_TYPES)

    # One writer lock per running application
    app.state.ledger_store = LedgerStore()
    logger.info(f"{settings.APP_NAME} started")

    yield

    await database.dispose_database()
    logger.info(f"{settings.APP_NAME} stopped")

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Back office for a watch-trading business: inventory, sales and the partner profit ledger",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=settings.BACKEND_CORS_ORIGINS)

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
    app.include_router(inventory.router, prefix="/api/v1/inventory", tags=["Inventory"])
    app.include_router(sales.router, prefix="/api/v1/sales", tags=["Sales"])
    app.include_router(partners.router, prefix="/api/v1/partners", tags=["Partners"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
    app.include_router(catalogs.router, prefix="/api/v1/catalogs", tags=["Catalogs"])
    app.include_router(contacts.router, prefix="/api/v1/contacts", tags=["Contacts"])
    app.include_router(proxy.router, prefix="/api", tags=["Proxies"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "app": settings.APP_NAME}

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
