import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tacom.core.config import settings
from tacom.core.logging import configure_logging
from tacom.core.exceptions import register_exception_handlers
from tacom.core.database import AsyncSessionLocal, init_db
from tacom.middleware import CorrelationIdMiddleware
from tacom.services.movement_service import load_movement_context

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# Middleware: correlation id
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route imports
from tacom.api.health import router as health_router
from tacom.api.v1 import companies as v1_companies
from tacom.api.v1 import equipment as v1_equipment
from tacom.api.v1 import catalog as v1_catalog
from tacom.api.v1 import movements as v1_movements
from tacom.api.v1 import reports as v1_reports
from tacom.api.v1 import fleet as v1_fleet

# Register routers
app.include_router(health_router, prefix="/api", tags=["health"])

# v1 API routes
app.include_router(v1_companies.router, prefix="/api/v1", tags=["companies"])
app.include_router(v1_equipment.router, prefix="/api/v1", tags=["equipment"])
app.include_router(v1_catalog.router, prefix="/api/v1", tags=["catalog"])
app.include_router(v1_movements.router, prefix="/api/v1", tags=["movements"])
app.include_router(v1_reports.router, prefix="/api/v1", tags=["reports"])
app.include_router(v1_fleet.router, prefix="/api/v1", tags=["fleet"])


# Exception handlers
register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    logger.info("Starting app", extra={"app": settings.APP_NAME})

    if settings.CREATE_TABLES_ON_START:
        await init_db()

    # company roles are refreshed again whenever a company changes
    async with AsyncSessionLocal() as session:
        app.state.movement_context = await load_movement_context(session)


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Shutting down")
