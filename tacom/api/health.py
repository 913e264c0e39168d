import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tacom.core.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "ok"
    database: str = "ok"


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(session: AsyncSession = Depends(get_session)):
    """Liveness plus a round trip to the database."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database unreachable", exc_info=True)
        return HealthResponse(status="degraded", database="unreachable")
    return HealthResponse()
