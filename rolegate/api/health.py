"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rolegate.api.deps import get_context, get_db
from rolegate.core.context import AppContext
from rolegate.core.database import check_db_connected
from rolegate.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    context: Annotated[AppContext, Depends(get_context)],
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    """Return service health status and database connectivity."""
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(
        status="ok",
        environment=context.settings.APP_ENV,
        database=db_status,
    )
