"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from src import __version__
from src.core.dependencies import UnitOfWorkDep

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    database: str = "ok"
    version: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Service status, including whether the database answers.",
)
async def health_check(uow: UnitOfWorkDep) -> HealthResponse:
    if await uow.ping():
        return HealthResponse(version=__version__)
    return HealthResponse(status="degraded", database="unavailable", version=__version__)
