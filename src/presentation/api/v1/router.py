from fastapi import APIRouter

from .health import health_router
from .installments import installments_router
from .orders import orders_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(orders_router, tags=["Orders"])
router.include_router(installments_router, tags=["Installments"])
