"""
===============================================================================
CRC CARD — router.py (root JSON router)
===============================================================================

Responsibilities:
  - Compose the per-resource routers into one router, mounted under /api by
    api/main.py.
===============================================================================
"""

from fastapi import APIRouter

from .routers.estates import router as estates_router
from .routers.invoices import router as invoices_router
from .routers.records import router as records_router
from .routers.rent import router as rent_router
from .routers.utilities import router as utilities_router

router = APIRouter()
router.include_router(estates_router)
router.include_router(records_router)
router.include_router(invoices_router)
router.include_router(rent_router)
router.include_router(utilities_router)

__all__ = ["router"]
